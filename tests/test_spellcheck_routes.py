"""
Integration tests for spell-check and dictionary endpoints.
"""
import pytest
from httpx import AsyncClient

from spellcheck_service.main import app


async def select(client: AsyncClient, languages, dictionaries):
    """Change the selection and wait for the background reload."""
    response = await client.put("/api/v1/dictionaries/selected", json={"languages": languages})
    await dictionaries.drain()
    return response


class TestCheckEndpoints:
    """Tests for /api/v1/spellcheck."""

    @pytest.mark.asyncio
    async def test_check_correct_term(self, client: AsyncClient):
        response = await client.post("/api/v1/spellcheck/check", json={"term": "hello"})

        assert response.status_code == 200
        data = response.json()
        assert data["term"] == "hello"
        assert data["status"] == "correct"
        assert data["generation"] == 1

    @pytest.mark.asyncio
    async def test_check_affixed_and_capitalized_terms(self, client: AsyncClient):
        for term in ("unwalked", "Worlds", "LONDON"):
            response = await client.post("/api/v1/spellcheck/check", json={"term": term})
            assert response.json()["status"] == "correct", term

    @pytest.mark.asyncio
    async def test_check_incorrect_term(self, client: AsyncClient):
        response = await client.post("/api/v1/spellcheck/check", json={"term": "helllo"})

        assert response.status_code == 200
        assert response.json()["status"] == "incorrect"

    @pytest.mark.asyncio
    async def test_check_empty_term_rejected(self, client: AsyncClient):
        response = await client.post("/api/v1/spellcheck/check", json={"term": ""})

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_suggest(self, client: AsyncClient):
        response = await client.post("/api/v1/spellcheck/suggest", json={"term": "helllo"})

        assert response.status_code == 200
        data = response.json()
        assert data["suggestions"] == ["hello"]
        assert data["generation"] == 1

    @pytest.mark.asyncio
    async def test_suggest_correct_term_is_empty(self, client: AsyncClient):
        response = await client.post("/api/v1/spellcheck/suggest", json={"term": "world"})

        assert response.json()["suggestions"] == []

    @pytest.mark.asyncio
    async def test_check_text(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/spellcheck/text",
            json={"text": "Hello wrld, hello world. wrld!"}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["ready"] is True
        assert data["issues"] == [{"word": "wrld", "suggestions": ["world"]}]

    @pytest.mark.asyncio
    async def test_not_ready_while_selection_unsatisfied(self, client: AsyncClient, live_dictionary_set):
        await select(client, ["en_GB", "fr_FR"], live_dictionary_set)

        check = await client.post("/api/v1/spellcheck/check", json={"term": "helllo"})
        suggest = await client.post("/api/v1/spellcheck/suggest", json={"term": "helllo"})
        text = await client.post("/api/v1/spellcheck/text", json={"text": "helllo wrld"})

        assert check.json()["status"] == "not-ready"
        assert suggest.json()["suggestions"] == []
        assert text.json() == {"ready": False, "issues": [], "generation": 2}

    @pytest.mark.asyncio
    async def test_service_unavailable_without_dictionary_set(self, client: AsyncClient):
        app.state.dictionary_set = None

        response = await client.post("/api/v1/spellcheck/check", json={"term": "hello"})

        assert response.status_code == 503


class TestDictionaryEndpoints:
    """Tests for /api/v1/dictionaries."""

    @pytest.mark.asyncio
    async def test_list_dictionaries(self, client: AsyncClient, dictionary_dir):
        response = await client.get("/api/v1/dictionaries")

        assert response.status_code == 200
        data = response.json()
        assert data["selected"] == ["en_GB"]
        assert data["available"] == ["de_DE", "en_GB"]
        assert data["ready"] is True
        assert data["generation"] == 1
        assert len(data["loaded"]) == 1

        loaded = data["loaded"][0]
        assert loaded["language"] == "en_GB"
        assert loaded["word_count"] == 13
        assert loaded["aff_path"] == str(dictionary_dir / "en_GB" / "en_GB.aff")

    @pytest.mark.asyncio
    async def test_select_additional_dictionary(self, client: AsyncClient, live_dictionary_set):
        response = await select(client, ["en_GB", "de-de"], live_dictionary_set)

        assert response.status_code == 202
        assert response.json() == {"selected": ["en_GB", "de_DE"], "changed": True}

        listing = (await client.get("/api/v1/dictionaries")).json()
        assert [entry["language"] for entry in listing["loaded"]] == ["en_GB", "de_DE"]
        assert listing["ready"] is True
        assert listing["generation"] == 2

        # Either dictionary may accept a term
        check = await client.post("/api/v1/spellcheck/check", json={"term": "welten"})
        assert check.json()["status"] == "correct"
        assert check.json()["generation"] == 2

    @pytest.mark.asyncio
    async def test_suggestions_from_all_dictionaries(self, client: AsyncClient, live_dictionary_set):
        await select(client, ["en_GB", "de_DE"], live_dictionary_set)

        response = await client.post("/api/v1/spellcheck/suggest", json={"term": "wrld"})
        assert response.json()["suggestions"] == ["world", "welt"]

    @pytest.mark.asyncio
    async def test_deselect_dictionary(self, client: AsyncClient, live_dictionary_set):
        await select(client, ["de_DE"], live_dictionary_set)

        listing = (await client.get("/api/v1/dictionaries")).json()
        assert [entry["language"] for entry in listing["loaded"]] == ["de_DE"]

        check = await client.post("/api/v1/spellcheck/check", json={"term": "hello"})
        assert check.json()["status"] == "incorrect"

    @pytest.mark.asyncio
    async def test_empty_selection_accepts_everything(self, client: AsyncClient, live_dictionary_set):
        await select(client, [], live_dictionary_set)

        check = await client.post("/api/v1/spellcheck/check", json={"term": "qwxz"})
        assert check.json()["status"] == "correct"

    @pytest.mark.asyncio
    async def test_unchanged_selection(self, client: AsyncClient, live_dictionary_set):
        response = await select(client, ["en-GB"], live_dictionary_set)

        assert response.status_code == 202
        assert response.json() == {"selected": ["en_GB"], "changed": False}
        assert live_dictionary_set.generation == 1

    @pytest.mark.asyncio
    async def test_invalid_language_code(self, client: AsyncClient):
        response = await client.put(
            "/api/v1/dictionaries/selected",
            json={"languages": ["en_GB", "english"]}
        )

        assert response.status_code == 422
        assert "english" in response.text

    @pytest.mark.asyncio
    async def test_reload_without_changes(self, client: AsyncClient, live_dictionary_set):
        response = await client.post("/api/v1/dictionaries/reload")
        await live_dictionary_set.drain()

        assert response.status_code == 202
        assert response.json() == {"scheduled": True}
        assert live_dictionary_set.generation == 1

    @pytest.mark.asyncio
    async def test_dictionary_status(self, client: AsyncClient):
        loaded = await client.get("/api/v1/dictionaries/en-gb")
        missing = await client.get("/api/v1/dictionaries/de_DE")

        assert loaded.json() == {"language": "en_GB", "loaded": True}
        assert missing.json() == {"language": "de_DE", "loaded": False}

    @pytest.mark.asyncio
    async def test_request_id_header(self, client: AsyncClient):
        response = await client.get("/api/v1/dictionaries", headers={"X-Request-ID": "abc-123"})

        assert response.headers["X-Request-ID"] == "abc-123"

"""
Integration tests for health endpoint and application lifespan.
"""
import pytest
from httpx import AsyncClient
from datetime import datetime

from spellcheck_service.main import app


@pytest.mark.asyncio
async def test_health_check_success(client: AsyncClient):
    """Test health check endpoint returns healthy status."""
    response = await client.get("/health")

    assert response.status_code == 200

    data = response.json()
    assert data["status"] == "healthy"
    assert data["dictionaries_loaded"] == 1
    assert data["ready"] is True


@pytest.mark.asyncio
async def test_health_check_response_format(client: AsyncClient):
    """Test that health check response has correct format."""
    response = await client.get("/health")

    assert response.status_code == 200

    data = response.json()

    # Check all required fields are present
    required_fields = ["status", "dictionaries_loaded", "ready", "timestamp"]
    for field in required_fields:
        assert field in data, f"Missing required field: {field}"

    assert isinstance(data["status"], str)
    assert isinstance(data["dictionaries_loaded"], int)
    assert isinstance(data["timestamp"], str)


@pytest.mark.asyncio
async def test_health_check_timestamp_format(client: AsyncClient):
    """Test that timestamp is in ISO format."""
    response = await client.get("/health")

    data = response.json()

    # Should be ISO 8601 format
    try:
        parsed_time = datetime.fromisoformat(data["timestamp"].replace("Z", "+00:00"))
        now = datetime.now(parsed_time.tzinfo)
        time_diff = abs((now - parsed_time).total_seconds())
        assert time_diff < 60, "Timestamp is not recent"
    except ValueError:
        pytest.fail("Invalid timestamp format in response")


@pytest.mark.asyncio
async def test_health_check_loading(client: AsyncClient, live_dictionary_set):
    """Test health reports loading while a selected dictionary is missing."""
    await client.put("/api/v1/dictionaries/selected", json={"languages": ["en_GB", "sl_SI"]})
    await live_dictionary_set.drain()

    response = await client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "loading"
    assert data["dictionaries_loaded"] == 1
    assert data["ready"] is False


@pytest.mark.asyncio
async def test_health_check_spellcheck_disabled(client: AsyncClient):
    """Test a service without dictionaries is healthy."""
    app.state.dictionary_set = None

    response = await client.get("/health")

    data = response.json()
    assert data["status"] == "healthy"
    assert data["dictionaries_loaded"] == 0
    assert data["ready"] is True


@pytest.mark.asyncio
async def test_health_check_content_type(client: AsyncClient):
    """Test that health check returns JSON content type."""
    response = await client.get("/health")

    assert response.status_code == 200
    assert "application/json" in response.headers["content-type"]


@pytest.mark.asyncio
async def test_lifespan_creates_and_releases_services():
    """Test startup wires the dictionary set and shutdown clears it."""
    async with app.router.lifespan_context(app):
        dictionary_set = app.state.dictionary_set

        assert dictionary_set is not None
        assert app.state.config_store is dictionary_set.config
        assert app.state.dictionary_resource is dictionary_set.resources

        await dictionary_set.drain()
        # Test environment points at a missing dictionary directory
        assert dictionary_set.get_loaded() == []
        assert dictionary_set.is_ready() is False

    assert app.state.dictionary_set is None
    assert app.state.config_store is None

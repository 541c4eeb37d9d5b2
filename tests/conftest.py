"""
Pytest configuration and fixtures for spell-check service tests.
"""
import os
from pathlib import Path
from typing import AsyncGenerator, Dict, Iterable, List, Optional

import pytest
from httpx import AsyncClient, ASGITransport

# Keep startup quiet and deterministic before Settings is imported
os.environ.setdefault("SPELLCHECK_RELOAD_DELAY_SECONDS", "0")
os.environ.setdefault("SPELLCHECK_DICTIONARY_PATHS", "/nonexistent/dictionaries")

from spellcheck_service.main import app
from spellcheck_service.services.config_store import SELECTED_DICTS_KEY, ConfigStore
from spellcheck_service.services.dictionary_resource import (
    DictionaryMatch,
    DictionaryResource,
    MatchStatus,
    ReadError,
)
from spellcheck_service.services.dictionary_set import DictionarySet
from spellcheck_service.services.spellcheck_base import SpellChecker


EN_GB_AFF = """SET UTF-8
TRY esianrtolcdugmphbyfvkwz

# plural
SFX S Y 1
SFX S 0 s .

SFX D Y 2
SFX D 0 d e
SFX D 0 ed [^e]

PFX U Y 1
PFX U 0 un .
"""

EN_GB_DIC = """6
hello/S
world/S
walk/DU
bake/D
colour/S
London
"""

DE_DE_AFF = """SET UTF-8

SFX N Y 1
SFX N 0 en .
"""

DE_DE_DIC = """3
hallo
welt/N
straße
"""


def write_dictionary(root: Path, code: str, aff: str, dic: str) -> Path:
    """Write a Hunspell pair in the <root>/<code>/<code>.{aff,dic} layout."""
    folder = root / code
    folder.mkdir(parents=True, exist_ok=True)
    (folder / f"{code}.aff").write_text(aff, encoding="utf-8")
    (folder / f"{code}.dic").write_text(dic, encoding="utf-8")
    return folder


class FakeChecker(SpellChecker):
    """In-memory checker with canned suggestions."""

    def __init__(self, language: str, words: Iterable[str], suggestions: Optional[Dict[str, List[str]]] = None):
        self._language = language
        self._words = set(words)
        self._suggestions = suggestions or {}

    def correct(self, term: str) -> bool:
        return term in self._words

    def suggest(self, term: str) -> List[str]:
        return list(self._suggestions.get(term, []))

    def get_language(self) -> str:
        return self._language

    def word_count(self) -> int:
        return len(self._words)


class FakeResources(DictionaryResource):
    """Resolver that reports an exact match for a fixed set of codes."""

    def __init__(self, exact: Iterable[str] = (), fuzzy: Optional[Dict[str, str]] = None):
        super().__init__(search_paths=[])
        self.exact = set(exact)
        self.fuzzy = fuzzy or {}

    def resolve(self, code: str) -> DictionaryMatch:
        if code in self.exact:
            return DictionaryMatch(MatchStatus.EXACT, code, Path(f"{code}.aff"), Path(f"{code}.dic"))
        if code in self.fuzzy:
            other = self.fuzzy[code]
            return DictionaryMatch(MatchStatus.FUZZY, other, Path(f"{other}.aff"), Path(f"{other}.dic"))
        return DictionaryMatch(MatchStatus.NONE)

    def available_languages(self) -> List[str]:
        return sorted(self.exact)


class FakeReader:
    """Async payload reader failing for selected file names."""

    def __init__(self, missing: Iterable[str] = ()):
        self.missing = set(missing)
        self.calls: List[str] = []

    async def __call__(self, path: Path) -> bytes:
        self.calls.append(path.name)
        if path.name in self.missing:
            raise ReadError(path, "No such file or directory")
        return path.name.encode("utf-8")


class CheckerFactory:
    """Checker factory returning prepared checkers and recording calls."""

    def __init__(self, checkers: Dict[str, SpellChecker]):
        self.checkers = checkers
        self.calls: List[str] = []

    def __call__(self, language: str, affix: bytes, dictionary: bytes) -> SpellChecker:
        self.calls.append(language)
        return self.checkers[language]


@pytest.fixture
def english_checker() -> FakeChecker:
    return FakeChecker(
        "en_GB",
        ["hello", "world", "colour"],
        {"helllo": ["hello", "hell", "hullo"], "wrld": ["world"], "Kindergarten": ["Kinder garten"]},
    )


@pytest.fixture
def german_checker() -> FakeChecker:
    return FakeChecker(
        "de_DE",
        ["hallo", "welt", "Kindergarten"],
        {"helllo": ["hallo"], "wrld": ["welt"]},
    )


@pytest.fixture
def config_store() -> ConfigStore:
    return ConfigStore({SELECTED_DICTS_KEY: []})


@pytest.fixture
def checker_factory(english_checker, german_checker) -> CheckerFactory:
    return CheckerFactory({"en_GB": english_checker, "de_DE": german_checker})


@pytest.fixture
def fake_reader() -> FakeReader:
    return FakeReader()


@pytest.fixture
def dictionary_set(config_store, checker_factory, fake_reader) -> DictionarySet:
    """Dictionary set over fake collaborators; en_GB and de_DE resolve exactly."""
    return DictionarySet(
        config_store,
        FakeResources(exact={"en_GB", "de_DE"}),
        checker_factory=checker_factory,
        reader=fake_reader,
        min_word_length=2,
        suggestion_count=5,
    )


@pytest.fixture
def dictionary_dir(tmp_path) -> Path:
    """Directory holding small real en_GB and de_DE Hunspell dictionaries."""
    root = tmp_path / "dictionaries"
    write_dictionary(root, "en_GB", EN_GB_AFF, EN_GB_DIC)
    write_dictionary(root, "de_DE", DE_DE_AFF, DE_DE_DIC)
    return root


@pytest.fixture
async def live_dictionary_set(dictionary_dir) -> AsyncGenerator[DictionarySet, None]:
    """Dictionary set over real files with en_GB selected and loaded."""
    store = ConfigStore({SELECTED_DICTS_KEY: ["en_GB"]})
    dictionaries = DictionarySet(store, DictionaryResource([str(dictionary_dir)]))
    await dictionaries.reload()
    yield dictionaries
    await dictionaries.shutdown()


@pytest.fixture
async def client(live_dictionary_set: DictionarySet) -> AsyncGenerator[AsyncClient, None]:
    """
    Create an async test client for the FastAPI application.

    ASGITransport does not run the lifespan, so the services it would create
    are placed on app.state directly.
    """
    app.state.dictionary_set = live_dictionary_set
    app.state.config_store = live_dictionary_set.config
    app.state.dictionary_resource = live_dictionary_set.resources

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        yield ac

    app.state.dictionary_set = None
    app.state.config_store = None
    app.state.dictionary_resource = None

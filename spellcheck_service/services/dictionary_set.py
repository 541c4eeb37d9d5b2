"""
Aggregated spell checking over a dynamic set of language dictionaries.

The DictionarySet keeps one checker per loaded language, answers queries
against the union of all of them, and reconciles the loaded languages with
the selection held in the ConfigStore.
"""
import asyncio
import re
import time
from collections import defaultdict
from dataclasses import dataclass
from pathlib import Path
from typing import Awaitable, Callable, Dict, List, Optional, Set

from spellcheck_service.config import settings
from spellcheck_service.schemas.spellcheck import CheckStatus, SpellingIssue
from spellcheck_service.services.config_store import SELECTED_DICTS_KEY, UPDATE_EVENT, ConfigStore
from spellcheck_service.services.dictionary_resource import (
    DictionaryResource,
    MatchStatus,
    ReadError,
    read_payload,
)
from spellcheck_service.services.spellcheck_base import MalformedDictionaryError, SpellChecker
from spellcheck_service.services.spellcheck_hunspell import HunspellSpellChecker
from spellcheck_service.utils.language_code import normalize_language_code, unique_codes
from spellcheck_service.utils.logger import get_logger

logger = get_logger("services.dictionary_set")

# Letters with optional internal apostrophes ("don't", "l'été")
WORD_PATTERN = re.compile(r"[^\W\d_]+(?:['’][^\W\d_]+)*")

CheckerFactory = Callable[[str, bytes, bytes], SpellChecker]
PayloadReader = Callable[[Path], Awaitable[bytes]]
Listener = Callable[..., None]


@dataclass
class LoadedDictionary:
    """A successfully loaded language and the checker that owns its data."""

    language: str
    checker: SpellChecker
    aff_path: Optional[Path] = None
    dic_path: Optional[Path] = None
    load_time_seconds: float = 0.0


class DictionarySet:
    """
    Spell checker over every currently loaded dictionary.

    Events:
        update(loaded_codes): after every reload that changed the loaded set
        invalidate(): after every such reload; cached verdicts are stale

    Usage:
        dictionaries = DictionarySet(config_store, DictionaryResource())
        await dictionaries.reload()
        dictionaries.check("hello")  # CheckStatus.CORRECT
    """

    def __init__(
        self,
        config: ConfigStore,
        resources: DictionaryResource,
        checker_factory: Optional[CheckerFactory] = None,
        reader: Optional[PayloadReader] = None,
        min_word_length: Optional[int] = None,
        suggestion_count: Optional[int] = None,
    ):
        """
        Initialize the dictionary set and subscribe to configuration changes.

        Args:
            config: Source of the selected language codes
            resources: Resolver for dictionary files
            checker_factory: Builds a checker from (language, affix, dictionary) bytes
            reader: Reads a dictionary payload, raising ReadError on failure
            min_word_length: Text checking skips shorter words (default from config)
            suggestion_count: Max suggestions per text issue (default from config)
        """
        self._config = config
        self._resources = resources
        self._checker_factory = checker_factory or HunspellSpellChecker.from_payloads
        self._reader = reader or read_payload
        self._min_word_length = (
            min_word_length if min_word_length is not None else settings.SPELLCHECK_MIN_WORD_LENGTH
        )
        self._suggestion_count = (
            suggestion_count if suggestion_count is not None else settings.SPELLCHECK_SUGGESTION_COUNT
        )

        self._loaded: Dict[str, LoadedDictionary] = {}
        self._reload_lock = asyncio.Lock()
        self._pending: Set[asyncio.Task] = set()
        self._listeners: Dict[str, List[Listener]] = defaultdict(list)
        self._generation = 0
        # Selection handled by the last completed reconciliation; skipped codes stay skipped until it changes
        self._reconciled: Optional[Set[str]] = None

        self._config.on(UPDATE_EVENT, self._on_config_update)

    # ------------------------------------------------------------------
    # Events

    def on(self, event: str, listener: Listener) -> None:
        """Register ``listener`` for ``event`` ('update' or 'invalidate')."""
        self._listeners[event].append(listener)

    def off(self, event: str, listener: Listener) -> None:
        """Remove a listener; unknown listeners are ignored."""
        listeners = self._listeners.get(event, [])
        if listener in listeners:
            listeners.remove(listener)

    def _emit(self, event: str, *args) -> None:
        for listener in list(self._listeners.get(event, [])):
            try:
                listener(*args)
            except Exception as e:
                logger.error(
                    "Dictionary listener failed",
                    event=event,
                    error=str(e),
                    exc_info=True,
                )

    def _on_config_update(self, key: str) -> None:
        if key != SELECTED_DICTS_KEY:
            return
        try:
            self.schedule_reload()
        except RuntimeError:
            logger.warning("Selected dictionaries changed without a running event loop; reload deferred")

    # ------------------------------------------------------------------
    # Reconciliation

    def _desired(self) -> List[str]:
        codes = self._config.get(SELECTED_DICTS_KEY) or []
        return unique_codes(normalize_language_code(code) for code in codes)

    async def reload(self) -> None:
        """
        Reconcile loaded dictionaries with the selected language codes.

        Unloads languages that are no longer selected and loads newly selected
        ones. Languages that cannot be resolved exactly, read or parsed are
        skipped; this method never raises for a single language. Skipped
        languages are not retried until the selection changes.
        """
        async with self._reload_lock:
            desired = self._desired()
            desired_set = set(desired)
            if desired_set == set(self._loaded) or desired_set == self._reconciled:
                logger.debug("Dictionaries already up to date", languages=desired)
                return

            to_unload = [code for code in self._loaded if code not in desired_set]
            to_load = [code for code in desired if code not in self._loaded]

            for code in to_unload:
                del self._loaded[code]
                logger.info("Dictionary unloaded", language=code)

            for code in to_load:
                entry = await self._load_dictionary(code)
                if entry is not None:
                    self._loaded[code] = entry

            loaded = self.get_loaded()
            skipped = [code for code in to_load if code not in self._loaded]
            logger.info(
                "Dictionaries reloaded",
                loaded=loaded,
                unloaded=to_unload,
                skipped=skipped,
            )

            self._reconciled = desired_set
            self._emit("update", loaded)
            self._generation += 1
            self._emit("invalidate")

    async def _load_dictionary(self, code: str) -> Optional[LoadedDictionary]:
        """Load one language, returning None when it has to be skipped."""
        try:
            match = self._resources.resolve(code)
            if match.status != MatchStatus.EXACT:
                logger.info(
                    "No exact dictionary match, skipping",
                    language=code,
                    status=match.status.value,
                    candidate=match.language,
                )
                return None

            affix = await self._reader(match.aff_path)
            dictionary = await self._reader(match.dic_path)

            start_time = time.time()
            # Parsing is CPU-bound; keep the event loop answering queries
            checker = await asyncio.to_thread(self._checker_factory, code, affix, dictionary)
            load_time = time.time() - start_time

        except ReadError as e:
            logger.warning("Dictionary file unreadable, skipping", language=code, path=str(e.path), error=e.reason)
            return None
        except MalformedDictionaryError as e:
            logger.warning("Dictionary malformed, skipping", language=code, error=str(e))
            return None
        except Exception as e:
            logger.error("Failed to load dictionary, skipping", language=code, error=str(e), exc_info=True)
            return None

        logger.info("Dictionary loaded", language=code, load_time_seconds=round(load_time, 2))
        return LoadedDictionary(
            language=code,
            checker=checker,
            aff_path=match.aff_path,
            dic_path=match.dic_path,
            load_time_seconds=load_time,
        )

    def schedule_reload(self, delay: float = 0.0) -> asyncio.Task:
        """
        Start a reload in the background.

        Args:
            delay: Seconds to wait before reloading

        Returns:
            The scheduled task

        Raises:
            RuntimeError: If no event loop is running
        """
        task = asyncio.get_running_loop().create_task(self._reload_after(delay))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _reload_after(self, delay: float) -> None:
        if delay > 0:
            logger.info("Dictionary load scheduled", delay_seconds=delay)
            await asyncio.sleep(delay)
        await self.reload()

    async def drain(self) -> None:
        """Wait until every scheduled reload has finished."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    async def shutdown(self) -> None:
        """Cancel scheduled reloads, unsubscribe from config and drop all checkers."""
        self._config.off(UPDATE_EVENT, self._on_config_update)
        for task in list(self._pending):
            task.cancel()
        await self.drain()
        self._loaded.clear()
        self._reconciled = None
        logger.info("Dictionary set shut down")

    # ------------------------------------------------------------------
    # Queries

    def is_ready(self) -> bool:
        """True when exactly the selected languages are loaded."""
        return set(self._desired()) == set(self._loaded)

    def check(self, term: str) -> CheckStatus:
        """
        Check a term against all loaded dictionaries.

        Returns:
            NOT_READY while loaded and selected languages differ, CORRECT when
            no dictionaries are selected or any dictionary accepts the term,
            INCORRECT otherwise
        """
        if not self.is_ready():
            return CheckStatus.NOT_READY

        if not self._loaded:
            return CheckStatus.CORRECT

        for entry in self._loaded.values():
            if entry.checker.correct(term):
                return CheckStatus.CORRECT
        return CheckStatus.INCORRECT

    def suggest(self, term: str) -> List[str]:
        """Concatenate every loaded dictionary's suggestions, in load order."""
        if not self.is_ready() or not self._loaded:
            return []

        suggestions: List[str] = []
        for entry in self._loaded.values():
            suggestions.extend(entry.checker.suggest(term))
        return suggestions

    def check_text(self, text: str) -> List[SpellingIssue]:
        """
        Check running text for spelling issues.

        Args:
            text: Text to check

        Returns:
            One issue per distinct misspelled word, in order of appearance
        """
        if not self.is_ready() or not self._loaded:
            return []

        seen: Set[str] = set()
        issues: List[SpellingIssue] = []
        for word in WORD_PATTERN.findall(text):
            if len(word) < self._min_word_length or word in seen:
                continue
            seen.add(word)
            if self.check(word) == CheckStatus.INCORRECT:
                issues.append(
                    SpellingIssue(word=word, suggestions=self.suggest(word)[: self._suggestion_count])
                )
        return issues

    def get_loaded(self) -> List[str]:
        """Language codes of all loaded dictionaries, in load order."""
        return list(self._loaded)

    def is_loaded(self, code: str) -> bool:
        """Whether the dictionary for ``code`` is loaded."""
        return code in self._loaded

    def get_entries(self) -> List[LoadedDictionary]:
        """Loaded dictionaries, in load order."""
        return list(self._loaded.values())

    @property
    def config(self) -> ConfigStore:
        return self._config

    @property
    def resources(self) -> DictionaryResource:
        return self._resources

    @property
    def generation(self) -> int:
        """Incremented every time cached verdicts become stale."""
        return self._generation

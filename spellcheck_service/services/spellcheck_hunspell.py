"""
Hunspell-format spell checker using SymSpellPy for suggestions.
"""
import time
from typing import Iterable, List, Optional

from symspellpy import SymSpell, Verbosity

from spellcheck_service.config import settings
from spellcheck_service.services.affix import load_word_forms
from spellcheck_service.services.spellcheck_base import MalformedDictionaryError, SpellChecker
from spellcheck_service.utils.logger import get_logger


logger = get_logger("services.spellcheck_hunspell")


class HunspellSpellChecker(SpellChecker):
    """
    Spell checker for one language built from a Hunspell ``.aff``/``.dic`` pair.

    Affix rules are expanded once into the full set of word forms, which is
    then indexed by SymSpell. Membership answers ``correct``; SymSpell's
    symmetric-delete lookup answers ``suggest``.
    """

    def __init__(
        self,
        language: str,
        words: Iterable[str],
        max_edit_distance: Optional[int] = None,
        prefix_length: Optional[int] = None,
        suggestion_count: Optional[int] = None,
    ):
        """
        Initialize the checker from already expanded word forms.

        Args:
            language: Language code this checker serves
            words: Accepted word forms
            max_edit_distance: Maximum edit distance for suggestions (default from config)
            prefix_length: SymSpell optimization parameter (default from config)
            suggestion_count: Maximum suggestions per word (default from config)
        """
        self._language = language
        self._max_edit_distance = (
            max_edit_distance if max_edit_distance is not None else settings.SPELLCHECK_MAX_EDIT_DISTANCE
        )
        self._prefix_length = prefix_length if prefix_length is not None else settings.SPELLCHECK_PREFIX_LENGTH
        self._suggestion_count = (
            suggestion_count if suggestion_count is not None else settings.SPELLCHECK_SUGGESTION_COUNT
        )

        self._symspell = SymSpell(
            max_dictionary_edit_distance=self._max_edit_distance,
            prefix_length=self._prefix_length,
        )

        # No frequency data in Hunspell dictionaries, every form counts once
        for word in words:
            self._symspell.create_dictionary_entry(word, 1)

        if not self._symspell.words:
            raise MalformedDictionaryError(f"No words loaded for {language}")

    @classmethod
    def from_payloads(cls, language: str, affix: bytes, dictionary: bytes, **kwargs) -> "HunspellSpellChecker":
        """
        Build a checker from raw affix and dictionary bytes.

        Args:
            language: Language code
            affix: Contents of the ``.aff`` file
            dictionary: Contents of the ``.dic`` file
            **kwargs: Passed through to the constructor

        Returns:
            Ready-to-use checker

        Raises:
            MalformedDictionaryError: If the payloads cannot be parsed
        """
        start_time = time.time()
        words = load_word_forms(affix, dictionary)
        checker = cls(language, words, **kwargs)

        logger.info(
            "Hunspell dictionary built",
            language=language,
            word_count=checker.word_count(),
            build_time_seconds=round(time.time() - start_time, 2),
        )
        return checker

    def correct(self, term: str) -> bool:
        """Check a word, accepting capitalized and upper-case variants of known forms."""
        words = self._symspell.words
        if term in words:
            return True
        if term.istitle() or term.isupper():
            lowered = term.lower()
            return lowered in words or lowered.capitalize() in words
        return False

    def suggest(self, term: str) -> List[str]:
        """
        Suggest corrections for a misspelled word.

        Args:
            term: Word to correct

        Returns:
            Up to ``suggestion_count`` closest known forms, empty for correct words
        """
        if not term or self.correct(term):
            return []

        capitalized = term[:1].isupper()
        lookup_term = term.lower() if capitalized else term

        suggestions = self._symspell.lookup(
            lookup_term,
            Verbosity.CLOSEST,
            max_edit_distance=self._max_edit_distance,
        )

        terms: List[str] = []
        for suggestion in suggestions:
            if len(terms) >= self._suggestion_count:
                break
            candidate = suggestion.term
            if capitalized:
                candidate = candidate[:1].upper() + candidate[1:]
            if candidate != term and candidate not in terms:
                terms.append(candidate)
        return terms

    def get_language(self) -> str:
        """Get language code."""
        return self._language

    def word_count(self) -> int:
        """Get number of indexed word forms."""
        return len(self._symspell.words)

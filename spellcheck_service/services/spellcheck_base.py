"""
Abstract base class for per-language spell checkers.
"""
from abc import ABC, abstractmethod
from typing import List


class DictionaryError(Exception):
    """Base exception for dictionary loading failures."""
    pass


class MalformedDictionaryError(DictionaryError):
    """Dictionary payload is present but cannot be parsed."""
    pass


class SpellChecker(ABC):
    """
    Abstract base class for a single-language spell checker.

    A checker owns the parsed dictionary data for exactly one language.
    Implementations must answer synchronously.
    """

    @abstractmethod
    def correct(self, term: str) -> bool:
        """
        Check whether a single word is spelled correctly.

        Args:
            term: Word to check

        Returns:
            True if the dictionary accepts the word
        """
        pass

    @abstractmethod
    def suggest(self, term: str) -> List[str]:
        """
        Suggest corrections for a word.

        Args:
            term: Word to find corrections for

        Returns:
            Suggestions ordered by relevance (empty for correct words)
        """
        pass

    @abstractmethod
    def get_language(self) -> str:
        """Get the language code this checker handles (e.g., 'en_GB')."""
        pass

    @abstractmethod
    def word_count(self) -> int:
        """Get the number of word forms the checker knows."""
        pass

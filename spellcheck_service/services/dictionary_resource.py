"""
Dictionary asset resolution and payload reading.

Locates Hunspell ``.aff``/``.dic`` pairs for a language code inside the
configured search paths and reads their bytes.
"""
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import aiofiles

from spellcheck_service.config import settings
from spellcheck_service.services.spellcheck_base import DictionaryError
from spellcheck_service.utils.language_code import base_language, normalize_language_code
from spellcheck_service.utils.logger import get_logger

logger = get_logger("services.dictionary_resource")


class ReadError(DictionaryError):
    """A dictionary payload is missing or unreadable."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot read dictionary file {path}: {reason}")


class MatchStatus(str, Enum):
    """How well an available dictionary matches the requested language code."""
    EXACT = "exact"
    FUZZY = "fuzzy"
    NONE = "none"


@dataclass(frozen=True)
class DictionaryMatch:
    """Result of resolving a language code to dictionary files."""

    status: MatchStatus
    language: Optional[str] = None
    aff_path: Optional[Path] = None
    dic_path: Optional[Path] = None


class DictionaryResource:
    """
    Resolver for dictionary files on disk.

    Supported layouts inside each search path (first path wins per code):
        <root>/<code>/<code>.aff + <root>/<code>/<code>.dic
        <root>/<code>/index.aff  + <root>/<code>/index.dic
        <root>/<code>.aff        + <root>/<code>.dic
    """

    def __init__(self, search_paths: Optional[List[str]] = None):
        """
        Initialize the resolver.

        Args:
            search_paths: Directories to search (default from config)
        """
        paths = search_paths if search_paths is not None else settings.dictionary_paths_list
        self._search_paths = [Path(path) for path in paths]

        logger.info(
            "Dictionary resource initialized",
            search_paths=[str(path) for path in self._search_paths],
        )

    @property
    def search_paths(self) -> List[Path]:
        return list(self._search_paths)

    def resolve(self, code: str) -> DictionaryMatch:
        """
        Resolve a language code to its affix and dictionary paths.

        Args:
            code: Language code (e.g. 'en_GB')

        Returns:
            DictionaryMatch with status EXACT, FUZZY (another region of the
            same language is available) or NONE
        """
        available = self._scan()
        normalized = normalize_language_code(code)

        if normalized in available:
            aff_path, dic_path = available[normalized]
            return DictionaryMatch(MatchStatus.EXACT, normalized, aff_path, dic_path)

        language = base_language(normalized)
        candidates = sorted(c for c in available if base_language(c) == language)
        if candidates:
            candidate = candidates[0]
            aff_path, dic_path = available[candidate]
            logger.debug("Fuzzy dictionary match", requested=code, matched=candidate)
            return DictionaryMatch(MatchStatus.FUZZY, candidate, aff_path, dic_path)

        return DictionaryMatch(MatchStatus.NONE)

    def available_languages(self) -> List[str]:
        """List every language code with a complete dictionary pair."""
        return sorted(self._scan())

    def _scan(self) -> Dict[str, Tuple[Path, Path]]:
        """Map normalized language codes to (aff, dic) paths."""
        found: Dict[str, Tuple[Path, Path]] = {}
        for root in self._search_paths:
            if not root.is_dir():
                logger.debug("Dictionary search path not found", path=str(root))
                continue
            for child in sorted(root.iterdir()):
                pair = self._pair_for(child)
                if pair is None:
                    continue
                code = normalize_language_code(child.stem if child.is_file() else child.name)
                found.setdefault(code, pair)
        return found

    @staticmethod
    def _pair_for(child: Path) -> Optional[Tuple[Path, Path]]:
        if child.is_dir():
            for stem in (child.name, "index"):
                aff_path = child / f"{stem}.aff"
                dic_path = child / f"{stem}.dic"
                if aff_path.is_file() and dic_path.is_file():
                    return aff_path, dic_path
            return None
        if child.suffix == ".aff":
            dic_path = child.with_suffix(".dic")
            if dic_path.is_file():
                return child, dic_path
        return None


async def read_payload(path: Path) -> bytes:
    """
    Read a dictionary payload.

    Args:
        path: File to read

    Returns:
        Raw file contents

    Raises:
        ReadError: If the file is missing or unreadable
    """
    try:
        async with aiofiles.open(path, "rb") as handle:
            return await handle.read()
    except OSError as e:
        raise ReadError(Path(path), e.strerror or str(e)) from e

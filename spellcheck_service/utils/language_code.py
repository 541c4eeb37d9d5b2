"""
Language code normalization and validation for dictionary selection.
"""
import re
from typing import Iterable, List

# Language subtag plus an optional region (ISO 3166 alpha-2 or UN M.49 numeric)
LANGUAGE_CODE_PATTERN = re.compile(r"^[a-z]{2,3}(_[A-Z]{2}|_[0-9]{3})?$")


def normalize_language_code(code: str) -> str:
    """
    Normalize a language code to the ``ll_RR`` form used for dictionary lookup.

    Args:
        code: Language code in any common spelling (e.g. 'en-gb', 'EN_gb')

    Returns:
        Normalized code (e.g. 'en_GB'); unrecognised shapes are returned stripped

    Example:
        >>> normalize_language_code("en-gb")
        'en_GB'
        >>> normalize_language_code("de")
        'de'
    """
    parts = code.strip().replace("-", "_").split("_")
    if len(parts) == 1:
        return parts[0].lower()
    if len(parts) == 2:
        return f"{parts[0].lower()}_{parts[1].upper()}"
    return code.strip()


def validate_language_code(code: str) -> bool:
    """
    Check whether a normalized language code is well-formed.

    Example:
        >>> validate_language_code("en_GB")
        True
        >>> validate_language_code("english")
        False
    """
    return bool(LANGUAGE_CODE_PATTERN.match(code))


def base_language(code: str) -> str:
    """Return the language subtag of a code ('en_GB' -> 'en')."""
    return normalize_language_code(code).split("_", 1)[0]


def unique_codes(codes: Iterable[str]) -> List[str]:
    """De-duplicate codes while keeping their first-seen order."""
    return list(dict.fromkeys(codes))

"""Hunspell affix/dictionary payload parsing and word-form expansion.

Turns the raw bytes of a Hunspell ``.aff``/``.dic`` pair into the flat set of
word forms a dictionary accepts. It covers the constructs that matter for
plain spell checking:

* ``SET`` (payload encoding) and ``FLAG`` (``short``, ``long``, ``num``, ``UTF-8``)
* ``PFX``/``SFX`` groups with strip, add, condition and cross-product
* ``NEEDAFFIX``, ``FORBIDDENWORD`` and ``ONLYINCOMPOUND`` root flags
* ``AF`` flag alias tables

Compounding, continuation classes (``add/FLAGS``) and morphology are ignored.
Anything that cannot be parsed raises :class:`MalformedDictionaryError`.
"""

from __future__ import annotations

import codecs
import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional, Pattern, Set

from spellcheck_service.services.spellcheck_base import MalformedDictionaryError
from spellcheck_service.utils.logger import get_logger

logger = get_logger("services.affix")

DEFAULT_ENCODING = "utf-8"

AffixKind = str  # "PFX" or "SFX"


@dataclass
class AffixEntry:
    """Single strip/add rule of an affix group."""

    strip: str
    add: str
    condition: Pattern[str]

    def apply(self, word: str, kind: AffixKind) -> Optional[str]:
        """Return the derived form, or None when the rule does not apply to ``word``."""

        if not self.condition.search(word):
            return None
        if kind == "SFX":
            if self.strip and not word.endswith(self.strip):
                return None
            stem = word[: -len(self.strip)] if self.strip else word
            return stem + self.add
        if self.strip and not word.startswith(self.strip):
            return None
        stem = word[len(self.strip):] if self.strip else word
        return self.add + stem


@dataclass
class AffixRule:
    """All entries sharing one flag."""

    kind: AffixKind
    flag: str
    cross: bool
    entries: List[AffixEntry] = field(default_factory=list)

    def apply(self, word: str) -> Set[str]:
        results: Set[str] = set()
        for entry in self.entries:
            derived = entry.apply(word, self.kind)
            if derived and derived != word:
                results.add(derived)
        return results


@dataclass
class AffixSet:
    """Parsed ``.aff`` payload."""

    encoding: str = DEFAULT_ENCODING
    flag_type: str = "short"
    prefixes: Dict[str, AffixRule] = field(default_factory=dict)
    suffixes: Dict[str, AffixRule] = field(default_factory=dict)
    need_affix: Optional[str] = None
    forbidden: Optional[str] = None
    only_in_compound: Optional[str] = None
    # AF table; a numeric flag segment N in the .dic names alias N (1-based)
    flag_aliases: List[str] = field(default_factory=list)


@dataclass
class DictionaryEntry:
    """Root word and its affix flags from the ``.dic`` payload."""

    root: str
    flags: Set[str] = field(default_factory=set)


def detect_encoding(affix: bytes) -> str:
    """Return the Python codec named by the affix ``SET`` directive."""

    # SET must appear before any non-ASCII text, so latin-1 is safe for the scan
    for raw in affix.decode("latin-1").splitlines():
        line = _strip_comment(raw)
        if not line.startswith("SET"):
            continue
        parts = line.split()
        if len(parts) < 2:
            break
        name = parts[1].lower()
        if name.startswith("microsoft-"):
            name = name[len("microsoft-"):]
        try:
            return codecs.lookup(name).name
        except LookupError as e:
            raise MalformedDictionaryError(f"Unsupported dictionary encoding: {parts[1]}") from e
    return DEFAULT_ENCODING


def decode_payload(payload: bytes, encoding: str) -> str:
    """Decode a payload, dropping a UTF-8 byte order mark."""

    if encoding == "utf-8":
        encoding = "utf-8-sig"
    try:
        return payload.decode(encoding)
    except UnicodeDecodeError as e:
        raise MalformedDictionaryError(f"Payload is not valid {encoding}: {e}") from e


def parse_affix(text: str, encoding: str = DEFAULT_ENCODING) -> AffixSet:
    """Parse decoded ``.aff`` text."""

    affixes = AffixSet(encoding=encoding)
    lines = iter(text.splitlines())
    alias_header_seen = False

    for raw_line in lines:
        line = _strip_comment(raw_line)
        if not line:
            continue
        parts = line.split()
        keyword = parts[0]

        if keyword == "FLAG" and len(parts) >= 2:
            affixes.flag_type = parts[1].lower()
            continue
        if keyword == "NEEDAFFIX" and len(parts) >= 2:
            affixes.need_affix = parts[1]
            continue
        if keyword == "FORBIDDENWORD" and len(parts) >= 2:
            affixes.forbidden = parts[1]
            continue
        if keyword == "ONLYINCOMPOUND" and len(parts) >= 2:
            affixes.only_in_compound = parts[1]
            continue
        if keyword == "AF" and len(parts) >= 2:
            if not alias_header_seen and parts[1].isdigit():
                alias_header_seen = True
            else:
                affixes.flag_aliases.append(parts[1])
            continue
        if keyword not in {"PFX", "SFX"}:
            continue
        if len(parts) < 4:
            raise MalformedDictionaryError(f"Truncated affix header: {line}")

        flag = parts[1]
        cross = parts[2].upper() == "Y"
        try:
            expected_entries = int(parts[3])
        except ValueError as e:
            raise MalformedDictionaryError(f"Invalid affix entry count: {line}") from e

        entries: List[AffixEntry] = []
        for entry_line in _take_entries(lines, expected_entries):
            entry_parts = entry_line.split()
            if len(entry_parts) < 4 or entry_parts[0] != keyword:
                raise MalformedDictionaryError(f"Malformed affix entry: {entry_line}")
            strip = "" if entry_parts[2] == "0" else entry_parts[2]
            add = entry_parts[3].split("/", 1)[0]
            add = "" if add == "0" else add
            condition = entry_parts[4] if len(entry_parts) > 4 else "."
            entries.append(
                AffixEntry(strip=strip, add=add, condition=_compile_condition(condition, keyword))
            )

        if len(entries) < expected_entries:
            logger.warning(
                "Affix group ended early",
                flag=flag,
                expected=expected_entries,
                found=len(entries),
            )

        rule_map = affixes.prefixes if keyword == "PFX" else affixes.suffixes
        if flag in rule_map:
            rule_map[flag].entries.extend(entries)
            rule_map[flag].cross = rule_map[flag].cross or cross
        else:
            rule_map[flag] = AffixRule(kind=keyword, flag=flag, cross=cross, entries=entries)

    return affixes


def parse_dictionary(text: str, flag_type: str, aliases: Optional[List[str]] = None) -> List[DictionaryEntry]:
    """
    Parse decoded ``.dic`` text into roots and flag sets.

    With an ``AF`` alias table, flag segments are 1-based alias numbers.

    Raises:
        MalformedDictionaryError: If a flag segment names no alias
    """

    entries: List[DictionaryEntry] = []
    first_line = True
    for raw in text.splitlines():
        line = raw.strip()
        if not line:
            continue
        if first_line:
            first_line = False
            if line.isdigit():
                continue

        token = line.split()[0]
        root, flag_segment = _split_token(token)
        if not root:
            continue
        if aliases and flag_segment:
            flag_segment = _resolve_alias(flag_segment, aliases)
        entries.append(DictionaryEntry(root=root, flags=set(_split_flags(flag_segment, flag_type))))

    return entries


def expand_word_forms(entries: Iterable[DictionaryEntry], affixes: AffixSet) -> Set[str]:
    """Expand dictionary roots with their affix rules into every accepted form."""

    vocabulary: Set[str] = set()
    for entry in entries:
        if affixes.forbidden and affixes.forbidden in entry.flags:
            continue
        base = entry.root
        standalone = not (
            (affixes.need_affix and affixes.need_affix in entry.flags)
            or (affixes.only_in_compound and affixes.only_in_compound in entry.flags)
        )
        if standalone:
            vocabulary.add(base)

        prefix_rules = [affixes.prefixes[flag] for flag in entry.flags if flag in affixes.prefixes]
        suffix_rules = [affixes.suffixes[flag] for flag in entry.flags if flag in affixes.suffixes]

        for rule in prefix_rules:
            vocabulary.update(rule.apply(base))

        suffixed: Set[str] = set()
        for rule in suffix_rules:
            suffixed.update(rule.apply(base))
        vocabulary.update(suffixed)

        cross_prefixes = [rule for rule in prefix_rules if rule.cross]
        cross_suffixes = [rule for rule in suffix_rules if rule.cross]
        if cross_prefixes and cross_suffixes:
            for rule in cross_suffixes:
                for form in rule.apply(base):
                    for prefix_rule in cross_prefixes:
                        vocabulary.update(prefix_rule.apply(form))

    return vocabulary


def load_word_forms(affix: bytes, dictionary: bytes) -> Set[str]:
    """
    Build the accepted word forms from a raw ``.aff``/``.dic`` pair.

    Raises:
        MalformedDictionaryError: If either payload cannot be parsed or no words result
    """

    encoding = detect_encoding(affix)
    affixes = parse_affix(decode_payload(affix, encoding), encoding)
    entries = parse_dictionary(
        decode_payload(dictionary, encoding), affixes.flag_type, affixes.flag_aliases
    )
    forms = expand_word_forms(entries, affixes)
    if not forms:
        raise MalformedDictionaryError("Dictionary payload contains no words")

    logger.debug(
        "Expanded dictionary word forms",
        roots=len(entries),
        forms=len(forms),
        prefixes=len(affixes.prefixes),
        suffixes=len(affixes.suffixes),
        encoding=encoding,
    )
    return forms


def _take_entries(lines: Iterator[str], count: int) -> Iterator[str]:
    taken = 0
    while taken < count:
        try:
            raw = next(lines)
        except StopIteration:
            return
        line = _strip_comment(raw)
        if not line:
            continue
        taken += 1
        yield line


def _strip_comment(line: str) -> str:
    """Strip Hunspell comments; only a ``#`` at line start or after whitespace opens one."""

    stripped = line.strip()
    if stripped.startswith("#"):
        return ""
    match = re.search(r"\s#", stripped)
    if match:
        stripped = stripped[: match.start()]
    return stripped.strip()


def _compile_condition(condition: str, kind: AffixKind) -> Pattern[str]:
    if condition in {"", "."}:
        return re.compile("")
    regex = f"{condition}$" if kind == "SFX" else f"^{condition}"
    try:
        return re.compile(regex)
    except re.error as e:
        raise MalformedDictionaryError(f"Invalid affix condition {condition!r}: {e}") from e


def _split_token(token: str):
    """Split ``word/FLAGS`` honouring ``\\/`` escapes inside the word."""

    index = 0
    while True:
        index = token.find("/", index)
        if index == -1:
            return token.replace("\\/", "/"), ""
        if index > 0 and token[index - 1] == "\\":
            index += 1
            continue
        return token[:index].replace("\\/", "/"), token[index + 1:]


def _split_flags(flag_segment: str, flag_type: str) -> List[str]:
    if not flag_segment:
        return []
    if flag_type == "long":
        return [flag_segment[i: i + 2] for i in range(0, len(flag_segment), 2)]
    if flag_type == "num":
        return [flag.strip() for flag in flag_segment.split(",") if flag.strip()]
    return list(flag_segment)


def _resolve_alias(flag_segment: str, aliases: List[str]) -> str:
    if not flag_segment.isdigit() or not 1 <= int(flag_segment) <= len(aliases):
        raise MalformedDictionaryError(
            f"Unknown flag alias {flag_segment!r} ({len(aliases)} aliases defined)"
        )
    return aliases[int(flag_segment) - 1]

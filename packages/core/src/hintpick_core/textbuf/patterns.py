"""
Pattern catalog.

Every built-in pattern has one capture group holding the interesting
substring (the URL inside a Markdown link, the text between quotes, ...).
Catalog order is priority order when all patterns are enabled: more specific
patterns come first so they win overlaps against generic ones (a pointer
address beats the hex digits it contains, a datetime beats its digits).

The email pattern comes from https://www.regular-expressions.info/email.html.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from hintpick_core.errors import ConfigurationError

EXCLUDE_PATTERNS: dict[str, str] = {
    # Never hint or break ANSI colour sequences.
    "ansi-colors": r"[\x00-\x1f]\[(?:[0-9]{1,2};)?(?:[0-9]{1,2})?m",
}

PATTERNS: dict[str, str] = {
    "markdown-url": r"\[[^\]]*\]\(([^)]+)\)",
    "url": r"((https?://|git@|git://|ssh://|ftp://|file:///)[^ \(\)\[\]\{\}]+)",
    "email": r"\b([A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,})\b",
    "diff-a": r"--- a/([^ ]+)",
    "diff-b": r"\+\+\+ b/([^ ]+)",
    "docker": r"sha256:([0-9a-f]{64})",
    "path": r"(([.\w\-@~]+)?(/[.\w\-@]+)+)",
    "hexcolor": r"(#[0-9a-fA-F]{6})",
    "uuid": r"([0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12})",
    "ipfs": r"(Qm[0-9a-zA-Z]{44})",
    "datetime": r"(\d{4}-?\d{2}-?\d{2}([ T]\d{2}:\d{2}:\d{2}(\.\d{3,9})?)?)",
    "ipv4": r"(\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3})",
    "version": r"(v?\d{1,4}\.\d{1,4}(\.\d{1,4})?(-(alpha|beta|rc)(\.\d)?)?)[^.0-9s]",
    "pointer-address": r"(0x[0-9a-fA-F]+)",
    "ipv6": r"([A-f0-9:]+:+[A-f0-9:]+[%\w\d]+)",
    "sha": r"([0-9A-f]{7,40})",
    "quoted-single": r"'([^']+)'",
    "quoted-double": r'"([^"]+)"',
    "quoted-tick": r"`([^`]+)`",
    "digits": r"([0-9]{4,})",
}

# Shorthands accepted wherever a pattern name is expected.
PATTERN_ALIASES: dict[str, str] = {
    "4": "ipv4",
    "6": "ipv6",
    "quoted-backtick": "quoted-tick",
}


class PatternKind(str, Enum):
    """Tag telling where a pattern comes from."""

    NAMED = "named"
    CUSTOM = "custom"
    EXCLUDE = "exclude"


@dataclass(frozen=True)
class Pattern:
    kind: PatternKind
    name: str
    regex: re.Pattern[str]
    priority: int


def canonical_pattern_name(name: str) -> str:
    """Return the catalog name for `name`, raising `ConfigurationError` if unknown."""
    key = name.strip().lower()
    key = PATTERN_ALIASES.get(key, key)
    if key not in PATTERNS:
        raise ConfigurationError(
            f"Unknown pattern name {name!r} (expected one of: {', '.join(PATTERNS)})"
        )
    return key


def compile_custom(source: str) -> re.Pattern[str]:
    try:
        return re.compile(source)
    except re.error as e:
        raise ConfigurationError(f"Invalid custom pattern {source!r}: {e}") from e


def build_pattern_set(
    named: tuple[str, ...] | list[str],
    custom: tuple[str, ...] | list[str],
    *,
    all_patterns: bool = False,
) -> list[Pattern]:
    """
    Compile the active pattern set, highest priority first.

    Order: exclude patterns, custom regexes (declared order), then named
    patterns (declared order, or the whole catalog with `all_patterns`).
    Priority is the reverse rank, so first-declared wins ties.
    """
    entries: list[tuple[PatternKind, str, re.Pattern[str]]] = []
    for name, source in EXCLUDE_PATTERNS.items():
        entries.append((PatternKind.EXCLUDE, name, re.compile(source)))

    for index, source in enumerate(custom):
        entries.append((PatternKind.CUSTOM, f"custom-{index}", compile_custom(source)))

    names = list(PATTERNS) if all_patterns else [canonical_pattern_name(n) for n in named]
    seen: set[str] = set()
    for name in names:
        if name in seen:
            continue
        seen.add(name)
        entries.append((PatternKind.NAMED, name, re.compile(PATTERNS[name])))

    total = len(entries)
    return [
        Pattern(kind=kind, name=name, regex=regex, priority=total - rank)
        for rank, (kind, name, regex) in enumerate(entries)
    ]

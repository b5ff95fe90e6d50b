"""Catalog of hint alphabets.

An alphabet name is a keyboard layout optionally followed by a positional
modifier, e.g. ``qwerty``, ``dvorak-homerow``, ``azerty-right-hand``.

The letters ``n`` and ``y`` (and their capitals) are always removed: they are
bound to focus navigation and to confirm.
"""

from __future__ import annotations

from dataclasses import dataclass

from hintpick_core.errors import ConfigurationError

ALPHABETS: dict[str, str] = {
    "qwerty": "asdfqwerzxcvjklmiuopghtybn",
    "qwerty-homerow": "asdfjklgh",
    "qwerty-left-hand": "asdfqwerzcxv",
    "qwerty-right-hand": "jkluiopmyhn",
    "azerty": "qsdfazerwxcvjklmuiopghtybn",
    "azerty-homerow": "qsdfjkmgh",
    "azerty-left-hand": "qsdfazerwxcv",
    "azerty-right-hand": "jklmuiophyn",
    "qwertz": "asdfqweryxcvjkluiopmghtzbn",
    "qwertz-homerow": "asdfghjkl",
    "qwertz-left-hand": "asdfqweryxcv",
    "qwertz-right-hand": "jkluiopmhzn",
    "dvorak": "aoeuqjkxpyhtnsgcrlmwvzfidb",
    "dvorak-homerow": "aoeuhtnsid",
    "dvorak-left-hand": "aoeupqjkyix",
    "dvorak-right-hand": "htnsgcrlmwvz",
    "colemak": "arstqwfpzxcvneioluymdhgjbk",
    "colemak-homerow": "arstneiodh",
    "colemak-left-hand": "arstqwfpzxcv",
    "colemak-right-hand": "neioluymjhk",
    "longest": "aoeuqjkxpyhtnsgcrlmwvzfidb-;,~<>'@!#$%^&*~1234567890",
}

RESERVED_KEYS = frozenset("nNyY")


@dataclass(frozen=True)
class Alphabet:
    name: str
    letters: str

    def __len__(self) -> int:
        return len(self.letters)


def _clean_letters(letters: str) -> str:
    seen: list[str] = []
    for ch in letters:
        if ch in RESERVED_KEYS or ch in seen:
            continue
        seen.append(ch)
    return "".join(seen)


def parse_alphabet(name: str) -> Alphabet:
    """Resolve an alphabet name, raising `ConfigurationError` if unknown."""
    key = name.strip().lower()
    letters = ALPHABETS.get(key)
    if letters is None:
        known = ", ".join(ALPHABETS)
        raise ConfigurationError(f"Unknown alphabet {name!r} (expected one of: {known})")
    return Alphabet(name=key, letters=_clean_letters(letters))

from __future__ import annotations

from hintpick_core.errors import ConfigurationError

# Colour name -> rich colour name. "none" keeps the terminal default.
COLORS: dict[str, str] = {
    "black": "black",
    "red": "red",
    "green": "green",
    "yellow": "yellow",
    "blue": "blue",
    "magenta": "magenta",
    "cyan": "cyan",
    "white": "white",
    "bright-black": "bright_black",
    "bright-red": "bright_red",
    "bright-green": "bright_green",
    "bright-yellow": "bright_yellow",
    "bright-blue": "bright_blue",
    "bright-magenta": "bright_magenta",
    "bright-cyan": "bright_cyan",
    "bright-white": "bright_white",
    "none": "default",
}

_ALIASES = {f"bright{name[len('bright-'):]}": name for name in COLORS if name.startswith("bright-")}
_ALIASES.update({"default": "none", "reset": "none"})


def parse_color(name: str) -> str:
    """Normalize a colour name, raising `ConfigurationError` if unknown."""
    key = name.strip().lower().replace("_", "-")
    key = _ALIASES.get(key, key)
    if key not in COLORS:
        raise ConfigurationError(
            f"Unknown color {name!r}: allowed values are {', '.join(COLORS)}"
        )
    return key


def rich_color(name: str) -> str:
    return COLORS[parse_color(name)]

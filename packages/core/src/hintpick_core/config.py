"""
Resolved picker configuration.

The core never reads tmux options or the environment: the caller builds one
immutable `PickerConfig` and passes it down. Use `PickerConfig.resolve(...)`
to get `ConfigurationError` instead of pydantic's `ValidationError`.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from hintpick_core.alphabets import Alphabet, parse_alphabet
from hintpick_core.colors import parse_color
from hintpick_core.errors import ConfigurationError
from hintpick_core.models import OutputDestination
from hintpick_core.textbuf.patterns import canonical_pattern_name, compile_custom


class HintAlignment(str, Enum):
    """Where the hint sits on its span."""

    LEADING = "leading"
    CENTER = "center"
    TRAILING = "trailing"


class HintStyle(str, Enum):
    NONE = "none"
    BOLD = "bold"
    ITALIC = "italic"
    UNDERLINE = "underline"
    SURROUND = "surround"


class CommandBindings(str, Enum):
    """Which confirm/destination key scheme is active."""

    TOGGLE_KEY = "toggle-key"
    """Space toggles the destination; Enter or `y` confirm to it."""

    CASE_DESTINATION = "case-destination"
    """Typing a hint (or `Y`) uppercased sends the text to the other destination."""


class UiColors(BaseModel):
    """
    Colour pairs per rendering role.

    - `text_*` render unmatched text.
    - `span_*` render matched spans.
    - `focused_*` render the focused span.
    - `selected_*` render spans toggled in multi-select mode.
    - `hint_*` render hint labels.
    """

    model_config = ConfigDict(frozen=True)

    text_fg: str = "bright-cyan"
    text_bg: str = "none"
    span_fg: str = "blue"
    span_bg: str = "none"
    focused_fg: str = "magenta"
    focused_bg: str = "none"
    selected_fg: str = "green"
    selected_bg: str = "none"
    hint_fg: str = "yellow"
    hint_bg: str = "none"

    @field_validator("*")
    @classmethod
    def _known_color(cls, value: str) -> str:
        return parse_color(value)


class PickerConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    named_patterns: tuple[str, ...] = ()
    custom_patterns: tuple[str, ...] = ()
    all_patterns: bool = False
    alphabet: str = "dvorak"
    reverse: bool = False
    unique_hint: bool = False
    focus_wrap_around: bool = False
    multi_select: bool = False
    separator: str = "\n"
    hint_alignment: HintAlignment = HintAlignment.LEADING
    hint_style: HintStyle = HintStyle.NONE
    hint_surroundings: str = Field(default="{}", description="Opening and closing chars for `surround`.")
    colors: UiColors = Field(default_factory=UiColors)
    output_format: str = Field(default="%H", description="%H: selected text, %U: uppercased flag.")
    output_destination: OutputDestination = OutputDestination.BUFFER
    bindings: CommandBindings = CommandBindings.TOGGLE_KEY
    status_line: bool = False

    @field_validator("named_patterns")
    @classmethod
    def _known_patterns(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(canonical_pattern_name(name) for name in value)

    @field_validator("custom_patterns")
    @classmethod
    def _compilable(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        for source in value:
            compile_custom(source)
        return value

    @field_validator("alphabet")
    @classmethod
    def _known_alphabet(cls, value: str) -> str:
        alphabet = parse_alphabet(value)
        if len(alphabet) == 0:
            raise ValueError(f"Alphabet {value!r} has no usable letters")
        return alphabet.name

    @field_validator("hint_surroundings")
    @classmethod
    def _two_chars(cls, value: str) -> str:
        if len(value) != 2:
            raise ValueError("hint_surroundings expects exactly 2 chars")
        return value

    @model_validator(mode="before")
    @classmethod
    def _default_to_all_patterns(cls, data: Any) -> Any:
        # Nothing selected means everything.
        if isinstance(data, dict) and not (
            data.get("all_patterns") or data.get("named_patterns") or data.get("custom_patterns")
        ):
            data = {**data, "all_patterns": True}
        return data

    @model_validator(mode="after")
    def _consistent_flags(self) -> PickerConfig:
        if self.all_patterns and self.named_patterns:
            raise ValueError("all_patterns cannot be combined with named patterns")
        return self

    @property
    def letters(self) -> str:
        return self.hint_alphabet.letters

    @property
    def hint_alphabet(self) -> Alphabet:
        return parse_alphabet(self.alphabet)

    @classmethod
    def resolve(cls, **values: Any) -> PickerConfig:
        """Validate `values`, raising `ConfigurationError` on any problem."""
        try:
            return cls(**values)
        except ValidationError as e:
            raise ConfigurationError(describe_validation_error(e)) from e


def describe_validation_error(error: ValidationError) -> str:
    parts = []
    for item in error.errors():
        loc = ".".join(str(p) for p in item.get("loc", ())) or "config"
        parts.append(f"{loc}: {item.get('msg', 'invalid value')}")
    return "; ".join(parts)

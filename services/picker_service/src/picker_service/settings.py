"""
Configuration settings for the picker service.

Environment variables (all optional):
    HINTPICK_ALPHABET             Alphabet preset, e.g. `qwerty-homerow`
    HINTPICK_NAMED_PATTERNS       JSON list of pattern names, e.g. `["url","sha"]`
    HINTPICK_CUSTOM_PATTERNS      JSON list of extra regexes
    HINTPICK_REVERSE              Assign hints from the bottom
    HINTPICK_UNIQUE_HINT          One hint per distinct text
    HINTPICK_OUTPUT_DESTINATION   `buffer` or `clipboard`
    HINTPICK_BINDINGS             `toggle-key` or `case-destination`
    HINTPICK_CLIPBOARD_EXE        Command receiving clipboard text on stdin
    HINTPICK_LOG_FILE             Enables debug logging to this file

`@hintpick-*` tmux options use the same names with dashes, e.g.
`set -g @hintpick-unique-hint true`.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from hintpick_core.config import PickerConfig, UiColors, describe_validation_error
from hintpick_core.errors import ConfigurationError

TMUX_OPTION_PREFIX = "@hintpick-"

# tmux option name (prefix stripped) -> settings field, where they differ.
_TMUX_OPTION_FIELDS = {
    "capture": "capture_region",
    "pattern-name": "named_patterns",
    "custom-pattern": "custom_patterns",
}
_LIST_FIELDS = {"named_patterns", "custom_patterns"}


class Settings(BaseSettings):
    """Picker defaults plus options only the service needs."""

    model_config = SettingsConfigDict(env_prefix="HINTPICK_", env_file=".env", extra="ignore")

    # Matching
    named_patterns: list[str] = []
    custom_patterns: list[str] = []
    all_patterns: bool = False

    # Hints
    alphabet: str = "dvorak"
    reverse: bool = False
    unique_hint: bool = False
    hint_alignment: str = "leading"
    hint_style: str = "none"
    hint_surroundings: str = "{}"

    # Interaction
    focus_wrap_around: bool = False
    multi_select: bool = False
    separator: str = "\n"
    bindings: str = "toggle-key"
    status_line: bool = True

    # Colours
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

    # Output
    output_format: str = "%H"
    output_destination: str = "buffer"
    clipboard_exe: str = "pbcopy"
    paste_uppercased: bool = True

    # tmux bridge
    window_name: str = "[hintpick]"
    capture_region: str = "visible-area"

    # Logging
    log_file: Path | None = None
    log_level: str = "DEBUG"

    def merged(self, values: dict[str, Any]) -> Settings:
        """Return a copy with `values` layered on top (validated)."""
        data = self.model_dump()
        data.update({k: v for k, v in values.items() if v is not None})
        try:
            return type(self)(**data)
        except ValidationError as e:
            raise ConfigurationError(describe_validation_error(e)) from e

    def merged_tmux_options(self, options: dict[str, str]) -> Settings:
        return self.merged(tmux_option_values(options))

    def picker_config(self, **overrides: Any) -> PickerConfig:
        """Resolve into the immutable core configuration; `None` overrides are ignored."""
        data = self.model_dump()
        data.update({k: v for k, v in overrides.items() if v is not None})

        values = {k: data[k] for k in PickerConfig.model_fields if k in data}
        values["colors"] = {k: data[k] for k in UiColors.model_fields}
        values["named_patterns"] = tuple(values.get("named_patterns", ()))
        values["custom_patterns"] = tuple(values.get("custom_patterns", ()))
        return PickerConfig.resolve(**values)


def tmux_option_values(options: dict[str, str]) -> dict[str, Any]:
    """Map `@hintpick-*` options (prefix already stripped) onto settings fields."""
    values: dict[str, Any] = {}
    for name, value in options.items():
        field = _TMUX_OPTION_FIELDS.get(name, name.replace("-", "_"))
        if field not in Settings.model_fields:
            continue
        if field in _LIST_FIELDS:
            values[field] = value.split() if field == "named_patterns" else [value]
        else:
            values[field] = value
    return values


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create global settings instance."""
    global _settings
    if _settings is None:
        try:
            _settings = Settings()
        except ValidationError as e:
            raise ConfigurationError(describe_validation_error(e)) from e
    return _settings

from __future__ import annotations

from hintpick_core.config import PickerConfig
from hintpick_core.models import Emission, Selection


def _fill(template: str, text: str, uppercased: bool) -> str:
    flag = "true" if uppercased else "false"
    return template.replace("%U", flag).replace("%H", text)


def format_output(selection: Selection, template: str, separator: str = "\n") -> str:
    """
    Fill `%U` (uppercased flag) and then `%H` (selected text) in `template`.

    A multi-selection is formatted one text at a time, then joined with
    `separator`.
    """
    if not selection.texts:
        return _fill(template, selection.text, selection.uppercased)
    return separator.join(_fill(template, text, selection.uppercased) for text in selection.texts)


def to_emission(selection: Selection, config: PickerConfig) -> Emission:
    return Emission(
        text=format_output(selection, config.output_format, config.separator),
        destination=selection.output_destination,
        uppercased=selection.uppercased,
    )

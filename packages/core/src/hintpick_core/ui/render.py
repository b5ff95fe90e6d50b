"""
Render model.

`render_frame` turns the pick model plus the current `SelectionState` into a
grid of cells. It is the only place visual style is decided; the terminal
collaborator just paints cells.

Lines longer than the frame wrap onto extra rows (see `ui.layout`).

Styles stack in increasing priority::

    base text < span < focused span < selected span < hint label
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from enum import IntFlag

from hintpick_core.config import HintAlignment, HintStyle, PickerConfig
from hintpick_core.models import Span
from hintpick_core.textbuf.model import PickModel
from hintpick_core.ui.layout import Layout
from hintpick_core.ui.state import SelectionState


class StyleFlag(IntFlag):
    NONE = 0
    BOLD = 1
    ITALIC = 2
    UNDERLINE = 4


_HINT_STYLE_FLAGS = {
    HintStyle.NONE: StyleFlag.NONE,
    HintStyle.SURROUND: StyleFlag.NONE,
    HintStyle.BOLD: StyleFlag.BOLD,
    HintStyle.ITALIC: StyleFlag.ITALIC,
    HintStyle.UNDERLINE: StyleFlag.UNDERLINE,
}


@dataclass(frozen=True)
class Cell:
    char: str
    fg: str = "none"
    bg: str = "none"
    style: StyleFlag = StyleFlag.NONE


BLANK = Cell(" ")


@dataclass(frozen=True)
class RenderFrame:
    rows: tuple[tuple[Cell, ...], ...]
    width: int
    height: int
    top: int

    def text_rows(self) -> list[str]:
        """Plain characters of each row, trailing padding removed."""
        return ["".join(cell.char for cell in row).rstrip() for row in self.rows]

    def cell(self, row: int, col: int) -> Cell:
        return self.rows[row][col]


def viewport_height(config: PickerConfig, height: int) -> int:
    """Rows available for text once the status row is accounted for."""
    if config.status_line:
        return max(1, height - 1)
    return max(1, height)


def hint_offset(span_length: int, label_length: int, alignment: HintAlignment) -> int:
    """Column of the label relative to the span start (never negative)."""
    room = span_length - label_length
    if alignment is HintAlignment.TRAILING:
        offset = room
    elif alignment is HintAlignment.CENTER:
        offset = room // 2
    else:
        offset = 0
    return max(0, offset)


def status_text(model: PickModel, state: SelectionState) -> str:
    parts = [f"-> {state.output_destination.value}"]
    if state.selected_span_ids:
        parts.append(f"{len(state.selected_span_ids)} selected")
    if state.pending_key_prefix:
        parts.append(f"typed: {state.pending_key_prefix}")
    parts.append(f"{len(model.spans)} matches")
    return " | ".join(parts)


def render_frame(
    model: PickModel,
    state: SelectionState,
    config: PickerConfig,
    *,
    width: int,
    height: int,
) -> RenderFrame:
    colors = config.colors
    width = max(1, width)
    visible = viewport_height(config, height)
    top = state.view_offset
    layout = Layout.wrap(model.lines, width)
    shown = layout.rows[top : top + visible]

    shown_lines = {row_slice.line for row_slice in shown}
    spans_by_line: dict[int, list[Span]] = defaultdict(list)
    for span in model.spans:
        if span.line in shown_lines:
            spans_by_line[span.line].append(span)

    rows: list[tuple[Cell, ...]] = []
    for row_slice in shown:
        row = _Row(row_slice.start_col, [BLANK] * width)
        line = model.lines[row_slice.line]
        for col, ch in enumerate(line[row_slice.start_col : row_slice.start_col + width]):
            row.cells[col] = Cell(ch, colors.text_fg, colors.text_bg)
        spans = spans_by_line.get(row_slice.line, ())
        for span in spans:
            _paint_span(row, line, span, state, config)
        for span in spans:
            _paint_hint(row, model, span, config)
        rows.append(tuple(row.cells))
    while len(rows) < visible:
        rows.append(tuple([BLANK] * width))

    if config.status_line and height > 1:
        text = status_text(model, state)[:width]
        cells = [BLANK] * width
        for col, ch in enumerate(text):
            cells[col] = Cell(ch, colors.text_fg, colors.text_bg, StyleFlag.BOLD)
        rows.append(tuple(cells))

    return RenderFrame(rows=tuple(rows), width=width, height=len(rows), top=top)


@dataclass
class _Row:
    """One display row: the cells showing line columns from `start_col` on."""

    start_col: int
    cells: list[Cell]

    def put(self, col: int, cell: Cell) -> None:
        index = col - self.start_col
        if 0 <= index < len(self.cells):
            self.cells[index] = cell


def _paint_span(row: _Row, line: str, span: Span, state: SelectionState, config: PickerConfig) -> None:
    colors = config.colors
    fg, bg = colors.span_fg, colors.span_bg
    if span.id == state.focused_span_id:
        fg, bg = colors.focused_fg, colors.focused_bg
    if config.multi_select and span.id in state.selected_span_ids:
        fg, bg = colors.selected_fg, colors.selected_bg
    for col in range(span.start_col, span.end_col):
        row.put(col, Cell(line[col], fg, bg))


def _paint_hint(row: _Row, model: PickModel, span: Span, config: PickerConfig) -> None:
    label = model.labeling.label_for(span.id)
    if not label:
        return
    colors = config.colors
    style = _HINT_STYLE_FLAGS[config.hint_style]
    start = span.start_col + hint_offset(span.length, len(label), config.hint_alignment)

    for i, ch in enumerate(label):
        row.put(start + i, Cell(ch, colors.hint_fg, colors.hint_bg, style))

    if config.hint_style is HintStyle.SURROUND:
        opening, closing = config.hint_surroundings
        if start > 0:
            row.put(start - 1, Cell(opening, colors.hint_fg, colors.hint_bg))
        row.put(start + len(label), Cell(closing, colors.hint_fg, colors.hint_bg))

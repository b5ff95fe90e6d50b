"""Tests for the render model."""

from __future__ import annotations

import pytest

from hintpick_core.config import HintAlignment
from hintpick_core.ui.layout import Layout, RowSlice
from hintpick_core.ui.render import StyleFlag, hint_offset, render_frame
from hintpick_core.ui.state import InteractionMachine

from conftest import make_config, make_model


def frame_for(text: str = "ab 1234 cd", *, width: int = 20, height: int = 3, setup=None, **values):
    values.setdefault("named_patterns", ("digits",))
    config = make_config(**values)
    model = make_model(text, **values)
    machine = InteractionMachine(model, config, viewport_height=height, width=width)
    if setup is not None:
        setup(machine)
    return render_frame(model, machine.state, config, width=width, height=height)


class TestHintPlacement:
    """Where labels land on their span."""

    @pytest.mark.parametrize(
        "alignment, row",
        [
            ("leading", "ab a234 cd"),
            ("center", "ab 1a34 cd"),
            ("trailing", "ab 123a cd"),
        ],
    )
    def test_alignment(self, alignment, row):
        frame = frame_for(hint_alignment=alignment)
        assert frame.text_rows()[0] == row

    def test_center_rounds_toward_leading(self):
        assert hint_offset(4, 1, HintAlignment.CENTER) == 1
        assert hint_offset(5, 2, HintAlignment.CENTER) == 1

    def test_long_label_starts_at_span(self):
        assert hint_offset(1, 2, HintAlignment.TRAILING) == 0
        assert hint_offset(1, 2, HintAlignment.CENTER) == 0

    def test_surround(self):
        frame = frame_for(hint_style="surround", hint_surroundings="[]")
        assert frame.text_rows()[0] == "ab[a]34 cd"

    def test_surround_clipped_at_line_start(self):
        frame = frame_for("1234 x", hint_style="surround")
        assert frame.text_rows()[0] == "a}34 x"

    @pytest.mark.parametrize(
        "style, flag",
        [("bold", StyleFlag.BOLD), ("italic", StyleFlag.ITALIC), ("underline", StyleFlag.UNDERLINE)],
    )
    def test_hint_style_flag(self, style, flag):
        frame = frame_for(hint_style=style)
        assert frame.cell(0, 3).style == flag
        assert frame.cell(0, 4).style == StyleFlag.NONE


class TestColors:
    """Style layering."""

    def test_layers(self):
        frame = frame_for()
        assert frame.cell(0, 0).fg == "bright-cyan"
        assert frame.cell(0, 3).fg == "yellow"
        # Only span is focused.
        assert frame.cell(0, 4).fg == "magenta"

    def test_unfocused_span(self):
        frame = frame_for("1111 2222")
        assert frame.cell(0, 1).fg == "magenta"
        assert frame.cell(0, 6).fg == "blue"

    def test_selected_span_in_multi_select(self):
        def toggle_second(machine):
            machine.state.selected_span_ids.add(1)

        frame = frame_for("1111 2222", multi_select=True, setup=toggle_second)
        assert frame.cell(0, 6).fg == "green"
        assert frame.cell(0, 5).fg == "yellow"

    def test_custom_colors(self):
        frame = frame_for(colors={"hint_fg": "red", "text_bg": "black"})
        assert frame.cell(0, 3).fg == "red"
        assert frame.cell(0, 0).bg == "black"


class TestFrameGeometry:
    """Clipping, padding and the status row."""

    def test_wrapped_at_width(self):
        frame = frame_for(width=5)
        assert frame.text_rows() == ["ab a2", "34 cd", ""]
        assert all(len(row) == 5 for row in frame.rows)

    def test_hint_on_wrapped_row_is_drawn(self):
        frame = frame_for("x" * 100 + " 12345", width=80, height=3)
        assert frame.text_rows()[1] == "x" * 20 + " a2345"
        assert frame.cell(1, 21).fg == "yellow"

    def test_trailing_blanks_do_not_wrap(self):
        frame = frame_for("1234" + " " * 10, width=5, height=2)
        assert frame.text_rows() == ["a234", ""]

    def test_view_offset_counts_display_rows(self):
        text = "x" * 30 + "\n" + "y" * 30 + "\n1234"

        def to_bottom(machine):
            machine.scroll(100)

        frame = frame_for(text, width=10, height=2, setup=to_bottom)
        assert frame.top == 5
        assert frame.text_rows() == ["y" * 10, "a234"]

    def test_padding_rows(self):
        frame = frame_for(height=3)
        assert frame.height == 3
        assert frame.text_rows()[1:] == ["", ""]
        assert frame.cell(0, 15).fg == "none"

    def test_status_line(self):
        frame = frame_for(status_line=True, width=40, height=3)
        rows = frame.text_rows()
        assert len(rows) == 3
        assert rows[-1].startswith("-> buffer")
        assert "1 matches" in rows[-1]

    def test_view_offset(self):
        text = "\n".join(f"{i:04d}" for i in range(1000, 1010))

        def scroll(machine):
            machine.scroll(5)

        frame = frame_for(text, height=3, setup=scroll)
        assert frame.top == 5
        assert [row[1:] for row in frame.text_rows()] == ["005", "006", "007"]

    def test_pure(self):
        first = frame_for()
        second = frame_for()
        assert first == second


class TestLayout:
    """Lines to display rows."""

    def test_wrap(self):
        layout = Layout.wrap(["abcdefg", "", "xy"], 3)
        assert layout.rows == (
            RowSlice(0, 0),
            RowSlice(0, 3),
            RowSlice(0, 6),
            RowSlice(1, 0),
            RowSlice(2, 0),
        )
        assert layout.first_rows == (0, 3, 4)

    def test_exact_width_takes_one_row(self):
        assert len(Layout.wrap(["abc"], 3)) == 1

    def test_row_of(self):
        layout = Layout.wrap(["abcdefg", "xy"], 3)
        assert layout.row_of(0, 4) == 1
        assert layout.row_of(1, 1) == 3
        assert layout.row_of(0, 50) == 2

    def test_unwrapped(self):
        layout = Layout.wrap(["a" * 500, "b"])
        assert len(layout) == 2
        assert layout.row_of(0, 400) == 0

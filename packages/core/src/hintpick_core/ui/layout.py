"""Long lines wrapped onto display rows.

A line of ``n`` visible characters (trailing blanks ignored) takes
``1 + (n - 1) // width`` rows; row ``r`` of a line shows columns
``[r * width, (r + 1) * width)``. The view offset and the frame rows count
display rows, not lines.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass


@dataclass(frozen=True)
class RowSlice:
    line: int
    start_col: int


@dataclass(frozen=True)
class Layout:
    rows: tuple[RowSlice, ...]
    first_rows: tuple[int, ...]
    width: int | None = None

    @classmethod
    def wrap(cls, lines: Sequence[str], width: int | None = None) -> Layout:
        """Lay `lines` out at `width` columns; `None` keeps one row per line."""
        if width is not None:
            width = max(1, width)
        rows: list[RowSlice] = []
        first_rows: list[int] = []
        for index, line in enumerate(lines):
            first_rows.append(len(rows))
            extra = max(0, len(line.rstrip()) - 1) // width if width else 0
            rows.extend(RowSlice(index, r * width if width else 0) for r in range(1 + extra))
        return cls(rows=tuple(rows), first_rows=tuple(first_rows), width=width)

    def __len__(self) -> int:
        return len(self.rows)

    def row_of(self, line: int, col: int) -> int:
        """Display row showing column `col` of `line`."""
        first = self.first_rows[line]
        if not self.width:
            return first
        last = self.first_rows[line + 1] - 1 if line + 1 < len(self.first_rows) else len(self.rows) - 1
        return min(first + col // self.width, last)

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class Span:
    """A contiguous range of characters on one line, matched by a pattern.

    Columns are character indices in the normalized line; `end_col` is
    exclusive.
    """

    id: int
    line: int
    start_col: int
    end_col: int
    text: str
    pattern_id: str
    priority: int

    @property
    def length(self) -> int:
        return self.end_col - self.start_col

    def overlaps(self, other: Span) -> bool:
        return (
            self.line == other.line
            and self.start_col < other.end_col
            and other.start_col < self.end_col
        )


class OutputDestination(str, Enum):
    """Where the selected text goes: the tmux paste buffer or the clipboard."""

    BUFFER = "buffer"
    CLIPBOARD = "clipboard"

    def toggle(self) -> OutputDestination:
        if self is OutputDestination.BUFFER:
            return OutputDestination.CLIPBOARD
        return OutputDestination.BUFFER


@dataclass(frozen=True)
class Selection:
    """Text chosen by the user, whether it was picked uppercased, and its sink."""

    text: str
    uppercased: bool
    output_destination: OutputDestination
    texts: tuple[str, ...] = ()
    """Each selected text on its own, for a multi-selection; `text` is them joined."""


@dataclass(frozen=True)
class Emission:
    """The single value handed to the delivery collaborator."""

    text: str
    destination: OutputDestination
    uppercased: bool = False

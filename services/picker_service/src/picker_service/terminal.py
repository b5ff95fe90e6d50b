"""
The real terminal: raw mode, alternate screen, key reading and drawing.

Input and output go through the controlling terminal (`/dev/tty`) so stdin can
carry the piped text and stdout the result.
"""

from __future__ import annotations

import logging
import os
import select
import termios
import tty
from collections import deque
from collections.abc import Iterator
from contextlib import ExitStack, contextmanager

from rich.console import Console, Group
from rich.style import Style
from rich.text import Text

from hintpick_core.colors import rich_color
from hintpick_core.errors import CaptureError
from hintpick_core.ui.keys import ESC, Key, decode_keys
from hintpick_core.ui.render import Cell, RenderFrame, StyleFlag

logger = logging.getLogger(__name__)

# Time to wait for the rest of an escape sequence after ESC.
ESCAPE_TIMEOUT_S = 0.03


@contextmanager
def raw_mode(fd: int) -> Iterator[None]:
    """Put `fd` in raw mode, keeping output post-processing so `\\n` still returns the carriage."""
    old_settings = termios.tcgetattr(fd)
    try:
        tty.setraw(fd)
        attrs = termios.tcgetattr(fd)
        attrs[1] |= termios.OPOST | termios.ONLCR
        termios.tcsetattr(fd, termios.TCSADRAIN, attrs)
        yield
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, old_settings)


def cell_style(cell: Cell) -> Style:
    return Style(
        color=rich_color(cell.fg),
        bgcolor=rich_color(cell.bg),
        bold=bool(cell.style & StyleFlag.BOLD),
        italic=bool(cell.style & StyleFlag.ITALIC),
        underline=bool(cell.style & StyleFlag.UNDERLINE),
    )


def row_text(row: tuple[Cell, ...]) -> Text:
    """One frame row as rich `Text`, merging runs of identically styled cells."""
    text = Text(no_wrap=True, overflow="crop")
    run: list[str] = []
    current: Cell | None = None
    for cell in row:
        if current is not None and (cell.fg, cell.bg, cell.style) != (current.fg, current.bg, current.style):
            text.append("".join(run), style=cell_style(current))
            run = []
        current = cell
        run.append(cell.char)
    if current is not None:
        text.append("".join(run), style=cell_style(current))
    return text


def frame_renderable(frame: RenderFrame) -> Group:
    return Group(*(row_text(row) for row in frame.rows))


class TtyTerminal:
    """Terminal collaborator for `run_session`, bound to the controlling tty."""

    def __init__(self, path: str = "/dev/tty") -> None:
        self.path = path
        self._stack: ExitStack | None = None
        self._fd = -1
        self._console: Console | None = None
        self._screen = None
        self._pending: deque[Key] = deque()

    def __enter__(self) -> TtyTerminal:
        with ExitStack() as stack:
            try:
                self._fd = os.open(self.path, os.O_RDWR)
                stack.callback(os.close, self._fd)
                out = stack.enter_context(open(self.path, "w", encoding="utf-8"))
            except OSError as e:
                raise CaptureError(f"Cannot open terminal {self.path}: {e}") from e

            width, height = self._probe_size()
            self._console = Console(file=out, force_terminal=True, width=width, height=height, highlight=False)
            stack.enter_context(raw_mode(self._fd))
            self._screen = stack.enter_context(self._console.screen(hide_cursor=True))
            self._stack = stack.pop_all()
        logger.debug("terminal %s acquired (%dx%d)", self.path, width, height)
        return self

    def __exit__(self, *exc_info: object) -> None:
        if self._stack is not None:
            self._stack.close()
            self._stack = None
        self._pending.clear()
        logger.debug("terminal %s released", self.path)

    def _probe_size(self) -> tuple[int, int]:
        try:
            size = os.get_terminal_size(self._fd)
        except OSError:
            return 80, 24
        return size.columns, size.lines

    def size(self) -> tuple[int, int]:
        return self._probe_size()

    def read_key(self) -> Key:
        while not self._pending:
            self._pending.extend(decode_keys(self._read_chunk()))
        return self._pending.popleft()

    def _read_chunk(self) -> str:
        data = os.read(self._fd, 64)
        if not data:
            # EOF on the tty: treat as a cancel.
            return "\x03"
        if data == ESC.encode():
            # Give the rest of an escape sequence a moment to arrive.
            while select.select([self._fd], [], [], ESCAPE_TIMEOUT_S)[0]:
                more = os.read(self._fd, 64)
                if not more:
                    break
                data += more
        while True:
            try:
                return data.decode("utf-8")
            except UnicodeDecodeError:
                if len(data) > 64 or not select.select([self._fd], [], [], ESCAPE_TIMEOUT_S)[0]:
                    return data.decode("utf-8", errors="replace")
                data += os.read(self._fd, 4)

    def draw(self, frame: RenderFrame) -> None:
        if self._screen is None:
            return
        self._screen.update(frame_renderable(frame))

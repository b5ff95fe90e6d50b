"""Shared helpers for hintpick tests."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import pytest

from hintpick_core.config import PickerConfig
from hintpick_core.models import Span
from hintpick_core.textbuf.model import PickModel, build_model
from hintpick_core.ui.keys import Key, KeyName
from hintpick_core.ui.render import RenderFrame

# Five digit runs: with the default dvorak alphabet they get labels a, o, e, u, q.
FIVE_NUMBERS = "1111 2222 3333 4444 5555"


def make_config(**values: Any) -> PickerConfig:
    return PickerConfig.resolve(**values)


def make_model(text: str | Iterable[str], **values: Any) -> PickModel:
    lines = text.split("\n") if isinstance(text, str) else list(text)
    return build_model(lines, make_config(**values))


def span(line: int, start: int, end: int, *, priority: int = 1, text: str | None = None, id: int = 0) -> Span:
    return Span(
        id=id,
        line=line,
        start_col=start,
        end_col=end,
        text=text if text is not None else "x" * (end - start),
        pattern_id="test",
        priority=priority,
    )


def keys(*items: str | KeyName) -> list[Key]:
    """Build keys: plain strings become typed characters, `KeyName`s named keys."""
    result: list[Key] = []
    for item in items:
        if isinstance(item, KeyName):
            result.append(Key(item))
        else:
            result.extend(Key.of(ch) for ch in item)
    return result


class FakeTerminal:
    """Scripted terminal for `run_session`."""

    def __init__(self, script: Iterable[Key], *, width: int = 80, height: int = 24) -> None:
        self.script = list(script)
        self.width = width
        self.height = height
        self.frames: list[RenderFrame] = []
        self.entered = False
        self.exited = False

    def __enter__(self) -> FakeTerminal:
        self.entered = True
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.exited = True

    def size(self) -> tuple[int, int]:
        return self.width, self.height

    def read_key(self) -> Key:
        if not self.script:
            raise RuntimeError("script exhausted")
        return self.script.pop(0)

    def draw(self, frame: RenderFrame) -> None:
        self.frames.append(frame)


@pytest.fixture
def five_numbers() -> PickModel:
    return make_model(FIVE_NUMBERS, named_patterns=("digits",))

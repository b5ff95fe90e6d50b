"""The single-threaded interaction loop."""

from __future__ import annotations

import logging
from typing import Protocol

from hintpick_core.config import PickerConfig
from hintpick_core.errors import InteractionCancelled
from hintpick_core.models import Selection
from hintpick_core.textbuf.model import PickModel
from hintpick_core.ui.keys import Key
from hintpick_core.ui.render import RenderFrame, render_frame, viewport_height
from hintpick_core.ui.state import InteractionMachine, Phase

logger = logging.getLogger(__name__)


class Terminal(Protocol):
    """What the loop needs from a terminal. Size is given, never probed here."""

    def __enter__(self) -> Terminal: ...

    def __exit__(self, *exc_info: object) -> None: ...

    def size(self) -> tuple[int, int]:
        """(width, height) in cells."""
        ...

    def read_key(self) -> Key: ...

    def draw(self, frame: RenderFrame) -> None: ...


def run_session(model: PickModel, config: PickerConfig, terminal: Terminal) -> Selection:
    """
    Run the picker until the user confirms or cancels.

    Returns the confirmed `Selection`; raises `InteractionCancelled` on cancel
    or when there is nothing to pick.
    """
    if not model.spans:
        raise InteractionCancelled("No matches")

    with terminal:
        width, height = terminal.size()
        machine = InteractionMachine(
            model,
            config,
            viewport_height=viewport_height(config, height),
            width=width,
        )
        terminal.draw(render_frame(model, machine.state, config, width=width, height=height))

        while not machine.finished:
            key = terminal.read_key()
            phase = machine.handle(key)
            if phase in (Phase.CONFIRMED, Phase.CANCELLED):
                break
            terminal.draw(render_frame(model, machine.state, config, width=width, height=height))

    if machine.selection is None:
        raise InteractionCancelled("Cancelled")
    logger.debug("selected %d chars -> %s", len(machine.selection.text), machine.selection.output_destination.value)
    return machine.selection

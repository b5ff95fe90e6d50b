"""
Interaction state machine.

Consumes one `Key` at a time and drives focus, selection, destination and the
view offset. Rendering reads `SelectionState` but never writes it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum

from hintpick_core.config import CommandBindings, PickerConfig
from hintpick_core.models import OutputDestination, Selection
from hintpick_core.textbuf.hints import HintGroup
from hintpick_core.textbuf.model import PickModel
from hintpick_core.ui.keys import Key, KeyName
from hintpick_core.ui.layout import Layout

logger = logging.getLogger(__name__)


class Phase(str, Enum):
    BROWSING = "browsing"
    MULTI_SELECT_BROWSING = "multi-select-browsing"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class Command(str, Enum):
    CANCEL = "cancel"
    FOCUS_NEXT = "focus-next"
    FOCUS_PREVIOUS = "focus-previous"
    SCROLL_UP = "scroll-up"
    SCROLL_DOWN = "scroll-down"
    SCROLL_TOP = "scroll-top"
    SCROLL_BOTTOM = "scroll-bottom"
    CONFIRM = "confirm"
    CONFIRM_UPPERCASED = "confirm-uppercased"
    TOGGLE_DESTINATION = "toggle-destination"
    BACKSPACE = "backspace"
    TYPE = "type"
    IGNORE = "ignore"


_NAMED_KEY_COMMANDS: dict[KeyName, Command] = {
    KeyName.ESCAPE: Command.CANCEL,
    KeyName.CTRL_C: Command.CANCEL,
    KeyName.UP: Command.FOCUS_PREVIOUS,
    KeyName.LEFT: Command.FOCUS_PREVIOUS,
    KeyName.DOWN: Command.FOCUS_NEXT,
    KeyName.RIGHT: Command.FOCUS_NEXT,
    KeyName.PAGE_UP: Command.SCROLL_UP,
    KeyName.PAGE_DOWN: Command.SCROLL_DOWN,
    KeyName.HOME: Command.SCROLL_TOP,
    KeyName.END: Command.SCROLL_BOTTOM,
    KeyName.ENTER: Command.CONFIRM,
    KeyName.BACKSPACE: Command.BACKSPACE,
}


def command_for(key: Key, bindings: CommandBindings, *, reverse: bool = False) -> Command:
    """Map a key to a command under the given binding scheme."""
    if key.name is not KeyName.CHAR:
        return _NAMED_KEY_COMMANDS.get(key.name, Command.IGNORE)
    ch = key.char
    if ch == "n":
        return Command.FOCUS_PREVIOUS if reverse else Command.FOCUS_NEXT
    if ch == "N":
        return Command.FOCUS_NEXT if reverse else Command.FOCUS_PREVIOUS
    if ch == "y":
        return Command.CONFIRM
    if ch == "Y":
        return Command.CONFIRM_UPPERCASED
    if ch == " ":
        if bindings is CommandBindings.TOGGLE_KEY:
            return Command.TOGGLE_DESTINATION
        return Command.IGNORE
    return Command.TYPE


@dataclass
class SelectionState:
    phase: Phase
    focused_span_id: int | None
    output_destination: OutputDestination
    selected_span_ids: set[int] = field(default_factory=set)
    pending_key_prefix: str = ""
    uppercased: bool = False
    view_offset: int = 0


class InteractionMachine:
    """Single mutator of a `SelectionState` for one picking session."""

    def __init__(
        self,
        model: PickModel,
        config: PickerConfig,
        *,
        viewport_height: int,
        width: int | None = None,
    ) -> None:
        self.model = model
        self.config = config
        self.viewport_height = max(1, viewport_height)
        self.layout = Layout.wrap(model.lines, width)
        self.selection: Selection | None = None

        focused: int | None = None
        if model.spans:
            focused = len(model.spans) - 1 if model.reverse else 0
        self.state = SelectionState(
            phase=Phase.MULTI_SELECT_BROWSING if config.multi_select else Phase.BROWSING,
            focused_span_id=focused,
            output_destination=config.output_destination,
        )
        if len(self.layout) > self.viewport_height:
            # Start at the bottom, where the most recent output is.
            self.state.view_offset = self.max_view_offset
        self._follow_focus()

    @property
    def finished(self) -> bool:
        return self.state.phase in (Phase.CONFIRMED, Phase.CANCELLED)

    @property
    def max_view_offset(self) -> int:
        return max(0, len(self.layout) - self.viewport_height)

    def handle(self, key: Key) -> Phase:
        """Process one key; returns the phase after the transition."""
        if self.finished:
            return self.state.phase

        command = command_for(key, self.config.bindings, reverse=self.model.reverse)
        if command not in (Command.TYPE, Command.BACKSPACE, Command.IGNORE):
            self.state.pending_key_prefix = ""
            self.state.uppercased = False

        if command is Command.BACKSPACE:
            self.state.pending_key_prefix = self.state.pending_key_prefix[:-1]
            if not self.state.pending_key_prefix:
                self.state.uppercased = False
        elif command is Command.CANCEL:
            self.cancel()
        elif command is Command.FOCUS_NEXT:
            self.move_focus(1)
        elif command is Command.FOCUS_PREVIOUS:
            self.move_focus(-1)
        elif command is Command.SCROLL_UP:
            self.scroll(-self._half_page())
        elif command is Command.SCROLL_DOWN:
            self.scroll(self._half_page())
        elif command is Command.SCROLL_TOP:
            self.scroll(-len(self.layout))
        elif command is Command.SCROLL_BOTTOM:
            self.scroll(len(self.layout))
        elif command is Command.CONFIRM:
            self.confirm(uppercased=False)
        elif command is Command.CONFIRM_UPPERCASED:
            self.confirm(uppercased=True)
        elif command is Command.TOGGLE_DESTINATION:
            self.state.output_destination = self.state.output_destination.toggle()
        elif command is Command.TYPE:
            self.type_char(key.char)

        logger.debug("key %s -> %s (%s)", key, command.value, self.state.phase.value)
        return self.state.phase

    def cancel(self) -> None:
        self.state.selected_span_ids.clear()
        self.state.pending_key_prefix = ""
        self.selection = None
        self.state.phase = Phase.CANCELLED

    def move_focus(self, step: int) -> None:
        count = len(self.model.spans)
        current = self.state.focused_span_id
        if not count or current is None:
            return
        target = current + step
        if self.config.focus_wrap_around:
            target %= count
        else:
            target = min(max(target, 0), count - 1)
        self.state.focused_span_id = target
        self._follow_focus()

    def scroll(self, amount: int) -> None:
        offset = self.state.view_offset + amount
        self.state.view_offset = min(max(offset, 0), self.max_view_offset)

    def type_char(self, ch: str) -> None:
        labeling = self.model.labeling
        lower = ch.lower()
        prefix = self.state.pending_key_prefix + lower
        if not labeling.has_prefix(prefix):
            # Mistyped: silently start over.
            self.state.pending_key_prefix = ""
            self.state.uppercased = False
            return

        self.state.pending_key_prefix = prefix
        self.state.uppercased = self.state.uppercased or ch != lower

        group = labeling.group_for_label(prefix)
        if group is None:
            return

        uppercased = self.state.uppercased
        self.state.pending_key_prefix = ""
        self.state.uppercased = False
        if self.state.phase is Phase.MULTI_SELECT_BROWSING:
            self._toggle_group(group)
            return

        destination = self._destination(uppercased)
        self._commit(Selection(text=group.text, uppercased=uppercased, output_destination=destination))

    def confirm(self, *, uppercased: bool) -> None:
        destination = self._destination(uppercased)
        selected = self.selected_groups()
        texts: tuple[str, ...] = ()
        if selected:
            texts = tuple(g.text for g in selected)
            text = self.config.separator.join(texts)
        elif self.state.focused_span_id is not None:
            text = self.model.span(self.state.focused_span_id).text
        else:
            return
        self._commit(Selection(text=text, uppercased=uppercased, output_destination=destination, texts=texts))

    def selected_groups(self) -> list[HintGroup]:
        """Groups with selected spans, in document order, one entry per group."""
        groups: list[HintGroup] = []
        seen: set[int] = set()
        for span_id in sorted(self.state.selected_span_ids):
            group = self.model.labeling.group_for_span(span_id)
            if group is None or id(group) in seen:
                continue
            seen.add(id(group))
            groups.append(group)
        return groups

    def _toggle_group(self, group: HintGroup) -> None:
        members = set(group.span_ids)
        if members <= self.state.selected_span_ids:
            self.state.selected_span_ids -= members
        else:
            self.state.selected_span_ids |= members

    def _destination(self, uppercased: bool) -> OutputDestination:
        current = self.state.output_destination
        if uppercased and self.config.bindings is CommandBindings.CASE_DESTINATION:
            return current.toggle()
        return current

    def _commit(self, selection: Selection) -> None:
        self.selection = selection
        self.state.output_destination = selection.output_destination
        self.state.phase = Phase.CONFIRMED

    def _half_page(self) -> int:
        return max(1, self.viewport_height // 2)

    def _follow_focus(self) -> None:
        """Re-centre the view on the focused span when it is off-screen."""
        focused = self.state.focused_span_id
        if focused is None:
            return
        span = self.model.span(focused)
        row = self.layout.row_of(span.line, span.start_col)
        top = self.state.view_offset
        if top <= row < top + self.viewport_height:
            return
        self.state.view_offset = 0
        self.scroll(row - self.viewport_height // 2)

"""
Thin wrappers around the `tmux` command line.

All calls go through `run_tmux`, which logs the command and turns failures into
the caller's error type.
"""

from __future__ import annotations

import logging
import re
import subprocess
from dataclasses import dataclass
from enum import Enum

from hintpick_core.errors import CaptureError, ConfigurationError, HintpickError, OutputDeliveryError

logger = logging.getLogger(__name__)

PANE_FORMAT = "#{pane_id}:#{?pane_in_mode,true,false}:#{pane_height}:#{scroll_position}:#{?pane_active,true,false}"


class CaptureRegion(str, Enum):
    VISIBLE_AREA = "visible-area"
    """What is on screen, following the scroll position in copy mode."""

    ENTIRE_HISTORY = "entire-history"
    """The whole scrollback."""

    @classmethod
    def parse(cls, value: str) -> CaptureRegion:
        try:
            return cls(value.strip().lower())
        except ValueError:
            allowed = ", ".join(r.value for r in cls)
            raise ConfigurationError(f"Unknown capture region {value!r}: expected {allowed}") from None


@dataclass(frozen=True)
class Pane:
    id: str
    in_mode: bool
    height: int
    scroll_position: int
    is_active: bool

    @classmethod
    def from_format_line(cls, line: str) -> Pane:
        """Parse one line of `tmux list-panes -F PANE_FORMAT` output, e.g. `%52:false:62:3:false`."""
        parts = line.strip().split(":")
        if len(parts) != 5:
            raise CaptureError(f"Unexpected list-panes output: {line!r}")
        pane_id, in_mode, height, scroll, active = parts
        if not re.fullmatch(r"%\d+", pane_id):
            raise CaptureError(f"Expected a pane id like %12, got {pane_id!r}")
        try:
            return cls(
                id=pane_id,
                in_mode=in_mode == "true",
                height=int(height),
                scroll_position=int(scroll or 0),
                is_active=active == "true",
            )
        except ValueError as e:
            raise CaptureError(f"Unexpected list-panes output: {line!r}") from e


def run_tmux(*args: str, error: type[HintpickError] = CaptureError, input: str | None = None) -> str:
    cmd = ["tmux", *args]
    logger.debug("run %s", cmd)
    try:
        result = subprocess.run(cmd, input=input, text=True, capture_output=True, check=True)
    except FileNotFoundError as e:
        raise error("tmux executable not found") from e
    except subprocess.CalledProcessError as e:
        stderr = (e.stderr or "").strip()
        raise error(f"`{' '.join(cmd)}` failed: {stderr or e.returncode}") from e
    return result.stdout


def list_panes() -> list[Pane]:
    output = run_tmux("list-panes", "-F", PANE_FORMAT)
    return [Pane.from_format_line(line) for line in output.splitlines() if line.strip()]


def active_pane(panes: list[Pane]) -> Pane:
    for pane in panes:
        if pane.is_active:
            return pane
    raise CaptureError("No active tmux pane in the current window")


def parse_options(output: str, prefix: str) -> dict[str, str]:
    """
    Extract `prefix*` options from `tmux show -g` output.

    Keys come back without the prefix; surrounding quotes are removed.
    """
    options: dict[str, str] = {}
    for line in output.splitlines():
        if not line.startswith(prefix) or " " not in line:
            continue
        key, value = line.split(" ", 1)
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
            value = value[1:-1]
        options[key[len(prefix) :]] = value
    return options


def get_options(prefix: str) -> dict[str, str]:
    return parse_options(run_tmux("show", "-g", error=ConfigurationError), prefix)


def capture_args(pane: Pane, region: CaptureRegion) -> list[str]:
    args = ["capture-pane", "-t", pane.id, "-J", "-p"]
    if region is CaptureRegion.ENTIRE_HISTORY:
        args += ["-S", "-", "-E", "-"]
    else:
        # Explicit bounds follow the scroll position when the pane is in copy mode.
        start = -pane.scroll_position
        end = pane.height - pane.scroll_position - 1
        args += ["-S", str(start), "-E", str(end)]
    return args


def capture_pane(pane: Pane, region: CaptureRegion) -> str:
    return run_tmux(*capture_args(pane, region))


def swap_pane_with(target: str) -> None:
    # -Z keeps the window zoomed if it was.
    run_tmux("swap-pane", "-Z", "-s", target)


def set_buffer(text: str) -> None:
    run_tmux("set-buffer", "--", text, error=OutputDeliveryError)


def send_keys(pane_id: str, text: str) -> None:
    # -l: send literally, no key-name lookup.
    run_tmux("send-keys", "-t", pane_id, "-l", "--", text, error=OutputDeliveryError)


def display_message(message: str) -> None:
    run_tmux("display-message", message, error=OutputDeliveryError)

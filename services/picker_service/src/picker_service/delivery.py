"""Deliver the emitted text to its destination. Nothing is retried."""

from __future__ import annotations

import logging
import shlex
import subprocess
import sys
from pathlib import Path
from typing import TextIO

from hintpick_core.errors import OutputDeliveryError
from hintpick_core.models import Emission, OutputDestination
from picker_service import tmux

logger = logging.getLogger(__name__)


def copy_to_clipboard(text: str, clipboard_exe: str) -> None:
    """Pipe `text` into the clipboard command (e.g. `pbcopy`, `xclip -selection clipboard`)."""
    cmd = shlex.split(clipboard_exe)
    if not cmd:
        raise OutputDeliveryError("No clipboard executable configured")
    logger.debug("clipboard %s (%d chars)", cmd, len(text))
    try:
        subprocess.run(cmd, input=text, text=True, capture_output=True, check=True)
    except FileNotFoundError as e:
        raise OutputDeliveryError(f"Clipboard executable not found: {cmd[0]}") from e
    except subprocess.CalledProcessError as e:
        stderr = (e.stderr or "").strip()
        raise OutputDeliveryError(f"Clipboard executable {cmd[0]} failed: {stderr or e.returncode}") from e


def write_output(text: str, path: Path | None = None, stream: TextIO | None = None) -> None:
    """Write to `path` when given, else print to `stream` (stdout) with a newline."""
    if path is not None:
        logger.debug("write %d chars to %s", len(text), path)
        try:
            path.write_text(text, encoding="utf-8")
        except OSError as e:
            raise OutputDeliveryError(f"Cannot write {path}: {e}") from e
        return
    stream = stream if stream is not None else sys.stdout
    try:
        stream.write(text + "\n")
        stream.flush()
    except OSError as e:
        raise OutputDeliveryError(f"Cannot write to stdout: {e}") from e


def deliver(
    emission: Emission,
    *,
    clipboard_exe: str,
    output: Path | None = None,
    stream: TextIO | None = None,
) -> None:
    """Standalone mode: the buffer destination is stdout (or `output`)."""
    if emission.destination is OutputDestination.CLIPBOARD:
        copy_to_clipboard(emission.text, clipboard_exe)
    else:
        write_output(emission.text, output, stream)


def deliver_tmux(
    emission: Emission,
    *,
    clipboard_exe: str,
    paste_pane_id: str | None = None,
) -> None:
    """
    tmux mode: the buffer destination is the tmux paste buffer.

    With `paste_pane_id`, an uppercased selection is also typed into that pane.
    """
    if paste_pane_id is not None and emission.uppercased:
        tmux.send_keys(paste_pane_id, emission.text)

    if emission.destination is OutputDestination.CLIPBOARD:
        copy_to_clipboard(emission.text, clipboard_exe)
    else:
        tmux.set_buffer(emission.text)

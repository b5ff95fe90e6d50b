"""Text acquisition: normalize captured text into lines the core can match."""

from __future__ import annotations

import logging
import re
import sys
from typing import TextIO

from hintpick_core.errors import CaptureError

logger = logging.getLogger(__name__)

# CSI sequences (colours, cursor movement) and OSC sequences (titles, links).
ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-?]*[ -/]*[@-~]|\x1b\][^\x07\x1b]*(?:\x07|\x1b\\)|\x1b[@-Z\\-_]")


def strip_ansi(text: str) -> str:
    return ANSI_ESCAPE_RE.sub("", text)


def normalize_text(text: str, *, tabsize: int = 8) -> list[str]:
    """
    Split captured text into display lines.

    - ANSI escape sequences are removed.
    - Tabs are expanded so columns match what the terminal showed.
    - A single trailing newline does not produce an extra empty line.
    """
    text = strip_ansi(text)
    if text.endswith("\n"):
        text = text[:-1]
    if not text:
        return []
    return [line.rstrip("\r").expandtabs(tabsize) for line in text.split("\n")]


def read_stdin(stream: TextIO | None = None) -> list[str]:
    """Read and normalize all of stdin (or `stream`)."""
    stream = stream if stream is not None else sys.stdin
    if stream is None or stream.isatty():
        raise CaptureError("Nothing piped on stdin: pipe the text to pick from")
    try:
        text = stream.read()
    except (OSError, UnicodeDecodeError) as e:
        raise CaptureError(f"Could not read stdin: {e}") from e
    lines = normalize_text(text)
    logger.debug("captured %d lines from stdin", len(lines))
    return lines

"""Keyboard events and decoding of raw terminal input."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class KeyName(str, Enum):
    CHAR = "char"
    ENTER = "enter"
    ESCAPE = "escape"
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    PAGE_UP = "page-up"
    PAGE_DOWN = "page-down"
    HOME = "home"
    END = "end"
    BACKSPACE = "backspace"
    CTRL_C = "ctrl-c"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Key:
    name: KeyName
    char: str = ""

    @classmethod
    def of(cls, char: str) -> Key:
        return cls(KeyName.CHAR, char)


ESC = "\x1b"

# Escape sequences emitted by xterm-like terminals (and tmux).
ESCAPE_SEQUENCES: dict[str, KeyName] = {
    "[A": KeyName.UP,
    "[B": KeyName.DOWN,
    "[C": KeyName.RIGHT,
    "[D": KeyName.LEFT,
    "OA": KeyName.UP,
    "OB": KeyName.DOWN,
    "OC": KeyName.RIGHT,
    "OD": KeyName.LEFT,
    "[5~": KeyName.PAGE_UP,
    "[6~": KeyName.PAGE_DOWN,
    "[H": KeyName.HOME,
    "[F": KeyName.END,
    "OH": KeyName.HOME,
    "OF": KeyName.END,
    "[1~": KeyName.HOME,
    "[4~": KeyName.END,
    "[7~": KeyName.HOME,
    "[8~": KeyName.END,
}

CONTROL_KEYS: dict[str, KeyName] = {
    "\r": KeyName.ENTER,
    "\n": KeyName.ENTER,
    "\x7f": KeyName.BACKSPACE,
    "\x08": KeyName.BACKSPACE,
    "\x03": KeyName.CTRL_C,
}


def _sequence_end(data: str, start: int) -> int:
    """Index just past the escape sequence body starting at `data[start]`."""
    if start >= len(data):
        return start
    if data[start] == "O":
        return min(start + 2, len(data))
    if data[start] != "[":
        return start
    i = start + 1
    # CSI: parameter bytes then one final byte in @..~
    while i < len(data) and not ("@" <= data[i] <= "~"):
        i += 1
    return min(i + 1, len(data))


def decode_keys(data: str) -> list[Key]:
    """
    Split a chunk of terminal input into keys.

    A lone ESC (nothing after it in the chunk) is the Escape key; the reader
    is expected to deliver a whole escape sequence in one chunk.
    """
    keys: list[Key] = []
    i = 0
    while i < len(data):
        ch = data[i]
        if ch == ESC:
            end = _sequence_end(data, i + 1)
            body = data[i + 1 : end]
            if not body:
                keys.append(Key(KeyName.ESCAPE))
                i += 1
                continue
            keys.append(Key(ESCAPE_SEQUENCES.get(body, KeyName.UNKNOWN), body))
            i = end
            continue
        if ch in CONTROL_KEYS:
            keys.append(Key(CONTROL_KEYS[ch]))
        elif ch.isprintable():
            keys.append(Key.of(ch))
        else:
            keys.append(Key(KeyName.UNKNOWN, ch))
        i += 1
    return keys

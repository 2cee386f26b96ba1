from __future__ import annotations

import curses
import enum
from dataclasses import dataclass
from typing import Optional, Union


class KeyType(enum.Enum):
    CHARACTER = "character"
    ARROW_UP = "arrow_up"
    ARROW_DOWN = "arrow_down"
    ARROW_LEFT = "arrow_left"
    ARROW_RIGHT = "arrow_right"
    HOME = "home"
    END = "end"
    PAGE_UP = "page_up"
    PAGE_DOWN = "page_down"
    ENTER = "enter"
    ESCAPE = "escape"
    BACKSPACE = "backspace"
    DELETE = "delete"
    EOF = "eof"
    OTHER = "other"


@dataclass(frozen=True)
class KeyEvent:
    type: KeyType
    char: Optional[str] = None

    @classmethod
    def of(cls, ch: str) -> "KeyEvent":
        return cls(KeyType.CHARACTER, ch)


# Shared instances for keys without payload.
UP = KeyEvent(KeyType.ARROW_UP)
DOWN = KeyEvent(KeyType.ARROW_DOWN)
LEFT = KeyEvent(KeyType.ARROW_LEFT)
RIGHT = KeyEvent(KeyType.ARROW_RIGHT)
HOME = KeyEvent(KeyType.HOME)
END = KeyEvent(KeyType.END)
PAGE_UP = KeyEvent(KeyType.PAGE_UP)
PAGE_DOWN = KeyEvent(KeyType.PAGE_DOWN)
ENTER = KeyEvent(KeyType.ENTER)
ESCAPE = KeyEvent(KeyType.ESCAPE)
BACKSPACE = KeyEvent(KeyType.BACKSPACE)
DELETE = KeyEvent(KeyType.DELETE)
EOF = KeyEvent(KeyType.EOF)


def _curses_keycodes() -> "dict[int, KeyEvent]":
    table = {
        curses.KEY_UP: UP,
        curses.KEY_DOWN: DOWN,
        curses.KEY_LEFT: LEFT,
        curses.KEY_RIGHT: RIGHT,
        curses.KEY_HOME: HOME,
        curses.KEY_END: END,
        curses.KEY_PPAGE: PAGE_UP,
        curses.KEY_NPAGE: PAGE_DOWN,
        curses.KEY_ENTER: ENTER,
        curses.KEY_BACKSPACE: BACKSPACE,
        curses.KEY_DC: DELETE,
    }
    # Not every curses build defines these.
    for name, event in (("KEY_EXIT", EOF), ("KEY_FIND", HOME), ("KEY_SELECT", END)):
        code = getattr(curses, name, None)
        if isinstance(code, int):
            table.setdefault(code, event)
    return table


_KEYCODES = _curses_keycodes()

_CONTROL_CHARS = {
    "\n": ENTER,
    "\r": ENTER,
    "\x1b": ESCAPE,
    "\x7f": BACKSPACE,
    "\x08": BACKSPACE,
    "\x04": EOF,  # Ctrl+D
}


def decode_key(ch: Union[int, str, None]) -> Optional[KeyEvent]:
    """
    Decode a `get_wch()`/`getch()` result into a `KeyEvent`.

    Returns None for "no input" (-1 / None). Keys outside the supported key space
    decode to `KeyType.OTHER` so callers can still treat them as activity.
    """
    if ch is None:
        return None
    if isinstance(ch, str):
        if not ch:
            return None
        if ch in _CONTROL_CHARS:
            return _CONTROL_CHARS[ch]
        if ch.isprintable():
            return KeyEvent.of(ch)
        return KeyEvent(KeyType.OTHER)
    if ch == -1:
        return None
    event = _KEYCODES.get(ch)
    if event is not None:
        return event
    # getch() delivers plain characters as ints.
    if 0 <= ch < 256:
        return decode_key(chr(ch))
    return KeyEvent(KeyType.OTHER)

from __future__ import annotations

import abc
import curses
import enum
import logging
import os
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from dataterm.formatting import display_width, truncate_to_width
from dataterm.keys import KeyEvent, decode_key

logger = logging.getLogger(__name__)


class Color(enum.Enum):
    BLACK = curses.COLOR_BLACK
    RED = curses.COLOR_RED
    GREEN = curses.COLOR_GREEN
    YELLOW = curses.COLOR_YELLOW
    MAGENTA = curses.COLOR_MAGENTA
    WHITE = curses.COLOR_WHITE


@dataclass(frozen=True)
class Style:
    fg: Color = Color.WHITE
    bg: Color = Color.BLACK
    bold: bool = False
    blink: bool = False

    def with_fg(self, fg: Color) -> "Style":
        return Style(fg=fg, bg=self.bg, bold=self.bold, blink=self.blink)

    def with_bold(self, bold: bool = True) -> "Style":
        return Style(fg=self.fg, bg=self.bg, bold=bold, blink=self.blink)


PLAIN = Style()


class Screen(abc.ABC):
    """
    Character-grid terminal as seen by the render loop.

    Coordinates are (column, row), both zero-based. Implementations are only ever
    called from the render thread.
    """

    @abc.abstractmethod
    def start(self) -> None:
        """Acquire the terminal. Raises if the terminal cannot be used."""

    @abc.abstractmethod
    def stop(self) -> None:
        """Release the terminal and restore its previous mode."""

    @abc.abstractmethod
    def clear(self) -> None: ...

    @abc.abstractmethod
    def size(self) -> Tuple[int, int]:
        """Return (rows, columns)."""

    @abc.abstractmethod
    def poll_resize(self) -> bool:
        """True if the terminal was resized since the previous call."""

    @abc.abstractmethod
    def set_cursor(self, pos: Optional[Tuple[int, int]]) -> None:
        """Show the cursor at (column, row), or hide it when `pos` is None."""

    @abc.abstractmethod
    def put_string(self, col: int, row: int, text: str, style: Style = PLAIN) -> None: ...

    @abc.abstractmethod
    def refresh(self, complete: bool = False) -> None:
        """Flush pending writes; `complete` repaints every cell instead of the delta."""

    @abc.abstractmethod
    def poll_key(self, wait_ms: int) -> Optional[KeyEvent]:
        """Wait at most `wait_ms` for one decoded key; None on timeout."""

    def fill_row(self, row: int, ch: str, style: Style = PLAIN) -> None:
        _rows, cols = self.size()
        self.put_string(0, row, ch * max(0, cols), style)


class CursesScreen(Screen):
    """`Screen` on top of the standard `curses` module."""

    def __init__(self, *, escdelay_ms: int = 25) -> None:
        self._escdelay_ms = escdelay_ms
        self._stdscr: Optional["curses.window"] = None
        self._pairs: Dict[Tuple[int, int], int] = {}
        self._has_colors = False
        self._resized = False
        self._last_size: Optional[Tuple[int, int]] = None

    def start(self) -> None:
        # A lone ESC must not wait a full second for a possible escape sequence.
        os.environ.setdefault("ESCDELAY", str(self._escdelay_ms))
        stdscr = curses.initscr()
        try:
            curses.noecho()
            curses.cbreak()
            stdscr.keypad(True)
            try:
                curses.curs_set(0)
            except curses.error:
                # Some terminals (or TERM/terminfo combinations) don't support this.
                pass
            self._has_colors = self._init_colors()
        except Exception:
            curses.endwin()
            raise
        self._stdscr = stdscr
        self._last_size = stdscr.getmaxyx()
        logger.debug("curses screen started (size=%s, colors=%s)", self._last_size, self._has_colors)

    def stop(self) -> None:
        stdscr = self._stdscr
        self._stdscr = None
        if stdscr is None:
            return
        try:
            stdscr.keypad(False)
            curses.nocbreak()
            curses.echo()
            try:
                curses.curs_set(1)
            except curses.error:
                pass
        finally:
            curses.endwin()

    def _init_colors(self) -> bool:
        if not curses.has_colors():
            return False
        try:
            curses.start_color()
        except curses.error:
            return False
        return True

    def _win(self) -> "curses.window":
        if self._stdscr is None:
            raise RuntimeError("screen is not started")
        return self._stdscr

    def clear(self) -> None:
        self._win().erase()

    def size(self) -> Tuple[int, int]:
        rows, cols = self._win().getmaxyx()
        return rows, cols

    def poll_resize(self) -> bool:
        win = self._win()
        current = win.getmaxyx()
        resized = self._resized or current != self._last_size
        self._resized = False
        self._last_size = current
        return resized

    def set_cursor(self, pos: Optional[Tuple[int, int]]) -> None:
        win = self._win()
        try:
            if pos is None:
                curses.curs_set(0)
                return
            col, row = pos
            curses.curs_set(1)
            win.move(row, col)
        except curses.error:
            return

    def _attr(self, style: Style) -> int:
        attr = 0
        if style.bold:
            attr |= curses.A_BOLD
        if style.blink:
            attr |= curses.A_BLINK
        if not self._has_colors:
            # Monochrome fallback: a light background means "inverted".
            if style.bg is Color.WHITE:
                attr |= curses.A_REVERSE
            return attr
        key = (style.fg.value, style.bg.value)
        pair = self._pairs.get(key)
        if pair is None:
            pair = len(self._pairs) + 1
            try:
                curses.init_pair(pair, style.fg.value, style.bg.value)
            except curses.error:
                return attr | (curses.A_REVERSE if style.bg is Color.WHITE else 0)
            self._pairs[key] = pair
        return attr | curses.color_pair(pair)

    def put_string(self, col: int, row: int, text: str, style: Style = PLAIN) -> None:
        win = self._win()
        rows, cols = win.getmaxyx()
        if row < 0 or row >= rows or col < 0 or col >= cols:
            return
        text = truncate_to_width(text, cols - col)
        if not text:
            return
        try:
            win.addstr(row, col, text, self._attr(style))
        except curses.error:
            # Writing the bottom-right cell moves the cursor off-grid; the text is drawn anyway.
            return

    def refresh(self, complete: bool = False) -> None:
        win = self._win()
        if complete:
            win.clearok(True)
        win.noutrefresh()
        curses.doupdate()

    def poll_key(self, wait_ms: int) -> Optional[KeyEvent]:
        win = self._win()
        win.timeout(max(0, int(wait_ms)))
        try:
            ch = win.get_wch()
        except curses.error:
            return None
        if ch == curses.KEY_RESIZE:
            self._resized = True
            try:
                curses.update_lines_cols()
            except AttributeError:
                pass
            return None
        return decode_key(ch)


def right_aligned_col(cols: int, text: str) -> int:
    return max(0, cols - display_width(text))

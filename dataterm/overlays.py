from __future__ import annotations

import abc
import enum
import logging
import threading
from typing import TYPE_CHECKING, Callable, Optional

from dataterm.formatting import display_width
from dataterm.keys import KeyEvent, KeyType
from dataterm.records import Record
from dataterm.screen import Color, Screen, Style

if TYPE_CHECKING:
    from dataterm.terminal import DataTerminal

logger = logging.getLogger(__name__)


class Overlay(abc.ABC):
    """
    Modal panel bound to one record, drawn above the status bar.

    While an overlay is active the render loop forwards every key to it and
    drops it once `completed` turns true.
    """

    kind: str = "overlay"

    def __init__(self, terminal: "DataTerminal", record: Optional[Record]) -> None:
        self.terminal = terminal
        self.record = record

    @property
    @abc.abstractmethod
    def height(self) -> int: ...

    @abc.abstractmethod
    def draw(self, screen: Screen, start_row: int) -> None: ...

    @abc.abstractmethod
    def handle_key(self, key: KeyEvent) -> None: ...

    @property
    @abc.abstractmethod
    def completed(self) -> bool: ...

    @property
    @abc.abstractmethod
    def status_text(self) -> str: ...


# (terminal, selected record, key) -> overlay to open, or None.
ActivationRule = Callable[["DataTerminal", Record, KeyEvent], Optional[Overlay]]


class EditState(enum.Enum):
    EDITING = "editing"
    SUBMITTING = "submitting"
    COMMITTED = "committed"
    FAILED = "failed"


_STATUS_TEXT = {
    EditState.EDITING: "[ESC] Cancel [ENTER] Change",
    EditState.SUBMITTING: "Please wait ...",
    EditState.COMMITTED: "[ESC] Close panel",
    EditState.FAILED: "[ESC] Close panel",
}


class EditOverlay(Overlay):
    """
    One-line value editor. Enter commits the trimmed text in the background;
    the overlay then reports the outcome until closed with Escape.
    """

    kind = "edit"

    def __init__(self, terminal: "DataTerminal", record: Optional[Record]) -> None:
        super().__init__(terminal, record)
        self._lock = threading.Lock()
        self._state = EditState.EDITING
        self._completed = False
        self.error: Optional[str] = None
        self.buffer = ""
        self.cursor = 0

        if record is None or record.is_read_only():
            self._completed = True
            return
        value = record.value()
        if value is not None:
            self.buffer = value

    @property
    def state(self) -> EditState:
        with self._lock:
            return self._state

    def _set_state(self, state: EditState) -> None:
        with self._lock:
            self._state = state

    @property
    def height(self) -> int:
        return 1

    @property
    def completed(self) -> bool:
        with self._lock:
            return self._completed

    @property
    def status_text(self) -> str:
        return _STATUS_TEXT[self.state]

    def handle_key(self, key: KeyEvent) -> None:
        if self.completed:
            return
        state = self.state
        if state is EditState.SUBMITTING:
            return
        if key.type is KeyType.ESCAPE:
            with self._lock:
                self._completed = True
            return
        if state is not EditState.EDITING:
            return

        kt = key.type
        if kt is KeyType.ARROW_LEFT:
            if self.cursor > 0:
                self.cursor -= 1
        elif kt is KeyType.ARROW_RIGHT:
            if self.cursor < len(self.buffer):
                self.cursor += 1
        elif kt is KeyType.HOME:
            self.cursor = 0
        elif kt is KeyType.END:
            self.cursor = len(self.buffer)
        elif kt is KeyType.CHARACTER and key.char:
            self.buffer = self.buffer[: self.cursor] + key.char + self.buffer[self.cursor :]
            self.cursor += len(key.char)
        elif kt is KeyType.DELETE:
            if self.cursor < len(self.buffer):
                self.buffer = self.buffer[: self.cursor] + self.buffer[self.cursor + 1 :]
        elif kt is KeyType.BACKSPACE:
            if self.cursor > 0:
                self.buffer = self.buffer[: self.cursor - 1] + self.buffer[self.cursor :]
                self.cursor -= 1
        elif kt is KeyType.ENTER:
            self._submit()

    def _submit(self) -> None:
        record = self.record
        if record is None:
            return
        new_value = self.buffer.strip()
        self._set_state(EditState.SUBMITTING)
        logger.info("Committing value for %r", record.label())

        def _run() -> None:
            try:
                record.set_value(new_value)
            except Exception as e:
                logger.warning("Change of value for %r failed: %s", record.label(), e, exc_info=True)
                with self._lock:
                    self.error = str(e) or type(e).__name__
                    self._state = EditState.FAILED
                return
            self._set_state(EditState.COMMITTED)
            logger.info("Value for %r committed", record.label())
            self.terminal.notify(record)

        self.terminal.commits.submit(_run)

    def draw(self, screen: Screen, start_row: int) -> None:
        base = Style(fg=Color.WHITE)
        state = self.state
        if state is EditState.EDITING:
            screen.put_string(0, start_row, ">", base.with_bold())
            screen.put_string(2, start_row, self.buffer, base)
            screen.set_cursor((2 + display_width(self.buffer[: self.cursor]), start_row))
        elif state is EditState.SUBMITTING:
            screen.put_string(0, start_row, "Changing value ...", Style(fg=Color.WHITE, blink=True))
        elif state is EditState.COMMITTED:
            screen.put_string(0, start_row, "Value has been changed.", Style(fg=Color.GREEN))
        else:
            text = "Change of value failed."
            if self.error:
                text = f"{text} ({self.error})"
            screen.put_string(0, start_row, text, Style(fg=Color.RED))


def edit_on_enter(terminal: "DataTerminal", record: Record, key: KeyEvent) -> Optional[Overlay]:
    """Default activation rule: Enter opens the value editor."""
    if key.type is KeyType.ENTER:
        return EditOverlay(terminal, record)
    return None

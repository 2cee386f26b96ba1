from __future__ import annotations

import abc
import threading
from typing import Callable, List, Optional


class ValueRejected(Exception):
    """Raised by `Record.set_value()` when the new value is not accepted."""


class Record(abc.ABC):
    """
    A labelled value shown as one row of a `DataTerminal`.

    `set_value()` is called from a background commit thread, never from the
    render thread. Implementations whose value changes on their own call
    `fire_value_changed()` (from any thread) to get the row refreshed.
    """

    # Shared by all records; guards the per-record terminal lists, created on first registration.
    _listeners_lock = threading.Lock()

    def _attach(self, terminal: object) -> None:
        with Record._listeners_lock:
            listeners: List[object] = self.__dict__.setdefault("_listeners", [])
            if not any(t is terminal for t in listeners):
                listeners.append(terminal)

    def fire_value_changed(self) -> None:
        """Tell every terminal showing this record to re-read it. No-op before registration."""
        with Record._listeners_lock:
            listeners = list(self.__dict__.get("_listeners", ()))
        for terminal in listeners:
            terminal.notify(self)  # type: ignore[attr-defined]

    @abc.abstractmethod
    def label(self) -> str: ...

    @abc.abstractmethod
    def is_read_only(self) -> bool: ...

    @abc.abstractmethod
    def value(self) -> Optional[str]:
        """Current value as text; None means "not available"."""

    @abc.abstractmethod
    def set_value(self, new_value: str) -> None:
        """Apply `new_value` or raise (e.g. `ValueRejected`)."""


class SimpleRecord(Record):
    """In-memory record. `validator` may raise `ValueRejected` to refuse a value."""

    def __init__(
        self,
        label: str,
        value: Optional[str] = None,
        *,
        read_only: bool = False,
        validator: Optional[Callable[[str], None]] = None,
    ) -> None:
        super().__init__()
        self._label = label
        self._value = value
        self._read_only = read_only
        self._validator = validator
        self._lock = threading.Lock()

    def label(self) -> str:
        return self._label

    def is_read_only(self) -> bool:
        return self._read_only

    def value(self) -> Optional[str]:
        with self._lock:
            return self._value

    def set_value(self, new_value: str) -> None:
        if self._validator is not None:
            self._validator(new_value)
        with self._lock:
            self._value = new_value

    def update(self, new_value: Optional[str]) -> None:
        """Change the value from the data source side and notify terminals."""
        with self._lock:
            self._value = new_value
        self.fire_value_changed()

    def __repr__(self) -> str:
        return f"SimpleRecord({self._label!r}, {self._value!r}, read_only={self._read_only})"

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Dict, List, Optional

from dataterm.errors import StateError
from dataterm.records import Record


@dataclass
class Row:
    record: Record
    label: str
    value: Optional[str]
    read_only: bool
    # The row's value changed and has not been drawn since.
    invalidated: bool = True
    # time.monotonic() of the first redraw after the last invalidation.
    highlight_start: Optional[float] = None

    def mark_displayed(self, now: float) -> None:
        if self.invalidated:
            self.invalidated = False
            self.highlight_start = now

    def is_highlighted(self, now: float, duration_s: float) -> bool:
        if self.highlight_start is None:
            return False
        return now - self.highlight_start < duration_s


class RowStore:
    """
    Ordered display rows, one per registered record.

    `lock` guards the rows and the terminal state built on top of them (running
    flag, active overlay, configuration); the render loop holds it while drawing
    and dispatching keys. `notify()` may be called from any thread.
    """

    def __init__(self) -> None:
        self.lock = threading.RLock()
        self.running = False
        self._rows: List[Row] = []
        self._by_record: Dict[int, Row] = {}

    def __len__(self) -> int:
        with self.lock:
            return len(self._rows)

    def __getitem__(self, idx: int) -> Row:
        with self.lock:
            return self._rows[idx]

    def rows(self) -> List[Row]:
        with self.lock:
            return list(self._rows)

    def register(self, record: Record) -> bool:
        """Append a row for `record`. Returns False if it was already registered."""
        if record is None:
            raise TypeError("record cannot be None")
        with self.lock:
            if self.running:
                raise StateError("Records cannot be added to a running data terminal.")
            if id(record) in self._by_record:
                return False
            row = Row(
                record=record,
                label=record.label(),
                value=record.value(),
                read_only=record.is_read_only(),
            )
            self._by_record[id(record)] = row
            self._rows.append(row)
            return True

    def notify(self, record: Optional[Record]) -> None:
        if record is None:
            return
        # Read and write under one lock hold: updates for a record apply in order.
        with self.lock:
            row = self._by_record.get(id(record))
            if row is None:
                return
            row.label = record.label()
            row.value = record.value()
            row.read_only = record.is_read_only()
            row.invalidated = True

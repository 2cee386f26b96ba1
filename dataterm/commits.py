from __future__ import annotations

import logging
import queue
import threading
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 4


class CommitRunner:
    """
    Runs value commits off the render thread.

    Tasks go through a queue to at most `max_workers` daemon threads, started on
    demand. `drain()` waits a bounded time for outstanding work.
    """

    def __init__(self, *, max_workers: int = DEFAULT_MAX_WORKERS) -> None:
        self._max_workers = max(1, int(max_workers))
        self._q: "queue.Queue[Callable[[], None]]" = queue.Queue()
        self._workers: List[threading.Thread] = []
        self._cond = threading.Condition()
        self._inflight = 0

    def submit(self, task: Callable[[], None]) -> None:
        with self._cond:
            self._inflight += 1
            if len(self._workers) < min(self._max_workers, self._inflight):
                t = threading.Thread(
                    target=self._work,
                    name=f"dataterm-commit-{len(self._workers) + 1}",
                    daemon=True,
                )
                self._workers.append(t)
                t.start()
        self._q.put(task)

    def _work(self) -> None:
        while True:
            task = self._q.get()
            try:
                task()
            except Exception:
                # Tasks report their own failures; this only keeps the worker alive.
                logger.exception("Unhandled error in commit task")
            finally:
                with self._cond:
                    self._inflight -= 1
                    self._cond.notify_all()

    def pending(self) -> int:
        with self._cond:
            return self._inflight

    def has_pending(self) -> bool:
        return self.pending() > 0

    def drain(self, timeout: Optional[float] = None) -> int:
        """Wait until no task is queued or running. Returns the number still outstanding."""
        with self._cond:
            self._cond.wait_for(lambda: self._inflight == 0, timeout=timeout)
            return self._inflight

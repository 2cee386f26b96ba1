from __future__ import annotations

import logging
import time
from typing import Callable, List, Optional, Tuple

from dataterm import render
from dataterm.commits import DEFAULT_MAX_WORKERS, CommitRunner
from dataterm.config import (
    DEFAULT_COMMIT_DRAIN_S,
    DEFAULT_HIGHLIGHT_MS,
    DEFAULT_REFRESH_MS,
    DEFAULT_STATUS_TEXT,
    DEFAULT_TITLE,
    clamp_period_ms,
)
from dataterm.errors import StateError, TerminalError
from dataterm.keys import KeyEvent, KeyType
from dataterm.overlays import ActivationRule, Overlay, edit_on_enter
from dataterm.records import Record
from dataterm.rows import Row, RowStore
from dataterm.screen import CursesScreen, Screen
from dataterm.view import ViewState, compute_page_height

logger = logging.getLogger(__name__)

# Granularity of the bounded key wait.
KEY_CHECK_PERIOD_MS = 20


class DataTerminal:
    """
    Full-screen list of records with a modal value editor.

    Register records and configure the terminal, then call `launch()`, which
    runs the render/input loop on the calling thread until end of input
    (Ctrl+D). Records may call `notify()` from any thread at any time.
    """

    def __init__(
        self,
        *,
        screen_factory: Optional[Callable[[], Screen]] = None,
        commit_workers: int = DEFAULT_MAX_WORKERS,
        commit_drain_s: float = DEFAULT_COMMIT_DRAIN_S,
    ) -> None:
        self._store = RowStore()
        self._lock = self._store.lock
        self._view = ViewState()
        self._overlay: Optional[Overlay] = None
        self._screen_factory: Callable[[], Screen] = screen_factory or CursesScreen
        self._last_size: Optional[Tuple[int, int]] = None

        self._refresh_ms = DEFAULT_REFRESH_MS
        self._highlight_ms = DEFAULT_HIGHLIGHT_MS
        self._status_text = DEFAULT_STATUS_TEXT
        self._title = DEFAULT_TITLE
        self._activation: ActivationRule = edit_on_enter

        self.commits = CommitRunner(max_workers=commit_workers)
        self._commit_drain_s = commit_drain_s

    # Records

    def register(self, record: Record) -> None:
        """Add `record` as the next row. Duplicates are ignored; fails once running."""
        if self._store.register(record):
            record._attach(self)

    def notify(self, record: Optional[Record]) -> None:
        """Re-read `record` into its row. Thread-safe; unknown records are ignored."""
        self._store.notify(record)

    @property
    def rows(self) -> List[Row]:
        return self._store.rows()

    # Configuration

    def _ensure_configurable(self) -> None:
        if self._store.running:
            raise StateError("Running data terminal cannot be configured.")

    @property
    def refresh_period_ms(self) -> int:
        with self._lock:
            return self._refresh_ms

    def set_refresh_period(self, ms: int) -> None:
        with self._lock:
            self._ensure_configurable()
            self._refresh_ms = clamp_period_ms(ms)

    @property
    def highlight_duration_ms(self) -> int:
        with self._lock:
            return self._highlight_ms

    def set_highlight_duration(self, ms: int) -> None:
        with self._lock:
            self._ensure_configurable()
            self._highlight_ms = clamp_period_ms(ms)

    @property
    def status_text(self) -> str:
        with self._lock:
            return self._status_text

    def set_status_text(self, text: Optional[str]) -> None:
        with self._lock:
            self._ensure_configurable()
            self._status_text = text or ""

    @property
    def title(self) -> str:
        with self._lock:
            return self._title

    def set_title(self, title: str) -> None:
        with self._lock:
            self._ensure_configurable()
            self._title = title

    def set_activation_rule(self, rule: ActivationRule) -> None:
        with self._lock:
            self._ensure_configurable()
            self._activation = rule

    # Runtime state

    @property
    def running(self) -> bool:
        with self._lock:
            return self._store.running

    @property
    def selected_index(self) -> int:
        with self._lock:
            return self._view.selected

    @property
    def top_index(self) -> int:
        with self._lock:
            return self._view.top

    @property
    def page_height(self) -> int:
        with self._lock:
            return self._view.page_height

    @property
    def active_overlay(self) -> Optional[Overlay]:
        with self._lock:
            return self._overlay

    # Main loop

    def launch(self) -> None:
        with self._lock:
            if self._store.running:
                raise StateError("Data terminal is already running.")
            if len(self._store) == 0:
                raise StateError("No records to display.")
            self._store.running = True

        try:
            screen = self._screen_factory()
            screen.start()
        except Exception as e:
            with self._lock:
                self._store.running = False
            logger.error("Initialization of terminal screen failed: %s", e)
            raise TerminalError("Initialization of terminal screen failed.") from e

        logger.info("Data terminal started with %d records", len(self._store))
        try:
            with self._lock:
                self._view.reset()
                self._overlay = None
                self._last_size = None
            self._run(screen)
        except Exception as e:
            logger.exception("Data terminal failed")
            raise TerminalError("Data terminal failed.") from e
        finally:
            try:
                screen.stop()
            except Exception:
                logger.debug("Ignoring error while stopping the screen", exc_info=True)
            with self._lock:
                self._overlay = None
                self._store.running = False
            outstanding = self.commits.drain(timeout=self._commit_drain_s)
            if outstanding:
                logger.warning("%d value change(s) still running after shutdown", outstanding)
            logger.info("Data terminal stopped")

    def _run(self, screen: Screen) -> None:
        while True:
            with self._lock:
                self._refresh_screen(screen)
                refresh_ms = self._refresh_ms

            key = self._read_input(screen, refresh_ms)
            if key is None:
                continue
            if key.type is KeyType.EOF:
                return

            with self._lock:
                self._handle_key(key)

    def _read_input(self, screen: Screen, timeout_ms: int) -> Optional[KeyEvent]:
        deadline = time.monotonic() + timeout_ms / 1000.0
        while True:
            remaining_ms = int((deadline - time.monotonic()) * 1000)
            if remaining_ms <= 0:
                return None
            key = screen.poll_key(min(KEY_CHECK_PERIOD_MS, remaining_ms))
            if key is not None:
                return key

    def _handle_key(self, key: KeyEvent) -> None:
        overlay = self._overlay
        if overlay is not None:
            overlay.handle_key(key)
            if overlay.completed:
                self._overlay = None
            return

        n = len(self._store)
        self._view.navigate(key, n)
        record = self._store[self._view.selected].record
        self._overlay = self._activation(self, record, key)

    def _refresh_screen(self, screen: Screen) -> None:
        overlay = self._overlay
        if overlay is not None and overlay.completed:
            self._overlay = overlay = None

        size = screen.size()
        complete = screen.poll_resize() or size != self._last_size
        self._last_size = size
        term_rows, _cols = size

        screen.clear()
        screen.set_cursor(None)

        rows = self._store.rows()
        render.draw_header(screen, self._title, self._view.selected, len(rows))
        render.draw_status_bar(screen, overlay.status_text if overlay is not None else self._status_text)

        overlay_h = 0
        if overlay is not None:
            overlay_h = overlay.height
            render.draw_overlay_border(screen, overlay_h)

        self._view.page_height = compute_page_height(term_rows, overlay_h, has_overlay=overlay is not None)
        self._view.ensure_visible(len(rows))

        render.draw_rows(
            screen,
            rows,
            top=self._view.top,
            page_height=self._view.page_height,
            selected=self._view.selected,
            now=time.monotonic(),
            highlight_s=self._highlight_ms / 1000.0,
        )

        if overlay is not None:
            overlay.draw(screen, render.overlay_start_row(term_rows, overlay_h))

        screen.refresh(complete)

from __future__ import annotations

import argparse
import datetime
import logging
import sys
import threading
from typing import List, Optional

from dataterm import __version__
from dataterm.config import (
    ENV_DATATERM_HIGHLIGHT_MS,
    ENV_DATATERM_LOG_FILE,
    ENV_DATATERM_LOG_LEVEL,
    ENV_DATATERM_REFRESH_MS,
    ENV_DATATERM_STATUS_TEXT,
    Settings,
    settings_from_env,
)
from dataterm.errors import TerminalError
from dataterm.logging_setup import setup_logging
from dataterm.records import SimpleRecord
from dataterm.terminal import DataTerminal

logger = logging.getLogger(__name__)


def build_demo_records(count: int) -> List[SimpleRecord]:
    """`count` editable records; every third one is read-only."""
    return [SimpleRecord(f"Item {i}", read_only=(i % 3 == 0)) for i in range(max(0, count))]


def _now_text() -> str:
    return datetime.datetime.now().strftime("%H:%M:%S")


def start_clock(record: SimpleRecord, *, period_s: float = 1.0) -> threading.Event:
    """Update `record` with the wall clock from a daemon thread until the returned event is set."""
    stop = threading.Event()

    def _run() -> None:
        while not stop.wait(period_s):
            record.update(_now_text())

    threading.Thread(target=_run, name="dataterm-clock", daemon=True).start()
    return stop


def cmd_demo(settings: Settings, *, count: int, tick: bool) -> int:
    terminal = DataTerminal()
    clock: Optional[SimpleRecord] = None
    if tick:
        clock = SimpleRecord("Clock", _now_text(), read_only=True)
        terminal.register(clock)
    for record in build_demo_records(count):
        terminal.register(record)
    settings.apply(terminal)
    logger.info("Starting demo with %d records (clock=%s)", len(terminal.rows), tick)

    stop_clock = start_clock(clock) if clock is not None else None
    try:
        terminal.launch()
    except TerminalError as e:
        cause = e.__cause__
        detail = f": {cause}" if cause is not None else ""
        print(f"{e}{detail}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 130
    finally:
        if stop_clock is not None:
            stop_clock.set()
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    env_settings = settings_from_env()

    parser = argparse.ArgumentParser(prog="dataterm", description="Terminal record viewer with a value editor")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--refresh-ms",
        dest="refresh_ms",
        type=int,
        default=env_settings.refresh_ms,
        help=f"Screen refresh period in ms, at least 100 (or set ${ENV_DATATERM_REFRESH_MS}).",
    )
    parser.add_argument(
        "--highlight-ms",
        dest="highlight_ms",
        type=int,
        default=env_settings.highlight_ms,
        help=f"How long a changed value stays highlighted, in ms (or set ${ENV_DATATERM_HIGHLIGHT_MS}).",
    )
    parser.add_argument(
        "--status-text",
        dest="status_text",
        default=env_settings.status_text,
        help=f"Status bar text when no panel is open (or set ${ENV_DATATERM_STATUS_TEXT}).",
    )
    parser.add_argument("--title", dest="title", default=env_settings.title, help="Header title.")
    parser.add_argument(
        "--log-file",
        dest="log_file",
        default=env_settings.log_file,
        help=f"Write logs to this file (or set ${ENV_DATATERM_LOG_FILE}).",
    )
    parser.add_argument(
        "--log-level",
        dest="log_level",
        default=env_settings.log_level,
        help=f"Log level (or set ${ENV_DATATERM_LOG_LEVEL}).",
    )

    sub = parser.add_subparsers(dest="command")
    p_demo = sub.add_parser("demo", help="Show generated sample records (default).")
    p_demo.add_argument("--count", type=int, default=40, help="Number of sample records.")
    p_demo.add_argument("--tick", action="store_true", help="Add a read-only clock record updated every second.")

    args = parser.parse_args(argv)

    settings = Settings(
        refresh_ms=args.refresh_ms,
        highlight_ms=args.highlight_ms,
        status_text=args.status_text,
        title=args.title,
        log_file=args.log_file,
        log_level=args.log_level,
    )
    setup_logging(settings.log_file, settings.log_level)

    cmd = args.command or "demo"
    if cmd == "demo":
        count = getattr(args, "count", 40)
        tick = bool(getattr(args, "tick", False))
        if count <= 0 and not tick:
            print("Nothing to display: --count must be positive.", file=sys.stderr)
            return 2
        return cmd_demo(settings, count=count, tick=tick)

    parser.print_help()
    return 2

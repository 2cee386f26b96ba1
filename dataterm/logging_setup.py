from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(threadName)s | %(message)s"

_HANDLER_NAME = "dataterm-file"


def setup_logging(
    log_file: Optional[Union[str, Path]],
    level: str = "INFO",
    *,
    max_bytes: int = 1_000_000,
    backup_count: int = 3,
) -> Optional[Path]:
    """
    Send the `dataterm` loggers to a rotating log file.

    Curses owns the terminal while the data terminal runs, so there is never a
    console handler. Without `log_file` nothing is configured and the package's
    NullHandler keeps logging silent. Safe to call repeatedly (the previous file
    handler is replaced).

    Returns the resolved log file path, or None.
    """
    logger = logging.getLogger("dataterm")
    for h in list(logger.handlers):
        if h.get_name() == _HANDLER_NAME:
            logger.removeHandler(h)
            h.close()

    if not log_file:
        return None

    path = Path(os.path.expanduser(str(log_file)))
    path.parent.mkdir(parents=True, exist_ok=True)

    lvl = getattr(logging, str(level or "INFO").upper().strip(), logging.INFO)
    if not isinstance(lvl, int):
        lvl = logging.INFO
    handler = RotatingFileHandler(
        filename=str(path),
        maxBytes=max(0, int(max_bytes)),
        backupCount=max(0, int(backup_count)),
        encoding="utf-8",
    )
    handler.set_name(_HANDLER_NAME)
    handler.setLevel(lvl)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    logger.addHandler(handler)
    logger.setLevel(lvl)
    logger.info("dataterm logging enabled (file=%s, level=%s)", os.fspath(path), logging.getLevelName(lvl))
    return path

"""
Scrollable label/value record list for character terminals, with a modal value
editor that commits changes in the background.
"""

import logging

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

from dataterm.errors import StateError, TerminalError  # noqa: E402
from dataterm.records import Record, SimpleRecord, ValueRejected  # noqa: E402
from dataterm.terminal import DataTerminal  # noqa: E402

__all__ = [
    "DataTerminal",
    "Record",
    "SimpleRecord",
    "StateError",
    "TerminalError",
    "ValueRejected",
    "__version__",
]

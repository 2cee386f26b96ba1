from __future__ import annotations


class StateError(RuntimeError):
    """
    Raised when an operation is not allowed in the terminal's current state:
    configuring or registering records after launch, launching twice, or
    launching without any records.
    """


class TerminalError(RuntimeError):
    """
    Raised from `DataTerminal.launch()` when the screen cannot be acquired or the
    render loop fails. The original exception is chained as `__cause__`.
    """

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import TYPE_CHECKING, Mapping, Optional

if TYPE_CHECKING:
    from dataterm.terminal import DataTerminal

ENV_DATATERM_REFRESH_MS = "DATATERM_REFRESH_MS"
ENV_DATATERM_HIGHLIGHT_MS = "DATATERM_HIGHLIGHT_MS"
ENV_DATATERM_STATUS_TEXT = "DATATERM_STATUS_TEXT"
ENV_DATATERM_LOG_FILE = "DATATERM_LOG_FILE"
ENV_DATATERM_LOG_LEVEL = "DATATERM_LOG_LEVEL"

MIN_PERIOD_MS = 100
DEFAULT_REFRESH_MS = 300
DEFAULT_HIGHLIGHT_MS = 10_000
DEFAULT_STATUS_TEXT = "[ENTER] Edit"
DEFAULT_TITLE = "Data terminal"
DEFAULT_LOG_LEVEL = "INFO"
# Bounded wait for outstanding commits when the terminal stops.
DEFAULT_COMMIT_DRAIN_S = 2.0


def clamp_period_ms(ms: int) -> int:
    return max(MIN_PERIOD_MS, int(ms))


def _env_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = (env.get(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_str(env: Mapping[str, str], name: str) -> Optional[str]:
    raw = env.get(name)
    if raw is None:
        return None
    raw = raw.strip()
    return raw or None


@dataclass
class Settings:
    refresh_ms: int = DEFAULT_REFRESH_MS
    highlight_ms: int = DEFAULT_HIGHLIGHT_MS
    status_text: str = DEFAULT_STATUS_TEXT
    title: str = DEFAULT_TITLE
    log_file: Optional[str] = None
    log_level: str = DEFAULT_LOG_LEVEL

    def apply(self, terminal: "DataTerminal") -> None:
        """Copy the terminal-facing settings onto `terminal` (before launch)."""
        terminal.set_refresh_period(self.refresh_ms)
        terminal.set_highlight_duration(self.highlight_ms)
        terminal.set_status_text(self.status_text)
        terminal.set_title(self.title)


def settings_from_env(env: Optional[Mapping[str, str]] = None) -> Settings:
    env = os.environ if env is None else env
    return Settings(
        refresh_ms=_env_int(env, ENV_DATATERM_REFRESH_MS, DEFAULT_REFRESH_MS),
        highlight_ms=_env_int(env, ENV_DATATERM_HIGHLIGHT_MS, DEFAULT_HIGHLIGHT_MS),
        status_text=_env_str(env, ENV_DATATERM_STATUS_TEXT) or DEFAULT_STATUS_TEXT,
        log_file=_env_str(env, ENV_DATATERM_LOG_FILE),
        log_level=(_env_str(env, ENV_DATATERM_LOG_LEVEL) or DEFAULT_LOG_LEVEL).upper(),
    )

"""Application settings for the polling commands."""

from __future__ import annotations

from dataclasses import dataclass
import json
import logging
import os
from pathlib import Path
from typing import Optional


_DEFAULT_POLL_INTERVAL = 60.0
_MIN_POLL_INTERVAL = 1.0
_DEFAULT_LOG_LEVEL = "INFO"
_ALLOWED_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR"}


@dataclass(frozen=True)
class Settings:
    poll_interval_seconds: float = _DEFAULT_POLL_INTERVAL
    max_polls: Optional[int] = None
    log_level: str = _DEFAULT_LOG_LEVEL

    @property
    def logging_level(self) -> int:
        return getattr(logging, self.log_level)


def load_settings(path: Optional[Path]) -> Settings:
    """Load settings from JSON config file, with environment variable overrides.

    Priority order:
    1. Environment variables (SEQDIR_POLL_INTERVAL, SEQDIR_LOG_LEVEL)
    2. JSON config file
    3. Defaults

    Args:
        path: Path to JSON config file, or None to use defaults only

    Returns:
        Settings object with resolved values
    """
    json_settings = {}
    if path and path.exists():
        json_settings = json.loads(path.read_text())

    interval = _parse_interval(
        os.getenv("SEQDIR_POLL_INTERVAL")
        or json_settings.get("poll_interval_seconds", _DEFAULT_POLL_INTERVAL)
    )

    max_polls = json_settings.get("max_polls")
    if max_polls is not None and (not isinstance(max_polls, int) or max_polls < 1):
        raise ValueError(f"max_polls must be a positive integer: {max_polls!r}")

    log_level = str(
        os.getenv("SEQDIR_LOG_LEVEL") or json_settings.get("log_level", _DEFAULT_LOG_LEVEL)
    ).upper()
    if log_level not in _ALLOWED_LOG_LEVELS:
        raise ValueError(f"Unsupported log level: {log_level}")

    return Settings(
        poll_interval_seconds=interval,
        max_polls=max_polls,
        log_level=log_level,
    )


def default_config_path() -> Path:
    return Path.home() / ".config" / "seqdir" / "settings.json"


def _parse_interval(value: object) -> float:
    try:
        interval = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid poll interval: {value!r}") from None
    if interval < _MIN_POLL_INTERVAL:
        raise ValueError(
            f"Poll interval must be at least {_MIN_POLL_INTERVAL:.0f}s, got {interval}"
        )
    return interval

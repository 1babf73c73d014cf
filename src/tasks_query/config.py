"""Runtime configuration loaded from a JSON file."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from .exceptions import ConfigError

DEFAULT_LOG_FILE = "~/.cache/tasks-query/tasks-query.log"


class TimeFormat(Enum):
    """Textual time format used for reminder values."""

    TWELVE_HOUR = "12h"
    TWENTY_FOUR_HOUR = "24h"


@dataclass(frozen=True)
class Config:
    """Runtime configuration for parsing task files and logging."""

    time_format: TimeFormat = TimeFormat.TWELVE_HOUR
    global_filter: str = ""
    log_file: Path = Path(os.path.expanduser(DEFAULT_LOG_FILE))
    log_max_bytes: int = 10 * 1024 * 1024
    log_backup_count: int = 3

    @classmethod
    def from_dict(cls, payload: dict) -> Config:
        """Create a Config object from a raw dictionary."""
        if not isinstance(payload, dict):
            raise ConfigError("configuration must be a JSON object")

        raw_format = str(payload.get("time_format", TimeFormat.TWELVE_HOUR.value))
        try:
            time_format = TimeFormat(raw_format)
        except ValueError as err:
            allowed = ", ".join(repr(fmt.value) for fmt in TimeFormat)
            raise ConfigError(
                f"time_format must be one of {allowed}, got {raw_format!r}"
            ) from err

        log_file = Path(os.path.expanduser(payload.get("log_file", DEFAULT_LOG_FILE))).resolve()

        try:
            log_max_bytes = int(payload.get("log_max_bytes", 10 * 1024 * 1024))
            log_backup_count = int(payload.get("log_backup_count", 3))
        except (TypeError, ValueError) as err:
            raise ConfigError(f"log sizes must be integers: {err}") from err

        if log_max_bytes <= 0:
            raise ConfigError(f"log_max_bytes must be positive, got {log_max_bytes}")
        if log_backup_count <= 0:
            raise ConfigError(f"log_backup_count must be positive, got {log_backup_count}")

        return cls(
            time_format=time_format,
            global_filter=str(payload.get("global_filter", "")).strip(),
            log_file=log_file,
            log_max_bytes=log_max_bytes,
            log_backup_count=log_backup_count,
        )


def load_config(path: Path | None) -> Config:
    """Load configuration from the provided path.

    A missing file gives the default configuration.
    """
    if path is None or not path.exists():
        return Config()
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
    except (OSError, ValueError) as err:
        raise ConfigError(f"Cannot read config {path}: {err}") from err
    return Config.from_dict(data)

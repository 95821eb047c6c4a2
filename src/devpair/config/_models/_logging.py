"""Logging section of devpair.toml."""

from enum import StrEnum
from typing import ClassVar

from pydantic import BaseModel, ConfigDict


class LogLevel(StrEnum):
    """Minimum level written to the log file, most verbose first."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class LogFormat(StrEnum):
    """Log file line format: one JSON object or one key=value line per event."""

    JSON = "json"
    TEXT = "text"


class LoggingConfig(BaseModel):
    """The ``[logging]`` table.

    An empty ``file`` writes to ``.devpair/logs/devpair.log`` under the
    workspace root.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    level: LogLevel = LogLevel.INFO
    format: LogFormat = LogFormat.TEXT
    file: str = ""

"""devpair exceptions."""

from pathlib import Path
from typing import Any


class DevpairError(Exception):
    """Base class for every error devpair raises on purpose."""


class ConfigError(DevpairError):
    """A configuration layer could not be used."""


class ConfigLoadError(ConfigError):
    """A config file exists but could not be read as TOML.

    Attributes:
        path: The offending file.
        line: 1-based line of the parse error, when known.
        column: 1-based column of the parse error, when known.
    """

    def __init__(
        self,
        message: str,
        *,
        path: Path | None = None,
        line: int | None = None,
        column: int | None = None,
    ) -> None:
        super().__init__(message)
        self.path: Path | None = path
        self.line: int | None = line
        self.column: int | None = column


class ConfigValidationError(ConfigError):
    """The merged configuration holds a value of the wrong shape.

    Only the first problem is reported; ``validate_config`` lists them all.
    """

    def __init__(
        self,
        message: str,
        *,
        key: str,
        value: Any,  # pyright: ignore[reportAny,reportExplicitAny]
        expected: str,
    ) -> None:
        super().__init__(message)
        self.key: str = key
        self.value: Any = value  # pyright: ignore[reportExplicitAny]
        self.expected: str = expected


class SessionNotFoundError(DevpairError, KeyError):
    """No active session is registered under the requested key."""

    def __init__(self, message: str, *, session_name: str) -> None:
        super().__init__(message)
        self.session_name: str = session_name

    def __str__(self) -> str:
        # KeyError would quote the message
        return str(self.args[0])

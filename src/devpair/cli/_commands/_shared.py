# pyright: reportExplicitAny=false
"""Shared CLI utilities for commands.

- Standardized exit codes
- JSON formatting
- Console helpers and the control API address
"""

from enum import IntEnum
from typing import Any, Never

import orjson
from rich.console import Console

FormattableData = dict[str, Any]

DEFAULT_CONTROL_PORT = 6280
CONTROL_HOST = "127.0.0.1"
CONTROL_PORT_ENV = "DEVPAIR_CONTROL_PORT"


class ExitCode(IntEnum):
    """Standard exit codes for devpair CLI commands."""

    SUCCESS = 0
    LOAD_ERROR = 1
    VALIDATION_ERROR = 2
    NOT_FOUND = 3
    IO_ERROR = 4
    INTERNAL_ERROR = 5
    CANCELLED = 6
    NOT_RUNNING = 7


def control_url(port: int, path: str) -> str:
    """Return the URL of a control API endpoint."""
    return f"http://{CONTROL_HOST}:{port}/devpair{path}"


def format_json(data: FormattableData, *, indent: bool = True) -> str:
    """Format data as JSON."""
    options = orjson.OPT_INDENT_2 if indent else 0
    return orjson.dumps(data, option=options).decode("utf-8")


def get_error_console() -> Console:
    """Get a Rich console configured for error output to stderr."""
    return Console(stderr=True)


def exit_with_error(
    message: str,
    code: ExitCode = ExitCode.INTERNAL_ERROR,
    *,
    console: Console | None = None,
) -> Never:
    """Print an error message and exit with the specified code.

    Raises:
        SystemExit: Always raised with the specified exit code.
    """
    if console is None:
        console = get_error_console()

    console.print(f"[red]Error:[/red] {message}")
    raise SystemExit(code)

"""The devpair command-line interface."""

from ._app import app, main
from ._context import CLIContext

__all__ = ["CLIContext", "app", "main"]

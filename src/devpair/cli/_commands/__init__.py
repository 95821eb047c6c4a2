"""devpair CLI commands."""
# pyright: reportUnusedCallResult=false

from cyclopts import App

from ._config import app as config_app
from ._control import auto_restart, copy_error, status, stop
from ._detect import detect
from ._shared import DEFAULT_CONTROL_PORT, ExitCode, exit_with_error, format_json
from ._start import app as start_app

__all__ = [
    "DEFAULT_CONTROL_PORT",
    "ExitCode",
    "config_app",
    "exit_with_error",
    "format_json",
    "register_commands",
    "start_app",
]


def register_commands(app: App) -> None:
    app.command(start_app)
    app.command(config_app)
    app.command(stop, name="stop")
    app.command(status, name="status")
    app.command(auto_restart, name="auto-restart")
    app.command(copy_error, name="copy-error")
    app.command(detect, name="detect")

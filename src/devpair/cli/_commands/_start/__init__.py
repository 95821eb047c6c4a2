# pyright: reportUnusedCallResult=false
"""devpair start command: launch both services and supervise them."""

from typing import Annotated

import anyio
from cyclopts import App, Parameter

from devpair.cli._context import CLIContext

from .._shared import CONTROL_PORT_ENV, DEFAULT_CONTROL_PORT

app = App(
    name="start",
    help="Start the frontend and backend and supervise them until interrupted.",
    help_on_error=True,
)


@app.default
def start(
    *,
    control_port: Annotated[
        int,
        Parameter(help="Port for the supervisor control API.", env_var=CONTROL_PORT_ENV),
    ] = DEFAULT_CONTROL_PORT,
) -> None:
    """Start both services.

    Resolves each slot's command, checks ports and dependencies, launches
    the sessions and polls their health. Press Ctrl+C to stop.
    """
    from ._runner import run_start  # noqa: PLC0415

    ctx = CLIContext.get_current()
    if ctx.config_error:
        print(f"Warning: using default configuration ({ctx.config_error})")

    code = anyio.run(run_start, ctx.config, control_port)
    if code:
        raise SystemExit(code)

# pyright: reportUnusedCallResult=false
"""Commands that talk to a running ``devpair start`` over its control API."""

from enum import StrEnum
from typing import Annotated, Any

import httpx
from cyclopts import Parameter
from rich.console import Console

from ._shared import (
    CONTROL_PORT_ENV,
    DEFAULT_CONTROL_PORT,
    ExitCode,
    control_url,
    exit_with_error,
    format_json,
)

REQUEST_TIMEOUT = 5.0


class Toggle(StrEnum):
    """Values accepted by ``devpair auto-restart``."""

    ON = "on"
    OFF = "off"


ControlPort = Annotated[
    int,
    Parameter(help="Port of the supervisor control API.", env_var=CONTROL_PORT_ENV),
]


def _request(method: str, port: int, path: str, json: dict[str, Any] | None = None) -> dict[str, Any]:
    """Call the control API and return the decoded JSON body.

    Exits with NOT_RUNNING when nothing listens on the control port, and
    NOT_FOUND for 404 answers.
    """
    try:
        response = httpx.request(method, control_url(port, path), json=json, timeout=REQUEST_TIMEOUT)
    except httpx.TransportError:
        exit_with_error(
            f"devpair is not running (no control API on port {port})", ExitCode.NOT_RUNNING
        )

    if response.status_code == httpx.codes.NOT_FOUND:
        exit_with_error(str(response.json().get("detail", "Not found")), ExitCode.NOT_FOUND)
    if response.is_error:
        exit_with_error(str(response.json().get("detail", response.text)))
    body: dict[str, Any] = response.json()
    return body


def stop(
    session: Annotated[
        str | None,
        Parameter(help="Stop only this session (Frontend or Backend)."),
    ] = None,
    *,
    control_port: ControlPort = DEFAULT_CONTROL_PORT,
) -> None:
    """Stop the running servers.

    Without a session name, asks the running devpair to shut down
    everything. With one, stops that session and forgets its restart
    record.
    """
    if session is None:
        body = _request("POST", control_port, "/shutdown")
    else:
        body = _request("POST", control_port, f"/sessions/{session}/stop")
    print(body["message"])


def status(
    *,
    control_port: ControlPort = DEFAULT_CONTROL_PORT,
    json: Annotated[bool, Parameter(help="Print the raw JSON status.")] = False,
) -> None:
    """Show sessions, health and the auto-restart flag."""
    body = _request("GET", control_port, "/status")
    if json:
        print(format_json(body))
        return

    console = Console()
    auto_restart = "on" if body["auto_restart"] else "off"
    console.print(f"auto-restart: [bold]{auto_restart}[/]")
    for name, state in body["health"].items():
        console.print(f"health {name}: {state}")
    sessions: dict[str, dict[str, Any]] = body["sessions"]
    if not sessions:
        console.print("No sessions.")
    for name, data in sessions.items():
        marker = "[green]active[/]" if data["active"] else "[dim]idle[/]"
        console.print(
            f"{name}: {marker} crashes={data['crash_count']} command={data['command']!r}"
        )


def auto_restart(
    state: Annotated[Toggle, Parameter(help="on or off")],
    *,
    control_port: ControlPort = DEFAULT_CONTROL_PORT,
) -> None:
    """Enable or disable automatic restarts on the running devpair."""
    body = _request("POST", control_port, "/auto-restart", json={"enabled": state is Toggle.ON})
    print(body["message"])


def copy_error(
    *,
    capture: Annotated[
        bool, Parameter(help="Capture the clipboard as the last error instead.")
    ] = False,
    control_port: ControlPort = DEFAULT_CONTROL_PORT,
) -> None:
    """Copy the last captured error back to the clipboard."""
    path = "/errors/capture" if capture else "/errors/copy"
    body = _request("POST", control_port, path)
    print(body["message"])


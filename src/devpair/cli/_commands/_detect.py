# ruff: noqa: TC003
"""devpair detect command."""

from pathlib import Path
from typing import Annotated

from cyclopts import Parameter

from devpair.enums import ServiceSlot
from devpair.launch import detect_framework, install_command_for, port_for, recommend_script, resolve_command

from ._shared import ExitCode, exit_with_error


def detect(
    path: Annotated[Path, Parameter(help="Service directory to inspect")],
    *,
    slot: Annotated[
        ServiceSlot | None,
        Parameter(help="Only check frontend or backend markers"),
    ] = None,
) -> None:
    """Detect the framework of a service directory.

    Prints the detected framework with its start command, conventional
    port and install command, plus a recommended npm script if any.
    """
    if not path.is_dir():
        exit_with_error(f"Not a directory: {path}", ExitCode.NOT_FOUND)

    slots = [slot] if slot is not None else list(ServiceSlot)
    found = False
    for candidate in slots:
        framework = detect_framework(path, candidate)
        if framework is None:
            continue
        found = True
        print(f"{candidate.value}: {framework.value}")
        print(f"  start:   {resolve_command(framework.value, candidate)}")
        print(f"  port:    {port_for(framework.value, candidate)}")
        print(f"  install: {install_command_for(framework.value)}")

    if not found:
        print("No known framework detected.")

    script = recommend_script(path)
    if script is not None:
        print(f"recommended script: {script}")

# pyright: reportUnusedCallResult=false, reportUnusedFunction=false
# pyright: reportExplicitAny=false, reportAny=false
# ruff: noqa: A002, TC003
"""Config commands for viewing and writing devpair configuration."""

import os
from enum import StrEnum
from pathlib import Path
from typing import Annotated, Any

import tomli_w
from cyclopts import App, Parameter

from devpair.config import (
    DEFAULT_CONFIG,
    ConfigLoadError,
    deep_merge,
    get_project_config_path,
    parse_string_value,
    read_toml_file,
    set_nested_key,
    validate_config,
    write_config_value,
)
from devpair.enums import ServiceSlot
from devpair.launch import Framework, detect_framework, recommend_script

from .._context import CLIContext
from ._shared import ExitCode, exit_with_error, format_json

app = App(name="config", help="View and write devpair configuration", help_on_error=True)


class ShowFormat(StrEnum):
    """Output formats for config show."""

    TOML = "toml"
    JSON = "json"


def _workspace_root() -> Path:
    ctx = CLIContext.get_current()
    return ctx.workspace_root or Path.cwd()


def _relative_to(path: Path, root: Path) -> str:
    """Return ``path`` relative to ``root`` with forward slashes, or ``.``."""
    relative = os.path.relpath(path.resolve(), root.resolve())
    return Path(relative).as_posix()


def detect_slot(directory: Path, slot: ServiceSlot) -> dict[str, str]:
    """Build a slot section from what a directory looks like.

    Unknown projects with a recognisable npm script become ``custom``
    with that script; otherwise the slot's default framework is kept.
    """
    framework = detect_framework(directory, slot)
    if framework is not None:
        return {"framework": framework.value}

    script = recommend_script(directory)
    if script is not None:
        return {"framework": Framework.CUSTOM.value, "custom_command": script}

    default: dict[str, Any] = DEFAULT_CONFIG[slot.value]
    return {"framework": str(default["framework"])}


def build_initial_config(workspace_root: Path, frontend: Path, backend: Path) -> dict[str, Any]:
    """Build the contents of a new devpair.toml for two service directories."""
    data: dict[str, Any] = {}
    for slot, directory in ((ServiceSlot.FRONTEND, frontend), (ServiceSlot.BACKEND, backend)):
        section = {"path": _relative_to(directory, workspace_root)}
        section.update(detect_slot(directory, slot))
        data[slot.value] = section
    return data


@app.command(name="show")
def _show(
    *,
    format: Annotated[
        ShowFormat,
        Parameter(name=["--format", "-f"], help="Output format (toml, json)"),
    ] = ShowFormat.TOML,
    section: Annotated[
        str | None,
        Parameter(name=["--section"], help="Show one section only (e.g. frontend, supervisor)"),
    ] = None,
) -> None:
    """Display the merged configuration

    Args:
        format: Output format.
        section: Top-level section to show.
    """
    ctx = CLIContext.get_current()
    if ctx.config_error:
        exit_with_error(ctx.config_error, ExitCode.LOAD_ERROR)

    data: dict[str, Any] = ctx.config.to_dict()
    if section:
        value = data.get(section)
        if value is None:
            exit_with_error(f"Section '{section}' not found", ExitCode.NOT_FOUND)
        data = value if isinstance(value, dict) else {section: value}

    match format:
        case ShowFormat.JSON:
            print(format_json(data))
        case ShowFormat.TOML:
            print(tomli_w.dumps(data).rstrip())


@app.command(name="set")
def _set(
    key: Annotated[str, Parameter(help="Dotted key, e.g. backend.framework")],
    value: Annotated[str, Parameter(help="Value; true/false and numbers are parsed")],
) -> None:
    """Write one value to the project devpair.toml

    The merged result is validated before anything is written.

    Args:
        key: Dotted configuration key.
        value: Raw value from the command line.
    """
    path = get_project_config_path(_workspace_root())
    parsed = parse_string_value(value)

    try:
        current = read_toml_file(path) if path.is_file() else {}
    except ConfigLoadError as e:
        exit_with_error(str(e), ExitCode.LOAD_ERROR)

    set_nested_key(current, key, parsed)
    issues = validate_config(deep_merge(DEFAULT_CONFIG, current))
    if issues:
        issue = issues[0]
        exit_with_error(f"Invalid value for '{issue.key}': {issue.message}", ExitCode.VALIDATION_ERROR)

    try:
        write_config_value(path, key, parsed)
    except OSError as e:
        exit_with_error(f"Failed to write {path}: {e}", ExitCode.IO_ERROR)
    print(f"Set {key} = {parsed!r} in {path}")


@app.command(name="init")
def _init(
    frontend: Annotated[Path, Parameter(help="Frontend directory")],
    backend: Annotated[Path, Parameter(help="Backend directory")],
    *,
    force: Annotated[bool, Parameter(help="Overwrite an existing devpair.toml")] = False,
) -> None:
    """Create devpair.toml with detected frameworks

    Args:
        frontend: Frontend service directory.
        backend: Backend service directory.
        force: Overwrite an existing file.
    """
    workspace_root = _workspace_root()
    path = get_project_config_path(workspace_root)
    if path.exists() and not force:
        exit_with_error(f"{path} already exists (use --force to overwrite)", ExitCode.IO_ERROR)

    for directory in (frontend, backend):
        if not directory.is_dir():
            exit_with_error(f"Not a directory: {directory}", ExitCode.NOT_FOUND)

    data = build_initial_config(workspace_root, frontend, backend)
    path.write_text(tomli_w.dumps(data), encoding="utf-8")

    print(f"Configuration saved to {path}")
    for slot in ServiceSlot:
        section = data[slot.value]
        print(f"  {slot.label}: {section['path']} ({section['framework']})")

"""Locating the workspace and the config layers that apply to it.

The workspace root is the nearest directory, walking up from the current
one, that holds a ``devpair.toml``. Slot paths in that file are relative to
it.
"""

from pathlib import Path
from typing import Any

import platformdirs

from ._defaults import DEFAULT_CONFIG
from ._models._sources import ConfigSource, ConfigSourceName

PROJECT_CONFIG_FILENAME = "devpair.toml"


def find_workspace_root(start: Path | None = None) -> Path | None:
    """Return the nearest ancestor of ``start`` (or the cwd) holding devpair.toml."""
    here = (start or Path.cwd()).resolve()
    for candidate in (here, *here.parents):
        if (candidate / PROJECT_CONFIG_FILENAME).is_file():
            return candidate
    return None


def get_project_config_path(workspace_root: Path) -> Path:
    return workspace_root / PROJECT_CONFIG_FILENAME


def get_user_config_path() -> Path:
    """Per-user defaults file, e.g. ``~/.config/devpair/config.toml`` on Linux.

    The file does not have to exist.
    """
    return platformdirs.user_config_path("devpair") / "config.toml"


def _is_readable_file(path: Path) -> bool:
    try:
        return path.is_file()
    except OSError:
        return False


def _file_source(name: ConfigSourceName, path: Path) -> ConfigSource:
    return ConfigSource(name=name, path=path, exists=_is_readable_file(path), values={})


def discover_sources(
    workspace_root: Path | None = None,
    *,
    include_env: bool = True,
    include_cli: bool = False,
    cli_overrides: dict[str, Any] | None = None,  # pyright: ignore[reportExplicitAny]
) -> list[ConfigSource]:
    """List the configuration layers for a workspace, strongest first.

    File layers are listed even when their file is missing (with
    ``exists=False``). The project layer is left out when no workspace
    root is given or found. Environment values are read later, during
    loading.
    """
    root = workspace_root or find_workspace_root()
    sources: list[ConfigSource] = []

    if include_cli:
        overrides = cli_overrides or {}
        sources.append(ConfigSource(ConfigSourceName.CLI, None, bool(overrides), overrides))
    if include_env:
        sources.append(ConfigSource(ConfigSourceName.ENV, None, True, {}))
    if root is not None:
        sources.append(_file_source(ConfigSourceName.PROJECT, get_project_config_path(root)))
    sources.append(_file_source(ConfigSourceName.USER, get_user_config_path()))
    sources.append(ConfigSource(ConfigSourceName.DEFAULT, None, True, DEFAULT_CONFIG))
    return sources

"""Where merged configuration values come from."""

from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import Any


class ConfigSourceName(StrEnum):
    """Configuration layers, strongest first.

    Command-line flags beat ``DEVPAIR_*`` variables, which beat the
    workspace devpair.toml, then the per-user file, then built-in defaults.
    """

    CLI = "cli"
    ENV = "env"
    PROJECT = "project"
    USER = "user"
    DEFAULT = "default"


@dataclass(frozen=True, slots=True)
class ConfigSource:
    """One configuration layer as it was found on this machine.

    ``path`` is None for layers that are not files. ``exists`` is False for
    a file layer whose file is missing; such a layer contributes nothing.
    """

    name: ConfigSourceName
    path: Path | None
    exists: bool
    values: dict[str, Any]  # pyright: ignore[reportExplicitAny]

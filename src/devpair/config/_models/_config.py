# pyright: reportExplicitAny=false, reportAny=false, reportUnknownVariableType=false, reportUnknownArgumentType=false
"""Configuration container with typed access.

This module provides the main Config class, the read surface the
orchestrator consumes: per-slot settings, the active profile's command
overrides and the Docker/auto-restart feature flags.
"""

from pathlib import Path
from typing import Any, ClassVar, Self, TypeVar, overload

import tomli_w
from pydantic import BaseModel, ConfigDict, PrivateAttr

from devpair.config._defaults import DEFAULT_CONFIG
from devpair.config._loader import copy_value, deep_merge, parse_env_vars, read_toml_file
from devpair.config._models._logging import LoggingConfig
from devpair.config._models._runtime import HealthConfig, SupervisorConfig
from devpair.config._models._slots import ProfileConfig, ProfileName, SlotConfig
from devpair.config._models._sources import ConfigSource, ConfigSourceName
from devpair.enums import ServiceSlot

T = TypeVar("T")


def _read_layer(source: ConfigSource) -> ConfigSource:
    """Return ``source`` with its values filled in from the file or environment."""
    match source.name:
        case ConfigSourceName.ENV:
            values = parse_env_vars()
        case ConfigSourceName.PROJECT | ConfigSourceName.USER if source.path and source.exists:
            values = read_toml_file(source.path)
        case _:
            values = source.values
    return ConfigSource(source.name, source.path, source.exists, values)


class Config(BaseModel):
    """Merged, validated devpair configuration.

    Frozen after construction. Build one with ``from_dict``, ``from_file``
    or ``load``; the typed properties read from the validated schema while
    ``get`` and ``to_dict`` expose the raw merged tables.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True)

    _data: dict[str, Any] = PrivateAttr(default_factory=dict)
    _sources: tuple[ConfigSource, ...] = PrivateAttr(default=())
    _workspace_root: Path | None = PrivateAttr(default=None)
    _schema: Any = PrivateAttr(default=None)

    def __init__(
        self,
        *,
        _data: dict[str, Any] | None = None,
        _sources: tuple[ConfigSource, ...] = (),
        _workspace_root: Path | None = None,
    ) -> None:
        # _validation imports the section models from this package
        from devpair.config._validation import parse_config  # noqa: PLC0415

        super().__init__()
        self._data = _data if _data is not None else copy_value(DEFAULT_CONFIG)
        self._sources = _sources
        self._workspace_root = _workspace_root
        self._schema = parse_config(self._data)

    @classmethod
    def from_dict(cls, data: dict[str, Any], *, workspace_root: Path | None = None) -> Self:
        """Build a config from tables layered over the built-in defaults.

        Raises:
            ConfigValidationError: If validation fails.
        """
        return cls(
            _data=deep_merge(DEFAULT_CONFIG, data),
            _workspace_root=workspace_root,
        )

    @classmethod
    def from_file(cls, path: Path) -> Self:
        """Build a config from one devpair.toml, ignoring every other layer.

        The file's directory is taken as the workspace root.

        Raises:
            FileNotFoundError: If the file does not exist.
            ConfigLoadError: If the file cannot be parsed.
            ConfigValidationError: If validation fails.
        """
        data = read_toml_file(path)
        source = ConfigSource(
            name=ConfigSourceName.PROJECT,
            path=path,
            exists=True,
            values=data,
        )
        return cls(
            _data=deep_merge(DEFAULT_CONFIG, data),
            _sources=(source,),
            _workspace_root=path.resolve().parent,
        )

    @classmethod
    def load(
        cls,
        *,
        workspace_root: Path | None = None,
        include_env: bool = True,
        include_cli: bool = False,
        cli_overrides: dict[str, Any] | None = None,
    ) -> Self:
        """Read every layer and merge them, weakest first.

        Built-in defaults sit at the bottom, then the user file, the
        workspace devpair.toml, ``DEVPAIR_*`` variables and finally CLI
        overrides.

        Args:
            workspace_root: Workspace root. If None, auto-detect by searching
                upward for ``devpair.toml``.
            include_env: Include ``DEVPAIR_*`` environment variables.
            include_cli: Include CLI overrides.
            cli_overrides: Dict of CLI argument overrides.

        Raises:
            ConfigLoadError: If config files cannot be loaded.
            ConfigValidationError: If merged config fails validation.
        """
        from devpair.config._discovery import (  # noqa: PLC0415
            discover_sources,
            find_workspace_root,
        )

        resolved_root = workspace_root or find_workspace_root()
        sources = discover_sources(
            workspace_root=resolved_root,
            include_env=include_env,
            include_cli=include_cli,
            cli_overrides=cli_overrides,
        )

        loaded = [_read_layer(source) for source in sources]
        merged: dict[str, Any] = {}
        for layer in reversed(loaded):
            merged = deep_merge(merged, layer.values)

        return cls(
            _data=merged,
            _sources=tuple(loaded),
            _workspace_root=resolved_root,
        )

    # -------------------------------------------------------------------------
    # Typed sections
    # -------------------------------------------------------------------------

    @property
    def sources(self) -> list[ConfigSource]:
        """Return the sources that contributed to this configuration."""
        return list(self._sources)

    @property
    def workspace_root(self) -> Path | None:
        """Return the workspace root, or None when none was found."""
        return self._workspace_root

    @property
    def frontend(self) -> SlotConfig:
        return self._schema.frontend

    @property
    def backend(self) -> SlotConfig:
        return self._schema.backend

    @property
    def active_profile(self) -> ProfileName:
        return self._schema.active_profile

    @property
    def profiles(self) -> dict[str, ProfileConfig]:
        return dict(self._schema.profiles)

    @property
    def use_docker(self) -> bool:
        return self._schema.use_docker

    @property
    def auto_restart(self) -> bool:
        return self._schema.auto_restart

    @property
    def logging(self) -> LoggingConfig:
        return self._schema.logging

    @property
    def supervisor(self) -> SupervisorConfig:
        return self._schema.supervisor

    @property
    def health(self) -> HealthConfig:
        return self._schema.health

    def slot(self, slot: ServiceSlot) -> SlotConfig:
        """Return the configuration for a service slot."""
        return self.frontend if slot is ServiceSlot.FRONTEND else self.backend

    def profile_override(self, slot: ServiceSlot) -> str:
        """Return the active profile's override command for a slot.

        Returns an empty string when the active profile stores no override.
        """
        profile = self._schema.profiles.get(self.active_profile.value)
        if profile is None:
            return ""
        return profile.frontend if slot is ServiceSlot.FRONTEND else profile.backend

    @property
    def is_configured(self) -> bool:
        """Whether both slots have a working directory configured."""
        return bool(self.frontend.path) and bool(self.backend.path)

    # -------------------------------------------------------------------------
    # Raw access
    # -------------------------------------------------------------------------

    @overload
    def get(self, key: str) -> Any: ...

    @overload
    def get(self, key: str, default: T) -> T: ...

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value by dot-notation key.

        Examples:
            >>> config.get("frontend.framework")
            'react-vite'
            >>> config.get("nonexistent", "fallback")
            'fallback'
        """
        current: Any = self._data
        for part in key.split("."):
            if not isinstance(current, dict) or part not in current:
                return default
            current = current[part]
        return current

    def to_dict(self) -> dict[str, Any]:
        """Return a deep copy of the merged configuration."""
        return copy_value(self._data)

    def to_toml(self) -> str:
        """Render the merged configuration as TOML."""
        return tomli_w.dumps(self.to_dict())

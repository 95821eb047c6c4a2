"""devpair configuration.

This module provides the public API for devpair configuration management:
layered TOML loading, validation and typed access to the values the
orchestrator reads (slot paths, frameworks, profiles and feature flags).

Example:
    >>> from devpair.config import Config
    >>> config = Config.load()
    >>> config.frontend.framework
    'react-vite'
"""

from devpair.exceptions import (
    ConfigError,
    ConfigLoadError,
    ConfigValidationError,
)

from ._defaults import DEFAULT_CONFIG
from ._discovery import (
    PROJECT_CONFIG_FILENAME,
    discover_sources,
    find_workspace_root,
    get_project_config_path,
    get_user_config_path,
)
from ._load import safe_load_config
from ._loader import (
    deep_merge,
    parse_env_vars,
    parse_string_value,
    read_toml_file,
    set_nested_key,
    write_config_value,
)
from ._models import (
    Config,
    ConfigSource,
    ConfigSourceName,
    HealthConfig,
    LogFormat,
    LoggingConfig,
    LogLevel,
    ProfileConfig,
    ProfileName,
    SlotConfig,
    SupervisorConfig,
)
from ._validation import ValidationIssue, raise_if_validation_errors, validate_config

__all__ = [
    "DEFAULT_CONFIG",
    "PROJECT_CONFIG_FILENAME",
    "Config",
    "ConfigError",
    "ConfigLoadError",
    "ConfigSource",
    "ConfigSourceName",
    "ConfigValidationError",
    "HealthConfig",
    "LogFormat",
    "LogLevel",
    "LoggingConfig",
    "ProfileConfig",
    "ProfileName",
    "SlotConfig",
    "SupervisorConfig",
    "ValidationIssue",
    "deep_merge",
    "discover_sources",
    "find_workspace_root",
    "get_project_config_path",
    "get_user_config_path",
    "parse_env_vars",
    "parse_string_value",
    "raise_if_validation_errors",
    "read_toml_file",
    "safe_load_config",
    "set_nested_key",
    "validate_config",
    "write_config_value",
]

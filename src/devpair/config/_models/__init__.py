"""Configuration models."""

from ._config import Config
from ._logging import LogFormat, LoggingConfig, LogLevel
from ._runtime import HealthConfig, SupervisorConfig
from ._slots import ProfileConfig, ProfileName, SlotConfig
from ._sources import ConfigSource, ConfigSourceName

__all__ = [
    "Config",
    "ConfigSource",
    "ConfigSourceName",
    "HealthConfig",
    "LogFormat",
    "LogLevel",
    "LoggingConfig",
    "ProfileConfig",
    "ProfileName",
    "SlotConfig",
    "SupervisorConfig",
]

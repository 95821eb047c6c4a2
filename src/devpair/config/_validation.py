# pyright: reportAny=false, reportExplicitAny=false, reportUnknownArgumentType=false, reportUnknownMemberType=false, reportUnknownVariableType=false
"""Schema check for the merged configuration.

``ConfigSchema`` is the typed view ``Config`` hands to the orchestrator.
Unknown keys are ignored so a newer devpair.toml still loads.
"""

from dataclasses import dataclass
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic_core import ErrorDetails

from devpair.config._models._logging import LoggingConfig
from devpair.config._models._runtime import HealthConfig, SupervisorConfig
from devpair.config._models._slots import ProfileConfig, ProfileName, SlotConfig
from devpair.exceptions import ConfigValidationError

# pydantic constraint names rendered as comparison operators
_BOUND_OPERATORS = {"ge": ">=", "gt": ">", "le": "<=", "lt": "<"}


@dataclass(frozen=True, slots=True)
class ValidationIssue:
    """One rejected value.

    Attributes:
        key: Dotted key, e.g. ``supervisor.restart_limit``.
        message: pydantic's description of the problem.
        expected: Short form of what would have been accepted, if known.
        actual: The rejected value.
    """

    key: str
    message: str
    expected: str | None
    actual: Any


class ConfigSchema(BaseModel):
    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    frontend: SlotConfig = SlotConfig(framework="react-vite")
    backend: SlotConfig = SlotConfig(framework="express")
    active_profile: ProfileName = ProfileName.DEV
    profiles: dict[str, ProfileConfig] = {}
    use_docker: bool = False
    auto_restart: bool = False
    logging: LoggingConfig = LoggingConfig()
    supervisor: SupervisorConfig = SupervisorConfig()
    health: HealthConfig = HealthConfig()


def _expected_from(error: ErrorDetails) -> str | None:
    ctx = error.get("ctx") or {}
    if "expected" in ctx:
        return str(ctx["expected"])
    for name, operator in _BOUND_OPERATORS.items():
        if name in ctx:
            return f"{operator} {ctx[name]}"
    return None


def _to_issue(error: ErrorDetails) -> ValidationIssue:
    return ValidationIssue(
        key=".".join(str(part) for part in error.get("loc", ())),
        message=str(error.get("msg", "invalid value")),
        expected=_expected_from(error),
        actual=error.get("input"),
    )


def validate_config(config: dict[str, Any]) -> list[ValidationIssue]:
    """List every problem in a merged configuration; empty means valid."""
    try:
        _ = ConfigSchema.model_validate(config)
    except ValidationError as e:
        return [_to_issue(error) for error in e.errors()]
    return []


def raise_if_validation_errors(issues: list[ValidationIssue]) -> None:
    """Raise for the first issue, if there is one.

    Raises:
        ConfigValidationError: ``issues`` is not empty.
    """
    if not issues:
        return
    issue = issues[0]
    msg = f"Invalid configuration value for '{issue.key}'"
    raise ConfigValidationError(
        msg,
        key=issue.key,
        value=issue.actual,
        expected=issue.expected or issue.message,
    )


def parse_config(config: dict[str, Any]) -> ConfigSchema:
    """Validate a merged configuration and return its typed sections.

    Raises:
        ConfigValidationError: Some value is invalid.
    """
    raise_if_validation_errors(validate_config(config))
    return ConfigSchema.model_validate(config)

"""Supervisor and health monitor tuning models."""

from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field


class SupervisorConfig(BaseModel):
    """Process supervision settings.

    Attributes:
        restart_limit: Consecutive automatic restarts allowed per slot.
        restart_backoff_step: Seconds added to the restart delay per crash.
        error_prompt_delay: Seconds after a launch before the error-capture prompt.
        launch_delay: Seconds between creating sessions and the frontend launch.
        launch_stagger: Seconds between the frontend and backend launches.
        shutdown_timeout: Seconds to wait for a graceful stop before killing.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    restart_limit: int = Field(default=3, ge=0)
    restart_backoff_step: float = Field(default=2.0, ge=0)
    error_prompt_delay: float = Field(default=5.0, ge=0)
    launch_delay: float = Field(default=0.5, ge=0)
    launch_stagger: float = Field(default=0.5, ge=0)
    shutdown_timeout: float = Field(default=5.0, gt=0)


class HealthConfig(BaseModel):
    """Health probe settings."""

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    host: str = "localhost"
    interval: float = Field(default=5.0, gt=0)
    timeout: float = Field(default=2.0, gt=0)

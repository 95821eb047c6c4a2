"""Service slot and profile configuration models."""

from enum import StrEnum
from typing import ClassVar

from pydantic import BaseModel, ConfigDict


class ProfileName(StrEnum):
    """Built-in command override profiles."""

    DEV = "dev"
    PROD = "prod"
    TEST = "test"


class SlotConfig(BaseModel):
    """Configuration for one supervised service slot.

    Attributes:
        path: Working directory, relative to the workspace root.
        framework: Framework identifier (e.g. ``react-vite``, ``django``, ``custom``).
        custom_command: Command used verbatim when framework is ``custom``.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    path: str = ""
    framework: str = ""
    custom_command: str = ""


class ProfileConfig(BaseModel):
    """Command overrides stored for a named profile.

    Empty strings mean "no override".
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    frontend: str = ""
    backend: str = ""

"""Startup result types."""

from dataclasses import dataclass, field
from enum import StrEnum

from devpair.enums import ServiceSlot


class StartupOutcome(StrEnum):
    """How a startup attempt ended.

    - STARTED: At least one slot was spawned
    - NOT_CONFIGURED: A slot has no working directory configured
    - NO_WORKSPACE: No workspace root could be resolved
    - CANCELLED: The user cancelled or dismissed a gate
    - INSTALLING: Every slot was held back for a dependency install
    """

    STARTED = "started"
    NOT_CONFIGURED = "not_configured"
    NO_WORKSPACE = "no_workspace"
    CANCELLED = "cancelled"
    INSTALLING = "installing"


@dataclass(frozen=True, slots=True)
class StartupResult:
    """Outcome of ``Orchestrator.startup``.

    Attributes:
        outcome: How startup ended.
        started: Slots whose sessions were created and run, in launch order.
        commands: Resolved command per slot (empty when aborted early).
        ports: Conventional port per slot (empty when aborted early).
    """

    outcome: StartupOutcome
    started: tuple[ServiceSlot, ...] = ()
    commands: dict[ServiceSlot, str] = field(default_factory=dict)
    ports: dict[ServiceSlot, int] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.outcome is StartupOutcome.STARTED

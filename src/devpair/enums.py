"""Enumeration types for devpair."""

from enum import StrEnum


class ServiceSlot(StrEnum):
    """The two supervised service roles.

    Each slot owns at most one process session at a time. The slot's
    ``label`` doubles as the session key inside the supervisor.
    """

    FRONTEND = "frontend"
    BACKEND = "backend"

    @property
    def label(self) -> str:
        """Return the human label used as the session key."""
        return self.value.capitalize()


class HealthState(StrEnum):
    """Liveness classification of a slot derived from network probes."""

    NONE = "none"
    STARTING = "starting"
    RUNNING = "running"
    CRASHED = "crashed"

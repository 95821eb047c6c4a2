"""Startup and shutdown sequencing for the two service slots."""

from ._models import StartupOutcome, StartupResult
from ._orchestrator import (
    CANCEL_ACTION,
    CONFIGURE_ACTION,
    IGNORE_ACTION,
    INSTALL_NOW_ACTION,
    KILL_PROCESS_ACTION,
    LAUNCH_ORDER,
    SKIP_ACTION,
    STOP_ALL_ACTION,
    Orchestrator,
    PortChecker,
    PortFreer,
)

__all__ = [
    "CANCEL_ACTION",
    "CONFIGURE_ACTION",
    "IGNORE_ACTION",
    "INSTALL_NOW_ACTION",
    "KILL_PROCESS_ACTION",
    "LAUNCH_ORDER",
    "SKIP_ACTION",
    "STOP_ALL_ACTION",
    "Orchestrator",
    "PortChecker",
    "PortFreer",
    "StartupOutcome",
    "StartupResult",
]

"""Supervision of the frontend and backend process sessions.

Key Components:
    - ProcessSupervisor: owns sessions, replays commands, restarts crashes
    - RestartRecord: per-key replay and crash-budget state
    - LinearBackoff: 2s/4s/6s restart delays with a budget of three
    - SessionHost / SessionHandle: the process-session surface
    - ShellSessionHost: shell-backed implementation of that surface
    - OutputSink / ConcatenatedOutputSink: session output consumers
    - create_control_router: FastAPI endpoint factory

Example:
    >>> async with ShellSessionHost(sink, logger) as host:
    ...     async with ProcessSupervisor(host, interaction, logger) as supervisor:
    ...         await supervisor.start("Frontend", Path("web"), ServiceSlot.FRONTEND)
    ...         await supervisor.run("Frontend", "npm run dev")
"""

from ._api import create_control_router
from ._backoff import LinearBackoff
from ._models import RestartRecord, SessionEvent, SessionEventType
from ._output import ConcatenatedOutputSink, NullOutputSink
from ._protocol import OutputSink, SessionClosedCallback, SessionHandle, SessionHost
from ._session import ShellSession, ShellSessionHost
from ._supervisor import (
    CAPTURE_ERROR_ACTION,
    COPY_ERROR_ACTION,
    DISMISS_ACTION,
    ProcessSupervisor,
)

__all__ = [
    "CAPTURE_ERROR_ACTION",
    "COPY_ERROR_ACTION",
    "DISMISS_ACTION",
    "ConcatenatedOutputSink",
    "LinearBackoff",
    "NullOutputSink",
    "OutputSink",
    "ProcessSupervisor",
    "RestartRecord",
    "SessionClosedCallback",
    "SessionEvent",
    "SessionEventType",
    "SessionHandle",
    "SessionHost",
    "ShellSession",
    "ShellSessionHost",
    "create_control_router",
]

"""Data models for the supervisor system.

This module defines the core data types for session management:
- SessionEventType: Types of session lifecycle events
- SessionEvent: Immutable event records
- RestartRecord: Mutable per-key replay and crash-budget state
"""

from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path  # noqa: TC003 - Used in runtime type annotations

from devpair.enums import ServiceSlot  # noqa: TC001 - Used in runtime type annotations


class SessionEventType(StrEnum):
    """Types of session lifecycle events.

    - STARTED: A command was spawned in the session
    - STOPPED: The session was disposed on request
    - CLOSED: The session's process exited without a request
    """

    STARTED = "started"
    STOPPED = "stopped"
    CLOSED = "closed"


@dataclass(frozen=True, slots=True)
class SessionEvent:
    """Immutable session lifecycle event.

    Attributes:
        session_name: Name of the session that generated the event.
        event_type: Type of lifecycle event.
        timestamp: ISO 8601 formatted timestamp.
        pid: Process ID if applicable.
        exit_code: Exit code if the process terminated.
        message: Optional human-readable message.
    """

    session_name: str
    event_type: SessionEventType
    timestamp: str
    pid: int | None = None
    exit_code: int | None = None
    message: str | None = None


@dataclass(slots=True)
class RestartRecord:
    """What to replay when a session closes unexpectedly.

    Attributes:
        command: The last command sent with ``run``.
        working_directory: The session's working directory.
        kind: The slot the session belongs to.
        crash_count: Consecutive automatic restarts so far. Not reset by
            a successful restart.
    """

    command: str
    working_directory: Path
    kind: ServiceSlot
    crash_count: int = 0

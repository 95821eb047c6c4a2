"""Protocol definitions for the supervisor system.

These interfaces decouple the supervisor core from the concrete terminal
host and from output/UI implementations:
- OutputSink: consumes session output lines and lifecycle events
- SessionHandle: one interactive process session
- SessionHost: creates sessions and reports when they close
"""

from collections.abc import Awaitable, Callable
from pathlib import Path  # noqa: TC003 - Used in runtime type annotations
from typing import TYPE_CHECKING, Literal, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ._models import SessionEvent


@runtime_checkable
class OutputSink(Protocol):
    """Protocol for consuming session output lines and events."""

    async def write_line(
        self,
        session_name: str,
        pid: int,
        stream: Literal["stdout", "stderr"],
        line: str,
    ) -> None:
        """Write a line of session output.

        Args:
            session_name: Name of the session that produced the output.
            pid: Process ID of the command.
            stream: Which output stream the line came from.
            line: The output line (without trailing newline).
        """
        ...

    async def write_event(
        self,
        session_name: str,
        event: "SessionEvent",
    ) -> None:
        """Write a session lifecycle event."""
        ...


@runtime_checkable
class SessionHandle(Protocol):
    """An interactive process session bound to a working directory."""

    @property
    def name(self) -> str:
        """Return the session's name (its key in the supervisor)."""
        ...

    @property
    def cwd(self) -> Path:
        """Return the session's working directory."""
        ...

    async def send(self, command: str) -> None:
        """Send command text to the session. Fire-and-forget."""
        ...

    async def dispose(self) -> None:
        """Terminate the session. Disposing never reports a close."""
        ...


SessionClosedCallback = Callable[["SessionHandle"], Awaitable[None]]


@runtime_checkable
class SessionHost(Protocol):
    """Creates sessions and reports sessions that close on their own."""

    async def open(self, name: str, cwd: Path) -> SessionHandle:
        """Open a new session named ``name`` in ``cwd``."""
        ...

    def add_close_listener(self, callback: SessionClosedCallback) -> None:
        """Register a callback fired when a session closes without dispose."""
        ...

"""Shell-backed process sessions.

``ShellSessionHost`` is the concrete process-session surface used by the
supervisor outside of tests. Each ``ShellSession`` behaves like an
interactive terminal bound to a working directory: the first ``send``
spawns the command through the shell, later sends while the command is
still running are written to its stdin.
"""

import os
import signal
import subprocess
import sys
from pathlib import Path
from types import TracebackType
from typing import Literal, Self, final

import anyio
import anyio.abc
from anyio.streams.text import TextReceiveStream
from structlog.typing import FilteringBoundLogger

from ._models import SessionEvent, SessionEventType
from ._protocol import OutputSink, SessionClosedCallback


def _get_timestamp() -> str:
    """Get current timestamp in ISO 8601 format."""
    import pendulum  # noqa: PLC0415

    return pendulum.now("UTC").to_iso8601_string()


def _terminate(process: anyio.abc.Process) -> None:
    """Send SIGTERM to a session's process group."""
    if sys.platform == "win32":
        process.terminate()
        return
    os.killpg(process.pid, signal.SIGTERM)


def _kill(process: anyio.abc.Process) -> None:
    """Kill a session's process group."""
    if sys.platform == "win32":
        process.kill()
        return
    os.killpg(process.pid, signal.SIGKILL)


@final
class ShellSession:
    """One interactive process session owned by a ``ShellSessionHost``."""

    __slots__ = ("_cwd", "_disposed", "_host", "_name", "_process")

    def __init__(self, host: "ShellSessionHost", name: str, cwd: Path) -> None:
        self._host = host
        self._name = name
        self._cwd = cwd
        self._process: anyio.abc.Process | None = None
        self._disposed = False

    @property
    def name(self) -> str:
        return self._name

    @property
    def cwd(self) -> Path:
        return self._cwd

    @property
    def pid(self) -> int | None:
        """Return the running command's PID, if any."""
        if self._process is None or self._process.returncode is not None:
            return None
        return self._process.pid

    @property
    def disposed(self) -> bool:
        return self._disposed

    async def send(self, command: str) -> None:
        """Spawn ``command``, or write it to the running command's stdin.

        Spawn failures are not raised: they are logged and reported to the
        host's close listeners, as a terminal would simply exit.
        """
        if self._disposed:
            return

        process = self._process
        if process is not None and process.returncode is None:
            if process.stdin is not None:
                await process.stdin.send(f"{command}\n".encode())
            return

        try:
            self._process = await anyio.open_process(
                command,
                cwd=self._cwd,
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                start_new_session=sys.platform != "win32",
            )
        except OSError as e:
            self._host.logger.error(
                "session_spawn_failed",
                session=self._name,
                command=command,
                cwd=str(self._cwd),
                error=str(e),
            )
            self._host.schedule_closed(self)
            return

        await self._host.emit_event(
            self,
            SessionEventType.STARTED,
            message=f"Started with command: {command}",
        )
        self._host.watch(self, self._process)

    async def dispose(self, shutdown_timeout: float | None = None) -> None:
        """Terminate the session's command and forget the session.

        Sends SIGTERM to the command's process group, waits for the
        graceful shutdown timeout and then kills it. Disposing never fires
        close listeners.
        """
        if self._disposed:
            return
        self._disposed = True
        self._host.forget(self)

        process = self._process
        if process is None or process.returncode is not None:
            return

        timeout = (
            shutdown_timeout
            if shutdown_timeout is not None
            else self._host.shutdown_timeout
        )

        with anyio.CancelScope(shield=True):
            try:
                _terminate(process)

                with anyio.move_on_after(timeout):
                    _ = await process.wait()

                if process.returncode is None:
                    _kill(process)
                    _ = await process.wait()
            except ProcessLookupError:
                # Already gone
                pass

            await self._host.emit_event(
                self,
                SessionEventType.STOPPED,
                exit_code=process.returncode,
                message="Stopped by request",
            )


@final
class ShellSessionHost:
    """Creates shell sessions and reports the ones that close on their own.

    Must be entered as an async context manager; it owns the task group
    that streams each session's output and waits for its exit. Leaving the
    context disposes every open session.

    Example:
        >>> async with ShellSessionHost(sink, logger) as host:
        ...     session = await host.open("Frontend", Path("web"))
        ...     await session.send("npm run dev")
    """

    __slots__ = (
        "_listeners",
        "_output_sink",
        "_sessions",
        "_task_group",
        "logger",
        "shutdown_timeout",
    )

    def __init__(
        self,
        output_sink: OutputSink,
        logger: FilteringBoundLogger,
        *,
        shutdown_timeout: float = 5.0,
    ) -> None:
        """Initialize the session host.

        Args:
            output_sink: Sink for session output and events.
            logger: Diagnostic logger.
            shutdown_timeout: Seconds to wait after SIGTERM before killing.
        """
        self._output_sink = output_sink
        self.logger = logger
        self.shutdown_timeout = shutdown_timeout
        self._listeners: list[SessionClosedCallback] = []
        self._sessions: list[ShellSession] = []
        self._task_group: anyio.abc.TaskGroup | None = None

    async def __aenter__(self) -> Self:
        self._task_group = anyio.create_task_group()
        _ = await self._task_group.__aenter__()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> bool | None:
        for session in list(self._sessions):
            await session.dispose()

        task_group = self._task_group
        self._task_group = None
        if task_group is None:
            return None
        task_group.cancel_scope.cancel()
        return await task_group.__aexit__(exc_type, exc_val, exc_tb)

    @property
    def sessions(self) -> list[ShellSession]:
        """Return the sessions that have not been disposed."""
        return list(self._sessions)

    async def open(self, name: str, cwd: Path) -> ShellSession:
        """Open a new session; nothing runs until the first ``send``.

        Raises:
            RuntimeError: If the host has not been entered.
        """
        _ = self._require_task_group()
        session = ShellSession(self, name, cwd)
        self._sessions.append(session)
        return session

    def add_close_listener(self, callback: SessionClosedCallback) -> None:
        self._listeners.append(callback)

    def forget(self, session: ShellSession) -> None:
        if session in self._sessions:
            self._sessions.remove(session)

    def watch(self, session: ShellSession, process: anyio.abc.Process) -> None:
        """Stream a spawned command's output and wait for its exit."""
        self._require_task_group().start_soon(self._watch, session, process)

    def schedule_closed(self, session: ShellSession) -> None:
        """Report a session close from outside the watcher task."""
        self._require_task_group().start_soon(self._notify_closed, session, None)

    def _require_task_group(self) -> anyio.abc.TaskGroup:
        if self._task_group is None:
            msg = "ShellSessionHost must be used as an async context manager"
            raise RuntimeError(msg)
        return self._task_group

    async def emit_event(
        self,
        session: ShellSession,
        event_type: SessionEventType,
        *,
        message: str | None = None,
        exit_code: int | None = None,
    ) -> None:
        event = SessionEvent(
            session_name=session.name,
            event_type=event_type,
            timestamp=_get_timestamp(),
            pid=session.pid,
            exit_code=exit_code,
            message=message,
        )
        try:
            await self._output_sink.write_event(session.name, event)
        except Exception:  # noqa: BLE001
            # Output sink errors should not crash the session
            self.logger.debug("output_sink_failed", session=session.name, exc_info=True)

    async def _write_line(
        self,
        session: ShellSession,
        pid: int,
        stream_name: Literal["stdout", "stderr"],
        line: str,
    ) -> None:
        try:
            await self._output_sink.write_line(session.name, pid, stream_name, line.rstrip("\r"))
        except Exception:  # noqa: BLE001
            self.logger.debug("output_sink_failed", session=session.name, exc_info=True)

    async def _stream_output(
        self,
        session: ShellSession,
        pid: int,
        stream: TextReceiveStream,
        stream_name: Literal["stdout", "stderr"],
    ) -> None:
        pending = ""
        try:
            async for chunk in stream:
                # A chunk can end mid-line; hold the tail until its newline arrives
                *lines, pending = (pending + chunk).split("\n")
                for line in lines:
                    await self._write_line(session, pid, stream_name, line)
        except (anyio.ClosedResourceError, anyio.BrokenResourceError):
            # Stream closed, which is expected on process exit
            pass
        if pending:
            await self._write_line(session, pid, stream_name, pending)

    async def _watch(self, session: ShellSession, process: anyio.abc.Process) -> None:
        pid = process.pid
        async with anyio.create_task_group() as tg:
            if process.stdout is not None:
                tg.start_soon(
                    self._stream_output, session, pid, TextReceiveStream(process.stdout), "stdout"
                )
            if process.stderr is not None:
                tg.start_soon(
                    self._stream_output, session, pid, TextReceiveStream(process.stderr), "stderr"
                )
            exit_code = await process.wait()

        with anyio.CancelScope(shield=True):
            await process.aclose()

        if session.disposed:
            return

        self.forget(session)
        await self.emit_event(
            session,
            SessionEventType.CLOSED,
            exit_code=exit_code,
            message=f"Exited with code {exit_code}",
        )
        await self._notify_closed(session, exit_code)

    async def _notify_closed(self, session: ShellSession, exit_code: int | None) -> None:
        self.forget(session)
        self.logger.info("session_closed", session=session.name, exit_code=exit_code)
        for callback in list(self._listeners):
            try:
                await callback(session)
            except Exception:
                self.logger.exception("session_close_listener_failed", session=session.name)

"""ProcessSupervisor: session ownership, command replay and crash restarts.

State per session key::

    Idle -> Running -> Idle                    (stop / stop_all)
                    -> Idle + PendingRestart   (host-reported close while
                                                auto-restart is enabled and
                                                the crash budget remains)

Every delayed callback re-checks its preconditions before acting; that is
how restarts already scheduled are invalidated. Error-capture prompts
also run under a cancel scope per key, so ``stop`` and ``stop_all``
withdraw a prompt that is already on screen.

The error-capture prompt follows an explicit ``run`` only. Crash restarts
replay the command without it, so a crash loop does not interrupt the
user.

Known limitation: the session host only reports that a session closed, not
why. A service that exits 0 on purpose is indistinguishable from a crash
and is restarted like one while auto-restart is enabled.
"""

from collections.abc import Awaitable, Callable
from pathlib import Path
from types import TracebackType
from typing import Self, final

import anyio
import anyio.abc
from structlog.typing import FilteringBoundLogger

from devpair.enums import ServiceSlot
from devpair.exceptions import SessionNotFoundError
from devpair.interaction import InteractionHost

from ._backoff import LinearBackoff
from ._models import RestartRecord
from ._protocol import SessionHandle, SessionHost

CAPTURE_ERROR_ACTION = "Capture Error from Clipboard"
COPY_ERROR_ACTION = "Copy Error"
DISMISS_ACTION = "Dismiss"
ERROR_PREVIEW_LENGTH = 100


@final
class ProcessSupervisor:
    """Owns the active sessions and their restart records.

    Must be entered as an async context manager: the task group it opens
    runs restart timers and the delayed error-capture prompts. Leaving the
    context cancels pending timers; it does not dispose sessions (the
    session host owns process cleanup).

    Attributes:
        last_error: The most recently captured error text.
    """

    __slots__ = (
        "_auto_restart",
        "_backoff",
        "_epoch",
        "_error_prompt_delay",
        "_host",
        "_interaction",
        "_kinds",
        "_logger",
        "_prompt_scopes",
        "_records",
        "_sessions",
        "_sleep",
        "_task_group",
        "last_error",
    )

    def __init__(
        self,
        host: SessionHost,
        interaction: InteractionHost,
        logger: FilteringBoundLogger,
        *,
        auto_restart: bool = False,
        backoff: LinearBackoff | None = None,
        error_prompt_delay: float = 5.0,
        sleep: Callable[[float], Awaitable[None]] = anyio.sleep,
    ) -> None:
        """Initialize the supervisor and subscribe to session closes.

        Args:
            host: Creates sessions and reports when they close.
            interaction: Prompt and clipboard surface.
            logger: Diagnostic logger.
            auto_restart: Whether closed sessions are restarted.
            backoff: Restart delay policy. Defaults to 2s steps, 3 restarts.
            error_prompt_delay: Seconds after ``run`` before the
                error-capture prompt appears.
            sleep: Coroutine used for every delay.
        """
        self._host = host
        self._interaction = interaction
        self._logger = logger
        self._auto_restart = auto_restart
        self._backoff = backoff or LinearBackoff()
        self._error_prompt_delay = error_prompt_delay
        self._sleep = sleep
        self._sessions: dict[str, SessionHandle] = {}
        self._kinds: dict[str, ServiceSlot] = {}
        self._records: dict[str, RestartRecord] = {}
        self._prompt_scopes: dict[str, anyio.CancelScope] = {}
        self._epoch = 0
        self._task_group: anyio.abc.TaskGroup | None = None
        self.last_error = ""

        host.add_close_listener(self._on_session_closed)

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
        task_group = self._task_group
        self._task_group = None
        if task_group is None:
            return None
        task_group.cancel_scope.cancel()
        return await task_group.__aexit__(exc_type, exc_val, exc_tb)

    @property
    def auto_restart(self) -> bool:
        return self._auto_restart

    @property
    def records(self) -> dict[str, RestartRecord]:
        """Return a snapshot of the restart records keyed by session key."""
        return dict(self._records)

    def active_keys(self) -> list[str]:
        """Return the keys of every active session."""
        return list(self._sessions)

    def has_active_sessions(self) -> bool:
        return bool(self._sessions)

    def get_session(self, key: str) -> SessionHandle:
        """Get an active session by key.

        Raises:
            SessionNotFoundError: If no session is active under ``key``.
        """
        session = self._sessions.get(key)
        if session is None:
            msg = f"Session '{key}' not found"
            raise SessionNotFoundError(msg, session_name=key)
        return session

    def _spawn(self, func: Callable[..., Awaitable[object]], *args: object) -> None:
        if self._task_group is None:
            msg = "ProcessSupervisor must be used as an async context manager"
            raise RuntimeError(msg)
        self._task_group.start_soon(func, *args)

    async def start(self, key: str, working_directory: Path, kind: ServiceSlot) -> SessionHandle:
        """Create the session for ``key``, replacing any existing one.

        Replacing is not an error; the previous session is disposed first so
        at most one session exists per key.
        """
        existing = self._sessions.pop(key, None)
        if existing is not None:
            self._logger.debug("session_replaced", session=key)
            self._withdraw_prompt(key)
            await existing.dispose()

        session = await self._host.open(key, working_directory)
        self._sessions[key] = session
        self._kinds[key] = kind
        self._logger.info("session_created", session=key, cwd=str(working_directory))
        return session

    async def run(self, key: str, command: str, *, prompt_for_error: bool = True) -> None:
        """Send ``command`` to the session and remember it for restarts.

        The crash count of an existing record is kept. Unless
        ``prompt_for_error`` is False, a one-shot prompt inviting the user to
        capture an error is scheduled after the error prompt delay.

        Raises:
            SessionNotFoundError: If no session is active under ``key``.
        """
        session = self.get_session(key)
        kind = self._kinds[key]

        record = self._records.get(key)
        if record is None:
            self._records[key] = RestartRecord(
                command=command, working_directory=session.cwd, kind=kind
            )
        else:
            record.command = command
            record.working_directory = session.cwd
            record.kind = kind

        self._logger.bind(source=kind.label).info("command_sent", session=key, command=command)
        await session.send(command)
        if prompt_for_error:
            self._spawn(self._prompt_for_error, key, session)

    async def stop(self, key: str) -> None:
        """Dispose a session and forget its restart record.

        A pending error-capture prompt for ``key`` is withdrawn. Unknown keys
        are ignored.
        """
        self._withdraw_prompt(key)
        _ = self._records.pop(key, None)
        _ = self._kinds.pop(key, None)
        session = self._sessions.pop(key, None)
        if session is None:
            return
        await session.dispose()
        self._logger.info("session_stopped", session=key)

    async def stop_all(self) -> None:
        """Dispose every active session.

        Restart records are kept but their crash counts reset. Every pending
        restart is invalidated and every pending error-capture prompt is
        withdrawn.
        """
        self._epoch += 1
        for key in list(self._prompt_scopes):
            self._withdraw_prompt(key)
        sessions = list(self._sessions.items())
        self._sessions.clear()
        for record in self._records.values():
            record.crash_count = 0
        for key, session in sessions:
            await session.dispose()
            self._logger.info("session_stopped", session=key)

    async def set_auto_restart(self, enabled: bool) -> None:  # noqa: FBT001
        """Enable or disable automatic restarts.

        Disabling resets every crash count; pending restarts see the flag
        when their delay elapses and do nothing.
        """
        self._auto_restart = enabled
        if not enabled:
            for record in self._records.values():
                record.crash_count = 0
        self._logger.info("auto_restart_changed", enabled=enabled)

    async def _on_session_closed(self, handle: SessionHandle) -> None:
        key = handle.name
        if self._sessions.get(key) is not handle:
            # Disposed, replaced or never ours
            return
        del self._sessions[key]

        log = self._logger.bind(source=self._kinds.get(key, ServiceSlot.FRONTEND).label)
        log.warning("session_closed_unexpectedly", session=key)

        if not self._auto_restart:
            return
        record = self._records.get(key)
        if record is None:
            return

        if self._backoff.exhausted(record.crash_count):
            log.error("restart_budget_exhausted", session=key, attempts=record.crash_count)
            _ = await self._interaction.notify(
                f"{key} crashed {record.crash_count} times. Auto-restart is suspended.",
                level="error",
            )
            return

        record.crash_count += 1
        delay = self._backoff.delay(record.crash_count)
        log.info(
            "restart_scheduled",
            session=key,
            attempt=record.crash_count,
            limit=self._backoff.limit,
            delay=delay,
        )
        self._spawn(self._restart_after, key, record, delay, self._epoch)

    async def _restart_after(
        self, key: str, record: RestartRecord, delay: float, epoch: int
    ) -> None:
        await self._sleep(delay)

        if not self._auto_restart or epoch != self._epoch:
            return
        if self._records.get(key) is not record or key in self._sessions:
            return

        self._logger.bind(source=record.kind.label).info(
            "restarting", session=key, attempt=record.crash_count
        )
        _ = await self.start(key, record.working_directory, record.kind)
        await self.run(key, record.command, prompt_for_error=False)

    def _withdraw_prompt(self, key: str) -> None:
        scope = self._prompt_scopes.pop(key, None)
        if scope is not None:
            scope.cancel()

    async def _prompt_for_error(self, key: str, session: SessionHandle) -> None:
        self._withdraw_prompt(key)
        choice: str | None = None
        with anyio.CancelScope() as scope:
            self._prompt_scopes[key] = scope
            try:
                await self._sleep(self._error_prompt_delay)
                if self._sessions.get(key) is not session:
                    return

                choice = await self._interaction.notify(
                    f"{key} is starting. "
                    "If you see an error, select it, copy it and capture it here.",
                    [CAPTURE_ERROR_ACTION],
                )
            finally:
                if self._prompt_scopes.get(key) is scope:
                    del self._prompt_scopes[key]
        if scope.cancelled_caught:
            self._logger.debug("error_prompt_withdrawn", session=key)
            return
        if choice == CAPTURE_ERROR_ACTION:
            _ = await self.capture_error_from_clipboard()

    async def capture_error_from_clipboard(self) -> bool:
        """Store the clipboard text as the last error.

        Returns:
            True if the clipboard held text.
        """
        text = await self._interaction.read_clipboard()
        if not text:
            return False
        self.last_error = text
        self._logger.bind(source="ERROR").info("error_captured", length=len(text))
        _ = await self._interaction.notify(
            'Error captured! Use "devpair copy-error" to copy it again.'
        )
        return True

    async def copy_last_error(self) -> bool:
        """Write the last captured error back to the clipboard.

        Returns:
            False when no error has been captured yet.
        """
        if not self.last_error:
            _ = await self._interaction.notify("No error captured yet.", level="warning")
            return False
        await self._interaction.write_clipboard(self.last_error)
        _ = await self._interaction.notify("Error copied to clipboard!")
        return True

    async def show_error(self, error: str, kind: ServiceSlot) -> None:
        """Record ``error`` and offer to copy it."""
        self.last_error = error
        self._logger.bind(source="ERROR").error("service_error", slot=kind.value, error=error)
        choice = await self._interaction.notify(
            f"Error in {kind.value}: {error[:ERROR_PREVIEW_LENGTH]}...",
            [COPY_ERROR_ACTION, DISMISS_ACTION],
            level="error",
        )
        if choice == COPY_ERROR_ACTION:
            await self._interaction.write_clipboard(error)
            _ = await self._interaction.notify("Error copied to clipboard!")

    def get_status(self) -> dict[str, dict[str, object]]:
        """Get status summary for every known key.

        Returns:
            Mapping of session key to ``active``, ``command``, ``cwd``,
            ``kind`` and ``crash_count``.
        """
        keys = list(dict.fromkeys([*self._sessions, *self._records]))
        status: dict[str, dict[str, object]] = {}
        for key in keys:
            record = self._records.get(key)
            session = self._sessions.get(key)
            kind = record.kind if record is not None else self._kinds.get(key)
            if session is not None:
                cwd: str | None = str(session.cwd)
            elif record is not None:
                cwd = str(record.working_directory)
            else:
                cwd = None
            status[key] = {
                "active": session is not None,
                "command": record.command if record is not None else None,
                "cwd": cwd,
                "kind": kind.value if kind is not None else None,
                "crash_count": record.crash_count if record is not None else 0,
            }
        return status

"""HTTP liveness polling for the two service ports.

Each slot is polled by its own loop: probe, report a transition, sleep
for the interval. A slow probe on one port never delays the other.

Any HTTP response, including 4xx and 5xx, means the service is up. A
timeout, a refused connection or any other transport error means it is
not. The monitor itself never reports STARTING; callers may show it
before the first probe completes.
"""

import inspect
from collections.abc import Awaitable, Callable
from types import TracebackType
from typing import Self, final

import anyio
import anyio.abc
import httpx
from structlog.typing import FilteringBoundLogger

from devpair.enums import HealthState, ServiceSlot

StatusCallback = Callable[[ServiceSlot, HealthState], Awaitable[None] | None]


@final
class HealthMonitor:
    """Polls ``http://<host>:<port>`` for each slot and reports transitions.

    Must be entered as an async context manager, which owns the HTTP
    client and the polling task group. Only transitions are reported:
    subscribers see a slot's state when it differs from the previous
    probe. ``start_monitoring`` resets every slot to NONE, so the first
    probe pair is always reported.
    """

    __slots__ = (
        "_client",
        "_generation",
        "_host",
        "_interval",
        "_logger",
        "_owns_client",
        "_ports",
        "_scope",
        "_states",
        "_subscribers",
        "_task_group",
        "_timeout",
    )

    def __init__(
        self,
        logger: FilteringBoundLogger,
        *,
        interval: float = 5.0,
        timeout: float = 2.0,
        host: str = "localhost",
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the monitor.

        Args:
            logger: Diagnostic logger, rebound to ``source="HEALTH"``.
            interval: Seconds between probes of the same port.
            timeout: Per-probe timeout in seconds.
            host: Host name probed for every port.
            client: HTTP client to probe with. Created on enter if None.
        """
        self._logger = logger.bind(source="HEALTH")
        self._interval = interval
        self._timeout = timeout
        self._host = host
        self._client = client
        self._owns_client = client is None
        self._ports: dict[ServiceSlot, int] = {}
        self._states: dict[ServiceSlot, HealthState] = dict.fromkeys(ServiceSlot, HealthState.NONE)
        self._subscribers: list[StatusCallback] = []
        self._scope: anyio.CancelScope | None = None
        self._generation = 0
        self._task_group: anyio.abc.TaskGroup | None = None

    async def __aenter__(self) -> Self:
        if self._client is None:
            self._client = httpx.AsyncClient()
        self._task_group = anyio.create_task_group()
        _ = await self._task_group.__aenter__()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> bool | None:
        self.stop_monitoring()
        task_group = self._task_group
        self._task_group = None
        try:
            if task_group is None:
                return None
            task_group.cancel_scope.cancel()
            return await task_group.__aexit__(exc_type, exc_val, exc_tb)
        finally:
            if self._owns_client and self._client is not None:
                await self._client.aclose()
                self._client = None

    @property
    def states(self) -> dict[ServiceSlot, HealthState]:
        """Return the last reported state of every slot."""
        return dict(self._states)

    @property
    def ports(self) -> dict[ServiceSlot, int]:
        """Return the ports currently being monitored."""
        return dict(self._ports)

    @property
    def is_monitoring(self) -> bool:
        return self._scope is not None

    def on_status_change(self, callback: StatusCallback) -> None:
        """Subscribe to state transitions; the callback may be async."""
        self._subscribers.append(callback)

    async def start_monitoring(self, frontend_port: int, backend_port: int) -> None:
        """Start (or restart) polling both ports with an immediate probe.

        Raises:
            RuntimeError: If the monitor has not been entered.
        """
        if self._task_group is None:
            msg = "HealthMonitor must be used as an async context manager"
            raise RuntimeError(msg)

        self.stop_monitoring()
        self._ports = {ServiceSlot.FRONTEND: frontend_port, ServiceSlot.BACKEND: backend_port}
        self._states = dict.fromkeys(ServiceSlot, HealthState.NONE)
        self._logger.info(
            "monitoring_started", frontend_port=frontend_port, backend_port=backend_port
        )
        self._scope = await self._task_group.start(self._poll, self._generation)

    def stop_monitoring(self) -> None:
        """Stop polling. No callback fires after this returns."""
        self._generation += 1
        if self._scope is not None:
            self._scope.cancel()
            self._scope = None
            self._logger.info("monitoring_stopped")

    async def probe(self, port: int) -> HealthState:
        """Probe one port once.

        Returns:
            RUNNING for any HTTP response, CRASHED for any transport error.
        """
        if self._client is None:
            msg = "HealthMonitor must be used as an async context manager"
            raise RuntimeError(msg)
        try:
            _ = await self._client.get(f"http://{self._host}:{port}", timeout=self._timeout)
        except httpx.HTTPError as e:
            self._logger.debug("probe_failed", port=port, error=type(e).__name__)
            return HealthState.CRASHED
        return HealthState.RUNNING

    async def _poll(
        self,
        generation: int,
        *,
        task_status: anyio.abc.TaskStatus[anyio.CancelScope] = anyio.TASK_STATUS_IGNORED,
    ) -> None:
        with anyio.CancelScope() as scope:
            task_status.started(scope)
            async with anyio.create_task_group() as tg:
                for slot, port in self._ports.items():
                    tg.start_soon(self._poll_slot, slot, port, generation)

    async def _poll_slot(self, slot: ServiceSlot, port: int, generation: int) -> None:
        # A loop woken from its sleep may resume after stop_monitoring()
        while generation == self._generation:
            state = await self.probe(port)
            if generation != self._generation:
                return
            await self._report(slot, state, generation)
            await anyio.sleep(self._interval)

    async def _report(self, slot: ServiceSlot, state: HealthState, generation: int) -> None:
        if self._states.get(slot) == state:
            return
        previous = self._states.get(slot, HealthState.NONE)
        self._states[slot] = state
        log = self._logger.warning if state == HealthState.CRASHED else self._logger.info
        log("health_changed", slot=slot.value, previous=previous.value, state=state.value)

        for callback in list(self._subscribers):
            if generation != self._generation:
                return
            result = callback(slot, state)
            if inspect.isawaitable(result):
                await result

"""Async runner for the start command.

Runs startup, serves the control API in-process and keeps supervising
until Ctrl+C, SIGTERM or a control API shutdown request.
"""

import contextlib
import signal
from collections.abc import Generator
from pathlib import Path

import anyio
import platformdirs
import uvicorn
from rich.console import Console
from structlog.typing import FilteringBoundLogger

from devpair.config import Config
from devpair.health import HealthMonitor
from devpair.interaction import ConsoleInteractionHost
from devpair.orchestrator import Orchestrator, StartupOutcome
from devpair.supervisor import (
    ConcatenatedOutputSink,
    LinearBackoff,
    ProcessSupervisor,
    ShellSessionHost,
)
from devpair.utils import create_supervisor_logger

from .._shared import CONTROL_HOST, ExitCode
from ._app import create_control_app
from ._status import HealthStatusLine

_OUTCOME_EXIT_CODES = {
    StartupOutcome.STARTED: ExitCode.SUCCESS,
    StartupOutcome.NOT_CONFIGURED: ExitCode.LOAD_ERROR,
    StartupOutcome.NO_WORKSPACE: ExitCode.NOT_FOUND,
    StartupOutcome.CANCELLED: ExitCode.CANCELLED,
    StartupOutcome.INSTALLING: ExitCode.SUCCESS,
}


def create_logger(config: Config) -> FilteringBoundLogger:
    """Create the supervisor logger for a loaded configuration.

    Without a workspace the log goes to the platform user log directory.
    """
    log_config = config.logging
    workspace_root = config.workspace_root
    log_file = log_config.file
    if workspace_root is None and not log_file:
        log_file = str(platformdirs.user_log_path("devpair") / "devpair.log")

    return create_supervisor_logger(
        workspace_root or Path.cwd(),
        level=log_config.level.value,
        log_format="json" if log_config.format.value == "json" else "text",
        log_file=log_file,
    )


class _ControlServer(uvicorn.Server):
    """uvicorn server that leaves SIGINT and SIGTERM to the supervisor."""

    @contextlib.contextmanager
    def capture_signals(self) -> Generator[None]:
        yield


async def _watch_signals(orchestrator: Orchestrator) -> None:
    with anyio.open_signal_receiver(signal.SIGINT, signal.SIGTERM) as signals:
        async for signum in signals:
            # Ctrl+C asks first; SIGTERM comes from a process manager
            orchestrator.request_shutdown(confirm=signum == signal.SIGINT)


async def _supervise(orchestrator: Orchestrator, server: uvicorn.Server) -> None:
    while True:
        confirm = await orchestrator.wait_for_shutdown_request()
        if await orchestrator.shutdown(confirm=confirm):
            break
        orchestrator.clear_shutdown_request()
    server.should_exit = True


async def run_start(config: Config, control_port: int, console: Console | None = None) -> int:
    """Start both services and supervise them until shutdown.

    Args:
        config: Loaded configuration.
        control_port: Port for the in-process control API.
        console: Console for output and prompts.

    Returns:
        The process exit code.
    """
    console = console or Console()
    logger = create_logger(config)
    timing = config.supervisor
    health_config = config.health

    interaction = ConsoleInteractionHost(console)
    status_line = HealthStatusLine(console)

    async with (
        ShellSessionHost(
            ConcatenatedOutputSink(console), logger, shutdown_timeout=timing.shutdown_timeout
        ) as host,
        ProcessSupervisor(
            host,
            interaction,
            logger,
            auto_restart=config.auto_restart,
            backoff=LinearBackoff(step=timing.restart_backoff_step, limit=timing.restart_limit),
            error_prompt_delay=timing.error_prompt_delay,
        ) as supervisor,
        HealthMonitor(
            logger,
            interval=health_config.interval,
            timeout=health_config.timeout,
            host=health_config.host,
        ) as health,
    ):
        health.on_status_change(status_line.update)
        orchestrator = Orchestrator(config, supervisor, health, interaction, host, logger)

        result = await orchestrator.startup()
        if not result.ok:
            return _OUTCOME_EXIT_CODES[result.outcome]

        for slot in result.started:
            console.print(f"  {slot.label}: http://localhost:{result.ports[slot]}")
        console.print(f"  Control API: http://{CONTROL_HOST}:{control_port}/devpair/status")

        server = _ControlServer(
            uvicorn.Config(
                app=create_control_app(supervisor, health, orchestrator),
                host=CONTROL_HOST,
                port=control_port,
                log_level="warning",
                access_log=False,
            )
        )

        async with anyio.create_task_group() as tg:
            tg.start_soon(server.serve)
            tg.start_soon(_watch_signals, orchestrator)
            await _supervise(orchestrator, server)
            tg.cancel_scope.cancel()

    return ExitCode.SUCCESS

"""Startup and shutdown sequencing.

``startup`` runs, in order: configuration check, workspace resolution,
command resolution (profile override > Docker > framework default), the
port gate for each slot, the dependency gate for each slot, session
creation with a staggered launch, and finally health monitoring.

Aborting at a gate happens before any session is created. A slot held
back for a dependency install does not stop the other slot.
"""

from collections.abc import Callable
from pathlib import Path
from typing import final

import anyio
import anyio.to_thread
from structlog.typing import FilteringBoundLogger

from devpair.config import Config, get_project_config_path, write_config_value
from devpair.enums import ServiceSlot
from devpair.health import HealthMonitor
from devpair.interaction import InteractionHost
from devpair.launch import (
    docker_command,
    free_port,
    has_dependencies,
    install_command_for,
    is_port_available,
    port_for,
    resolve_command,
)
from devpair.supervisor import ProcessSupervisor, SessionHost
from devpair.utils import resolve_slot_directory

from ._models import StartupOutcome, StartupResult

CONFIGURE_ACTION = "Configure"
CANCEL_ACTION = "Cancel"
KILL_PROCESS_ACTION = "Kill Process"
IGNORE_ACTION = "Ignore"
INSTALL_NOW_ACTION = "Install Now"
SKIP_ACTION = "Skip"
STOP_ALL_ACTION = "Stop All"

LAUNCH_ORDER = (ServiceSlot.FRONTEND, ServiceSlot.BACKEND)

PortChecker = Callable[[int], bool]
PortFreer = Callable[[int, FilteringBoundLogger], bool]


@final
class Orchestrator:
    """Sequences startup and shutdown of the two service slots."""

    __slots__ = (
        "_config",
        "_free_port",
        "_health",
        "_host",
        "_interaction",
        "_logger",
        "_port_available",
        "_shutdown_confirm",
        "_shutdown_requested",
        "_supervisor",
    )

    def __init__(
        self,
        config: Config,
        supervisor: ProcessSupervisor,
        health: HealthMonitor,
        interaction: InteractionHost,
        host: SessionHost,
        logger: FilteringBoundLogger,
        *,
        port_available: PortChecker = is_port_available,
        port_freer: PortFreer = free_port,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            config: Loaded configuration.
            supervisor: Owns the slot sessions.
            health: Polls the slot ports once started.
            interaction: Prompt surface for the gates.
            host: Session host used for dependency-install helper sessions.
            logger: Diagnostic logger.
            port_available: Port availability check.
            port_freer: Best-effort port freeing.
        """
        self._config = config
        self._supervisor = supervisor
        self._health = health
        self._interaction = interaction
        self._host = host
        self._logger = logger
        self._port_available = port_available
        self._free_port = port_freer
        self._shutdown_requested = anyio.Event()
        self._shutdown_confirm = True

    @property
    def config(self) -> Config:
        return self._config

    def request_shutdown(self, *, confirm: bool = True) -> None:
        """Ask whoever awaits ``wait_for_shutdown_request`` to shut down.

        Args:
            confirm: Whether the shutdown should still ask the user.
        """
        self._shutdown_confirm = confirm
        self._shutdown_requested.set()

    async def wait_for_shutdown_request(self) -> bool:
        """Wait for a shutdown request.

        Returns:
            Whether the request asked for confirmation.
        """
        await self._shutdown_requested.wait()
        return self._shutdown_confirm

    def clear_shutdown_request(self) -> None:
        """Forget a declined shutdown request."""
        if self._shutdown_requested.is_set():
            self._shutdown_requested = anyio.Event()

    def resolve_commands(self, directories: dict[ServiceSlot, Path]) -> dict[ServiceSlot, str]:
        """Resolve each slot's command: profile override > Docker > framework.

        Every override that applies is logged with the chosen command.
        """
        config = self._config
        commands: dict[ServiceSlot, str] = {}
        for slot in LAUNCH_ORDER:
            slot_config = config.slot(slot)
            command = resolve_command(slot_config.framework, slot, slot_config.custom_command)

            if config.use_docker:
                docker = docker_command(directories[slot])
                if docker is not None:
                    command = docker
                    self._logger.info("docker_command_selected", slot=slot.label, command=command)

            override = config.profile_override(slot)
            if override:
                command = override
                self._logger.info(
                    "profile_command_selected",
                    slot=slot.label,
                    profile=config.active_profile.value,
                    command=command,
                )

            commands[slot] = command
        return commands

    async def startup(self) -> StartupResult:  # noqa: C901, PLR0911
        """Run the full startup sequence.

        Returns:
            A StartupResult describing how far startup got.
        """
        config = self._config
        self._logger.info("startup_requested")

        if not config.is_configured:
            self._logger.warning("startup_not_configured")
            choice = await self._interaction.confirm(
                "Project not configured. Would you like to configure it now?",
                [CONFIGURE_ACTION, CANCEL_ACTION],
            )
            if choice == CONFIGURE_ACTION:
                _ = await self._interaction.notify(
                    'Run "devpair config init" to detect frameworks and write devpair.toml.'
                )
            return StartupResult(StartupOutcome.NOT_CONFIGURED)

        workspace_root = config.workspace_root
        if workspace_root is None:
            self._logger.error("startup_no_workspace")
            _ = await self._interaction.notify("No workspace folder found.", level="error")
            return StartupResult(StartupOutcome.NO_WORKSPACE)

        directories = {
            slot: resolve_slot_directory(workspace_root, config.slot(slot).path)
            for slot in LAUNCH_ORDER
        }
        commands = self.resolve_commands(directories)
        ports = {slot: port_for(config.slot(slot).framework, slot) for slot in LAUNCH_ORDER}

        for slot in LAUNCH_ORDER:
            if not await self._check_port(ports[slot], slot):
                return StartupResult(StartupOutcome.CANCELLED, commands=commands, ports=ports)

        launch: list[ServiceSlot] = []
        for slot in LAUNCH_ORDER:
            decision = await self._check_dependencies(directories[slot], slot)
            if decision is None:
                return StartupResult(StartupOutcome.CANCELLED, commands=commands, ports=ports)
            if decision:
                launch.append(slot)

        if not launch:
            return StartupResult(StartupOutcome.INSTALLING, commands=commands, ports=ports)

        await self._launch(launch, directories, commands)
        await self._health.start_monitoring(ports[ServiceSlot.FRONTEND], ports[ServiceSlot.BACKEND])
        self._logger.info("servers_started", slots=[slot.label for slot in launch])

        return StartupResult(
            StartupOutcome.STARTED, started=tuple(launch), commands=commands, ports=ports
        )

    async def _check_port(self, port: int, slot: ServiceSlot) -> bool:
        """Run the port gate. Returns False when startup must abort."""
        log = self._logger.bind(source="PORT")
        if self._port_available(port):
            return True

        log.warning("port_in_use", port=port, slot=slot.label)
        choice = await self._interaction.confirm(
            f"Port {port} is already in use by another process ({slot.label}).",
            [KILL_PROCESS_ACTION, IGNORE_ACTION, CANCEL_ACTION],
        )

        if choice == KILL_PROCESS_ACTION:
            freed = await anyio.to_thread.run_sync(self._free_port, port, log)
            if freed:
                log.info("port_freed", port=port)
            else:
                log.warning("port_free_failed", port=port)
                _ = await self._interaction.notify(
                    f"Failed to kill process on port {port}. Continuing anyway.",
                    level="warning",
                )
            return True

        if choice == IGNORE_ACTION:
            log.info("port_conflict_ignored", port=port)
            return True

        log.info("startup_cancelled_port", port=port)
        return False

    async def _check_dependencies(self, directory: Path, slot: ServiceSlot) -> bool | None:
        """Run the dependency gate.

        Returns:
            True to launch the slot, False to hold it back for an install,
            None when startup must abort.
        """
        log = self._logger.bind(source="DEPS")
        framework = self._config.slot(slot).framework
        if has_dependencies(directory, framework):
            return True

        choice = await self._interaction.confirm(
            f"Dependencies seem to be missing in {slot.label} ({framework}). Install now?",
            [INSTALL_NOW_ACTION, SKIP_ACTION, CANCEL_ACTION],
        )

        if choice == INSTALL_NOW_ACTION:
            command = install_command_for(framework)
            log.info("installing_dependencies", slot=slot.label, command=command)
            session = await self._host.open(f"Install {slot.label}", directory)
            await session.send(command)
            _ = await self._interaction.notify(
                f"Installing dependencies for {slot.label}... "
                "Please wait for it to finish before starting servers again."
            )
            return False

        if choice == SKIP_ACTION:
            log.info("dependency_install_skipped", slot=slot.label)
            return True

        log.info("startup_cancelled_dependencies", slot=slot.label)
        return None

    async def _launch(
        self,
        slots: list[ServiceSlot],
        directories: dict[ServiceSlot, Path],
        commands: dict[ServiceSlot, str],
    ) -> None:
        timing = self._config.supervisor
        for slot in slots:
            _ = await self._supervisor.start(slot.label, directories[slot], slot)

        await anyio.sleep(timing.launch_delay)
        for index, slot in enumerate(slots):
            if index:
                await anyio.sleep(timing.launch_stagger)
            await self._supervisor.run(slot.label, commands[slot])

    async def set_auto_restart(self, enabled: bool, *, persist: bool = True) -> None:  # noqa: FBT001
        """Toggle auto-restart and save the flag to the project devpair.toml.

        Raises:
            ConfigLoadError: If the existing project file cannot be parsed.
        """
        await self._supervisor.set_auto_restart(enabled)
        workspace_root = self._config.workspace_root
        if persist and workspace_root is not None:
            path = get_project_config_path(workspace_root)
            _ = write_config_value(path, "auto_restart", enabled)
            self._logger.info("config_saved", path=str(path), key="auto_restart")

    async def shutdown(self, *, confirm: bool = True) -> bool:
        """Stop every session and the health monitor.

        Args:
            confirm: Ask before stopping running sessions.

        Returns:
            False if the user declined, True otherwise.
        """
        active = self._supervisor.active_keys()
        if not active:
            self._health.stop_monitoring()
            _ = await self._interaction.notify("No servers are currently running.")
            return True

        if confirm:
            choice = await self._interaction.confirm(
                f"Stop {len(active)} running server(s)?",
                [STOP_ALL_ACTION, CANCEL_ACTION],
            )
            if choice != STOP_ALL_ACTION:
                self._logger.info("shutdown_declined")
                return False

        await self._supervisor.stop_all()
        self._health.stop_monitoring()
        self._logger.info("servers_stopped", sessions=active)
        _ = await self._interaction.notify("All servers stopped.")
        return True

"""FastAPI control endpoints for a running devpair supervisor.

``devpair stop`` and ``devpair status`` talk to these endpoints over
localhost.
"""

# pyright: reportUnusedFunction=false
# FastAPI route handlers are registered via decorators, not direct calls

from typing import TYPE_CHECKING, Never

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel

from devpair.exceptions import SessionNotFoundError

from ._supervisor import ProcessSupervisor

if TYPE_CHECKING:
    from devpair.health import HealthMonitor
    from devpair.orchestrator import Orchestrator


class SessionStatusResponse(BaseModel):
    """Response model for one session key."""

    name: str
    active: bool
    kind: str | None
    command: str | None
    cwd: str | None
    crash_count: int


class StatusResponse(BaseModel):
    """Response model for overall supervisor status."""

    sessions: dict[str, SessionStatusResponse]
    health: dict[str, str]
    auto_restart: bool
    has_last_error: bool


class AutoRestartRequest(BaseModel):
    """Request body for toggling auto-restart."""

    enabled: bool


class MessageResponse(BaseModel):
    """Response model for simple message responses."""

    message: str


def _build_session_status(name: str, data: dict[str, object]) -> SessionStatusResponse:
    """Build a SessionStatusResponse from raw status data."""
    kind = data.get("kind")
    command = data.get("command")
    cwd = data.get("cwd")
    crash_count = data.get("crash_count")

    return SessionStatusResponse(
        name=name,
        active=bool(data.get("active")),
        kind=str(kind) if kind is not None else None,
        command=str(command) if command is not None else None,
        cwd=str(cwd) if cwd is not None else None,
        crash_count=crash_count if isinstance(crash_count, int) else 0,
    )


def _raise_not_found(name: str, cause: SessionNotFoundError) -> Never:
    """Raise HTTP 404 for an unknown session key.

    Raises:
        HTTPException: Always raises with 404 status.
    """
    raise HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Session '{name}' not found",
    ) from cause


def create_control_router(
    supervisor: ProcessSupervisor,
    health: "HealthMonitor",
    orchestrator: "Orchestrator",
) -> APIRouter:
    """Create a FastAPI router for supervisor control endpoints.

    Args:
        supervisor: The running ProcessSupervisor.
        health: The running HealthMonitor.
        orchestrator: Receives shutdown requests.

    Returns:
        A FastAPI APIRouter with control endpoints under ``/devpair``.
    """
    router = APIRouter(prefix="/devpair", tags=["devpair"])

    @router.get("/status", response_model=StatusResponse)
    async def get_status() -> StatusResponse:
        """Get sessions, health states and the auto-restart flag."""
        sessions = {
            name: _build_session_status(name, data)
            for name, data in supervisor.get_status().items()
        }
        return StatusResponse(
            sessions=sessions,
            health={slot.value: state.value for slot, state in health.states.items()},
            auto_restart=supervisor.auto_restart,
            has_last_error=bool(supervisor.last_error),
        )

    @router.post("/sessions/{name}/stop", response_model=MessageResponse)
    async def stop_session(name: str) -> MessageResponse:
        """Stop one session and forget its restart record."""
        try:
            _ = supervisor.get_session(name)
        except SessionNotFoundError as e:
            _raise_not_found(name, e)

        await supervisor.stop(name)
        return MessageResponse(message=f"Session '{name}' stopped")

    @router.post("/auto-restart", response_model=MessageResponse)
    async def set_auto_restart(body: AutoRestartRequest) -> MessageResponse:
        """Enable or disable automatic restarts."""
        await orchestrator.set_auto_restart(body.enabled)
        state = "enabled" if body.enabled else "disabled"
        return MessageResponse(message=f"Auto-restart {state}")

    @router.post("/errors/capture", response_model=MessageResponse)
    async def capture_error() -> MessageResponse:
        """Store the clipboard text as the last error."""
        if not await supervisor.capture_error_from_clipboard():
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Clipboard is empty",
            )
        return MessageResponse(message="Error captured")

    @router.post("/errors/copy", response_model=MessageResponse)
    async def copy_error() -> MessageResponse:
        """Copy the last captured error to the clipboard."""
        if not await supervisor.copy_last_error():
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="No error captured yet",
            )
        return MessageResponse(message="Error copied to clipboard")

    @router.post("/shutdown", response_model=MessageResponse)
    async def shutdown() -> MessageResponse:
        """Ask the running ``devpair start`` to shut down."""
        orchestrator.request_shutdown(confirm=False)
        return MessageResponse(message="Shutdown initiated")

    return router

"""Control application factory for the start command."""

from fastapi import FastAPI

from devpair.health import HealthMonitor
from devpair.orchestrator import Orchestrator
from devpair.supervisor import ProcessSupervisor, create_control_router


def create_control_app(
    supervisor: ProcessSupervisor,
    health: HealthMonitor,
    orchestrator: Orchestrator,
) -> FastAPI:
    """Create the FastAPI control application.

    Args:
        supervisor: The running ProcessSupervisor.
        health: The running HealthMonitor.
        orchestrator: Receives shutdown requests.

    Returns:
        A FastAPI application with the devpair control endpoints.
    """
    app = FastAPI(
        title="devpair control",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.include_router(create_control_router(supervisor, health, orchestrator))
    return app

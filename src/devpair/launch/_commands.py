"""Start command resolution.

``resolve_command`` is the pure framework lookup. ``docker_command``
inspects a working directory for a compose file or Dockerfile and is used
by the orchestrator as a higher-precedence override.
"""

import re
from pathlib import Path

from devpair.enums import ServiceSlot

from ._frameworks import (
    BACKEND_COMMANDS,
    DEFAULT_COMMANDS,
    FRONTEND_COMMANDS,
    Framework,
    parse_framework,
)

COMPOSE_FILES = ("docker-compose.yml", "docker-compose.yaml")
COMPOSE_COMMAND = "docker-compose up"
DOCKER_PUBLISHED_PORT = 8080


def resolve_command(
    framework_id: str,
    slot: ServiceSlot,
    custom_command: str | None = None,
) -> str:
    """Resolve the shell command that starts a slot's service.

    A ``custom`` framework with a non-empty custom command returns the
    command verbatim. Everything else comes from the static per-slot table,
    falling back to the slot's generic default. Never returns an empty string.

    Args:
        framework_id: Framework identifier from configuration.
        slot: Which slot the command is for.
        custom_command: Command configured for the ``custom`` framework.

    Returns:
        The shell command string.
    """
    framework = parse_framework(framework_id)
    if framework is Framework.CUSTOM and custom_command:
        return custom_command

    table = FRONTEND_COMMANDS if slot is ServiceSlot.FRONTEND else BACKEND_COMMANDS
    if framework is not None and framework in table:
        return table[framework]
    return DEFAULT_COMMANDS[slot]


def has_compose_file(directory: Path) -> bool:
    """Check if a directory contains a docker-compose.yml or .yaml file."""
    return any((directory / name).is_file() for name in COMPOSE_FILES)


def has_dockerfile(directory: Path) -> bool:
    """Check if a directory contains a Dockerfile."""
    return (directory / "Dockerfile").is_file()


def image_name_for(directory: Path) -> str:
    """Derive a Docker image name from a directory name."""
    return re.sub(r"[^a-z0-9]", "-", directory.name.lower())


def docker_command(directory: Path) -> str | None:
    """Return the Docker command for a directory, or None.

    A compose file takes precedence over a bare Dockerfile.
    """
    if has_compose_file(directory):
        return COMPOSE_COMMAND
    if has_dockerfile(directory):
        image = image_name_for(directory)
        return (
            f"docker build -t {image} . && "
            f"docker run -p {DOCKER_PUBLISHED_PORT}:{DOCKER_PUBLISHED_PORT} {image}"
        )
    return None

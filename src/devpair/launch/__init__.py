"""Launch planning: commands, ports and dependency checks per framework.

These are the leaf components consumed by the orchestrator before any
process is spawned:

- resolve_command / docker_command: which shell command starts a slot
- port_for / is_port_available / free_port: port conventions and contention
- has_dependencies / install_command_for: installed-dependency gate
- detect_framework / recommend_script: configuration helpers
"""

from ._commands import (
    COMPOSE_COMMAND,
    docker_command,
    has_compose_file,
    has_dockerfile,
    image_name_for,
    resolve_command,
)
from ._dependencies import has_dependencies, install_command_for
from ._detect import detect_framework, recommend_script
from ._frameworks import Framework, parse_framework
from ._ports import find_port_owners, free_port, is_port_available, port_for

__all__ = [
    "COMPOSE_COMMAND",
    "Framework",
    "detect_framework",
    "docker_command",
    "find_port_owners",
    "free_port",
    "has_compose_file",
    "has_dependencies",
    "has_dockerfile",
    "image_name_for",
    "install_command_for",
    "is_port_available",
    "parse_framework",
    "port_for",
    "recommend_script",
    "resolve_command",
]

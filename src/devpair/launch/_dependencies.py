"""Installed-dependency checks for service working directories."""

from pathlib import Path

from ._frameworks import (
    DEFAULT_DEPENDENCY_MARKERS,
    DEFAULT_INSTALL_COMMAND,
    DEPENDENCY_MARKERS,
    INSTALL_COMMANDS,
    PYTHON_FRAMEWORKS,
    Framework,
    parse_framework,
)


def has_dependencies(directory: Path, framework_id: str) -> bool:
    """Check whether a working directory shows installed dependencies.

    A missing directory counts as satisfied: there is nothing to check and
    the spawn itself will surface the real error. A marker directory
    (``node_modules``, ``venv``/``.venv``, ``target``) counts as installed.
    Without a marker, a manifest that implies dependencies
    (``pom.xml``, ``requirements.txt``, ``package.json``) means missing.

    Args:
        directory: The slot's working directory.
        framework_id: Framework identifier from configuration.

    Returns:
        False only when dependencies appear to be missing.
    """
    if not directory.exists():
        return True

    framework = parse_framework(framework_id)
    markers = (
        DEPENDENCY_MARKERS[framework]
        if framework is not None and framework in DEPENDENCY_MARKERS
        else DEFAULT_DEPENDENCY_MARKERS
    )

    if any((directory / marker).exists() for marker in markers):
        return True

    if framework is Framework.SPRING_BOOT and (directory / "pom.xml").exists():
        return False

    if framework in PYTHON_FRAMEWORKS and (directory / "requirements.txt").exists():
        return False

    return not (
        (directory / "package.json").exists()
        and not (directory / "node_modules").exists()
    )


def install_command_for(framework_id: str) -> str:
    """Return the command that installs a framework's dependencies."""
    framework = parse_framework(framework_id)
    if framework is not None and framework in INSTALL_COMMANDS:
        return INSTALL_COMMANDS[framework]
    return DEFAULT_INSTALL_COMMAND

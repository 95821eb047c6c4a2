from pathlib import Path


def get_devpair_dir(workspace_root: Path) -> Path:
    """Get the path to the .devpair/ state directory inside a workspace."""
    return workspace_root / ".devpair"


def get_log_dir(workspace_root: Path) -> Path:
    """Get the path to the logs/ directory inside .devpair/."""
    return get_devpair_dir(workspace_root) / "logs"


def get_log_file(workspace_root: Path) -> Path:
    """Get the path to the supervisor log file inside .devpair/logs/."""
    return get_log_dir(workspace_root) / "devpair.log"


def resolve_slot_directory(workspace_root: Path, relative_path: str) -> Path:
    """Resolve a slot's configured path against the workspace root.

    Absolute paths are returned unchanged.
    """
    return workspace_root / relative_path

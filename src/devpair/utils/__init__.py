"""Shared utilities: structured logging and workspace paths."""

from ._logging import LogFormatType, create_supervisor_logger
from ._paths import get_devpair_dir, get_log_dir, get_log_file, resolve_slot_directory

__all__ = [
    "LogFormatType",
    "create_supervisor_logger",
    "get_devpair_dir",
    "get_log_dir",
    "get_log_file",
    "resolve_slot_directory",
]

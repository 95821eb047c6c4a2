"""Diagnostic log file for a devpair run.

Every supervision component shares one structlog logger created here.
Entries go to a file, never to the terminal, so they do not interleave
with service output. Each entry carries an ISO timestamp, its level and a
``source`` tag naming who wrote it (``SYSTEM``, ``Frontend``, ``Backend``,
``HEALTH`` and so on).

The logger is built with ``structlog.wrap_logger`` and leaves the global
structlog configuration alone.
"""

import logging
from logging.handlers import RotatingFileHandler
from os import getenv
from pathlib import Path
from typing import Literal, cast

import structlog
from structlog.typing import FilteringBoundLogger, Processor

from ._paths import get_log_file

LogFormatType = Literal["json", "text"]

DEBUG_ENV = "DEVPAIR_DEBUG"
LEVEL_ENV = "DEVPAIR_LOG_LEVEL"


def resolve_level(level: str) -> int:
    """Map a configured level name to a logging constant.

    ``DEVPAIR_DEBUG`` forces debug output and ``DEVPAIR_LOG_LEVEL`` replaces
    the configured name. Unknown names fall back to info.
    """
    if getenv(DEBUG_ENV):
        return logging.DEBUG
    name = getenv(LEVEL_ENV) or level
    return logging.getLevelNamesMapping().get(name.upper(), logging.INFO)


def _render_processors(log_format: LogFormatType) -> list[Processor]:
    processors: list[Processor] = [
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if log_format == "json":
        processors += [structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))
    return processors


def _rotating_sink(path: Path, level: int, max_bytes: int, backup_count: int) -> logging.Logger:
    """Return a private stdlib logger that only writes pre-rendered lines."""
    sink = logging.getLogger(f"devpair.file.{path}")
    sink.handlers.clear()
    sink.propagate = False
    sink.setLevel(level)

    handler = RotatingFileHandler(path, maxBytes=max_bytes, backupCount=backup_count)
    handler.setFormatter(logging.Formatter("%(message)s"))
    sink.addHandler(handler)
    return sink


def create_supervisor_logger(
    workspace_root: Path,
    *,
    level: str = "info",
    log_format: LogFormatType = "text",
    log_file: str = "",
    max_bytes: int | None = None,
    backup_count: int | None = None,
) -> FilteringBoundLogger:
    """Create the logger shared by the supervisor, health monitor and orchestrator.

    Args:
        workspace_root: Workspace whose ``.devpair/logs/devpair.log`` is used
            when ``log_file`` is empty.
        level: Threshold name (debug, info, warning, error).
        log_format: ``json`` for one object per line, ``text`` for
            key=value lines.
        log_file: Explicit log file path.
        max_bytes: Rotate after this many bytes. Needs ``backup_count``.
        backup_count: Rotated files to keep. Needs ``max_bytes``.

    Returns:
        A logger bound to ``source="SYSTEM"``. Components rebind ``source``
        for their own entries.
    """
    path = Path(log_file) if log_file else get_log_file(workspace_root)
    path.parent.mkdir(parents=True, exist_ok=True)
    threshold = resolve_level(level)

    if max_bytes is not None and backup_count is not None:
        raw: object = _rotating_sink(path, threshold, max_bytes, backup_count)
    else:
        raw = structlog.WriteLoggerFactory(file=path.open("a", encoding="utf-8"))()

    logger = cast(
        "FilteringBoundLogger",
        structlog.wrap_logger(
            raw,
            processors=_render_processors(log_format),
            wrapper_class=structlog.make_filtering_bound_logger(threshold),
            context_class=dict,
        ),
    )
    return logger.bind(source="SYSTEM")

"""Conventional ports, availability checks and best-effort port freeing.

Note: checking and freeing a port are inherently racy. Another process
can claim the port between ``is_port_available`` returning True and the
service binding it, and a terminated occupant may linger in TIME_WAIT.
``free_port`` is therefore best-effort and never atomic with the
subsequent bind.
"""

import errno
import socket

import psutil
from structlog.typing import FilteringBoundLogger

from devpair.enums import ServiceSlot

from ._frameworks import DEFAULT_PORTS, FRAMEWORK_PORTS, parse_framework

PROBE_HOST = "127.0.0.1"
TERMINATE_TIMEOUT = 3.0


def port_for(framework_id: str, slot: ServiceSlot) -> int:
    """Return the conventional port for a framework.

    Unknown frameworks fall back to 3000 for the frontend slot and 8080
    for the backend slot.
    """
    framework = parse_framework(framework_id)
    if framework is not None and framework in FRAMEWORK_PORTS:
        return FRAMEWORK_PORTS[framework]
    return DEFAULT_PORTS[slot]


def is_port_available(port: int, host: str = PROBE_HOST) -> bool:
    """Check whether a TCP port can be bound on localhost.

    Binds a test listener and releases it immediately. Only an
    "address in use" failure reports the port as unavailable; any other
    bind error is treated as available so ambiguous errors never block
    startup.
    """
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        try:
            sock.bind((host, port))
            sock.listen(1)
        except OSError as e:
            return e.errno != errno.EADDRINUSE
    return True


def find_port_owners(port: int) -> list[int]:
    """Return the PIDs listening on a local TCP port.

    Raises:
        psutil.AccessDenied: If the platform refuses to list connections.
    """
    pids: set[int] = set()
    for conn in psutil.net_connections(kind="inet"):
        if not conn.laddr or conn.laddr.port != port:
            continue
        if conn.status != psutil.CONN_LISTEN or not conn.pid:
            continue
        pids.add(conn.pid)
    return sorted(pids)


def free_port(port: int, logger: FilteringBoundLogger | None = None) -> bool:
    """Terminate whatever process listens on a port.

    Best-effort: returns True when at least one owning process was
    terminated (or had already exited), False when no owner could be found
    or the platform denied access.

    Args:
        port: The TCP port to free.
        logger: Optional logger for per-process diagnostics.
    """
    try:
        pids = find_port_owners(port)
    except psutil.Error as e:
        if logger is not None:
            logger.warning("port_owner_lookup_failed", port=port, error=str(e))
        return False

    freed = False
    for pid in pids:
        try:
            process = psutil.Process(pid)
            if logger is not None:
                logger.info("terminating_port_owner", port=port, pid=pid, name=process.name())
            process.terminate()
            try:
                _ = process.wait(timeout=TERMINATE_TIMEOUT)
            except psutil.TimeoutExpired:
                process.kill()
            freed = True
        except psutil.NoSuchProcess:
            freed = True
        except psutil.Error as e:
            if logger is not None:
                logger.warning("port_owner_terminate_failed", port=port, pid=pid, error=str(e))

    return freed

"""Periodic HTTP liveness checks for the supervised services."""

from ._monitor import HealthMonitor, StatusCallback

__all__ = ["HealthMonitor", "StatusCallback"]

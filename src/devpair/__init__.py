"""devpair - launch and supervise a frontend/backend service pair."""

from devpair.enums import HealthState, ServiceSlot

__version__ = "0.1.0"

__all__ = ["HealthState", "ServiceSlot", "__version__"]

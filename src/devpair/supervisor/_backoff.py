"""Linear backoff calculator for crash restarts."""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class LinearBackoff:
    """Linear backoff with a fixed restart budget.

    The n-th consecutive restart waits ``n * step`` seconds, so the default
    budget of three restarts waits 2s, 4s and 6s. There is no jitter: only
    two sessions are ever supervised.

    Attributes:
        step: Seconds added per consecutive crash.
        limit: Maximum consecutive restarts before giving up.
    """

    step: float = 2.0
    limit: int = 3

    def delay(self, count: int) -> float:
        """Return the delay before the ``count``-th restart (1-indexed)."""
        return count * self.step

    def exhausted(self, count: int) -> bool:
        """Return True when ``count`` restarts have used the whole budget."""
        return count >= self.limit

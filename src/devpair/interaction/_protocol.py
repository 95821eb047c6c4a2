"""The human-facing surface consumed by the supervisor and orchestrator."""

from collections.abc import Sequence
from typing import Literal, Protocol, runtime_checkable

NotifyLevel = Literal["info", "warning", "error"]


@runtime_checkable
class InteractionHost(Protocol):
    """Displays prompts and notifications and owns the clipboard.

    Every prompt may stay pending indefinitely. A ``None`` answer means the
    prompt was dismissed, which callers treat exactly like "cancel".
    """

    async def confirm(self, message: str, options: Sequence[str]) -> str | None:
        """Ask the user to pick one of ``options``."""
        ...

    async def notify(
        self,
        message: str,
        actions: Sequence[str] = (),
        *,
        level: NotifyLevel = "info",
    ) -> str | None:
        """Show a notification, optionally with action buttons."""
        ...

    async def read_clipboard(self) -> str:
        """Return the clipboard text (empty when unavailable)."""
        ...

    async def write_clipboard(self, text: str) -> None:
        """Replace the clipboard text."""
        ...

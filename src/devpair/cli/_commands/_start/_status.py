"""Console rendering of health transitions."""

from typing import final

from rich.console import Console

from devpair.enums import HealthState, ServiceSlot

_STATE_STYLES = {
    HealthState.NONE: "dim",
    HealthState.STARTING: "yellow",
    HealthState.RUNNING: "bold green",
    HealthState.CRASHED: "bold red",
}


@final
class HealthStatusLine:
    """Prints a one-line summary of both slots on every transition."""

    __slots__ = ("_console", "_states")

    def __init__(self, console: Console) -> None:
        self._console = console
        self._states = dict.fromkeys(ServiceSlot, HealthState.STARTING)

    def render(self) -> str:
        parts = [
            f"{slot.label}: [{_STATE_STYLES[state]}]{state.value}[/]"
            for slot, state in self._states.items()
        ]
        return "[bold blue]\\[health][/] " + "  ".join(parts)

    def update(self, slot: ServiceSlot, state: HealthState) -> None:
        self._states[slot] = state
        self._console.print(self.render())

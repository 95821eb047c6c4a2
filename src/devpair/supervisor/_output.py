"""Where session output ends up.

Both services share one terminal. Every line is tagged with the session
name and pid so frontend and backend output can be told apart.
"""

from typing import Literal, final

from rich.console import Console
from rich.style import Style
from rich.text import Text

from ._models import SessionEvent, SessionEventType

TAG_STYLE = Style(color="blue", bold=True)
STDERR_STYLE = Style(color="red", dim=True)
DETAIL_STYLE = Style(dim=True)

EVENT_STYLES: dict[SessionEventType, Style] = {
    SessionEventType.STARTED: Style(color="green", bold=True),
    SessionEventType.STOPPED: Style(color="yellow"),
    SessionEventType.CLOSED: Style(color="red", bold=True),
}


@final
class ConcatenatedOutputSink:
    """Print both sessions to one rich console.

    Output lines look like ``[Frontend:4321] VITE ready``; stderr is dim
    red. Lifecycle events look like ``[Backend] CLOSED exit_code=1``.
    """

    __slots__ = ("_console",)

    def __init__(self, console: Console | None = None) -> None:
        self._console = console or Console()

    async def write_line(
        self,
        session_name: str,
        pid: int,
        stream: Literal["stdout", "stderr"],
        line: str,
    ) -> None:
        text = Text.assemble(
            (f"[{session_name}:{pid}]", TAG_STYLE),
            " ",
            (line, STDERR_STYLE if stream == "stderr" else ""),
        )
        self._console.print(text)

    async def write_event(self, session_name: str, event: SessionEvent) -> None:
        style = EVENT_STYLES.get(event.event_type, Style())
        text = Text.assemble((f"[{session_name}]", TAG_STYLE), " ", (event.event_type.upper(), style))

        if event.pid is not None:
            _ = text.append(f" (pid={event.pid})", style=DETAIL_STYLE)
        if event.exit_code is not None:
            _ = text.append(f" exit_code={event.exit_code}", style=DETAIL_STYLE)
        if event.message:
            _ = text.append(f" - {event.message}", style=style)

        self._console.print(text)


@final
class NullOutputSink:
    """Discard session output, e.g. when a caller only wants lifecycle callbacks."""

    __slots__ = ()

    async def write_line(
        self,
        session_name: str,
        pid: int,
        stream: Literal["stdout", "stderr"],
        line: str,
    ) -> None:
        return None

    async def write_event(self, session_name: str, event: SessionEvent) -> None:
        return None

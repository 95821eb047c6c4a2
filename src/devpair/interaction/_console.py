"""Terminal implementation of the interaction surface.

Prompts are rendered with rich and answered on stdin in a worker thread so
the event loop keeps supervising while a question is pending. Only one
prompt is shown at a time. Cancelling the waiting task abandons the
worker thread, so a prompt nobody answers never blocks shutdown.
"""

from collections.abc import Sequence
from typing import final

import anyio
import anyio.to_thread
import pyperclip
from rich.console import Console
from rich.markup import escape
from rich.prompt import Prompt

from ._protocol import NotifyLevel

_LEVEL_STYLES: dict[NotifyLevel, str] = {
    "info": "bold cyan",
    "warning": "bold yellow",
    "error": "bold red",
}


def match_choice(answer: str, options: Sequence[str]) -> str | None:
    """Map a typed answer to an option.

    Accepts the option's 1-based number or its text (case-insensitive).

    Returns:
        The matching option, or None when nothing matches.
    """
    answer = answer.strip()
    if answer.isdigit():
        index = int(answer) - 1
        if 0 <= index < len(options):
            return options[index]
        return None

    lowered = answer.lower()
    for option in options:
        if option.lower() == lowered:
            return option
    return None


@final
class ConsoleInteractionHost:
    """InteractionHost backed by a rich console, stdin and pyperclip."""

    __slots__ = ("_console", "_lock")

    def __init__(self, console: Console | None = None) -> None:
        self._console = console or Console()
        self._lock = anyio.Lock()

    def _ask(self, message: str, options: Sequence[str], style: str) -> str | None:
        self._console.print(f"[{style}]{escape(message)}[/]")
        for number, option in enumerate(options, start=1):
            self._console.print(f"  [bold]{number}[/]) {escape(option)}")

        while True:
            try:
                answer = Prompt.ask(
                    "Choose (empty to dismiss)", default="", console=self._console
                )
            except (EOFError, KeyboardInterrupt):
                return None
            if not answer.strip():
                return None
            choice = match_choice(answer, options)
            if choice is not None:
                return choice
            self._console.print(f"[red]Unknown choice:[/] {escape(answer)}")

    async def confirm(self, message: str, options: Sequence[str]) -> str | None:
        async with self._lock:
            return await anyio.to_thread.run_sync(
                self._ask,
                message,
                tuple(options),
                _LEVEL_STYLES["warning"],
                abandon_on_cancel=True,
            )

    async def notify(
        self,
        message: str,
        actions: Sequence[str] = (),
        *,
        level: NotifyLevel = "info",
    ) -> str | None:
        style = _LEVEL_STYLES[level]
        if not actions:
            self._console.print(f"[{style}]{escape(message)}[/]")
            return None
        async with self._lock:
            return await anyio.to_thread.run_sync(
                self._ask, message, tuple(actions), style, abandon_on_cancel=True
            )

    async def read_clipboard(self) -> str:
        try:
            return await anyio.to_thread.run_sync(pyperclip.paste)
        except pyperclip.PyperclipException as e:
            self._console.print(f"[yellow]Clipboard unavailable:[/] {e}")
            return ""

    async def write_clipboard(self, text: str) -> None:
        try:
            await anyio.to_thread.run_sync(pyperclip.copy, text)
        except pyperclip.PyperclipException as e:
            self._console.print(f"[yellow]Clipboard unavailable:[/] {e}")

"""Shared test fixtures for devpair tests."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

import anyio.lowlevel
import pytest
import structlog
from rich.console import Console
from structlog.testing import CapturingLogger
from structlog.typing import FilteringBoundLogger

from devpair.config import Config
from devpair.supervisor import SessionClosedCallback


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class LogCapture:
    """A filtering logger whose calls are recorded instead of rendered."""

    raw: CapturingLogger
    logger: FilteringBoundLogger

    @property
    def events(self) -> list[str]:
        return [str(call.kwargs.get("event")) for call in self.raw.calls]

    def find(self, event: str) -> list[dict[str, object]]:
        """Return the keyword payload of every call that logged ``event``."""
        return [dict(call.kwargs) for call in self.raw.calls if call.kwargs.get("event") == event]


@pytest.fixture
def log_capture() -> LogCapture:
    raw = CapturingLogger()
    logger: FilteringBoundLogger = structlog.wrap_logger(
        raw,
        processors=[],
        wrapper_class=structlog.make_filtering_bound_logger(logging.DEBUG),
        context_class=dict,
    )
    return LogCapture(raw=raw, logger=logger)


# ---------------------------------------------------------------------------
# Session and interaction doubles
# ---------------------------------------------------------------------------


@dataclass(eq=False)
class FakeSession:
    """Records commands instead of running them."""

    name: str
    cwd: Path
    sent: list[str] = field(default_factory=list)
    disposed: bool = False

    async def send(self, command: str) -> None:
        self.sent.append(command)

    async def dispose(self) -> None:
        self.disposed = True


class FakeSessionHost:
    """Session host whose sessions only close when a test says so."""

    def __init__(self) -> None:
        self.opened: list[FakeSession] = []
        self._listeners: list[SessionClosedCallback] = []

    async def open(self, name: str, cwd: Path) -> FakeSession:
        session = FakeSession(name=name, cwd=cwd)
        self.opened.append(session)
        return session

    def add_close_listener(self, callback: SessionClosedCallback) -> None:
        self._listeners.append(callback)

    async def close(self, session: FakeSession) -> None:
        """Report ``session`` as closed without a dispose."""
        for callback in list(self._listeners):
            await callback(session)

    def named(self, name: str) -> list[FakeSession]:
        return [session for session in self.opened if session.name == name]


@dataclass(frozen=True, slots=True)
class Notification:
    message: str
    actions: tuple[str, ...]
    level: str


class FakeInteraction:
    """Answers prompts from a table of message fragments.

    A prompt whose message contains a key of ``answers`` gets that answer;
    every other prompt is dismissed (None).
    """

    def __init__(
        self,
        answers: dict[str, str | None] | None = None,
        *,
        clipboard: str = "",
    ) -> None:
        self.answers: dict[str, str | None] = dict(answers or {})
        self.clipboard = clipboard
        self.confirms: list[tuple[str, tuple[str, ...]]] = []
        self.notifications: list[Notification] = []

    def _answer(self, message: str) -> str | None:
        for fragment, answer in self.answers.items():
            if fragment in message:
                return answer
        return None

    async def confirm(self, message: str, options: Sequence[str]) -> str | None:
        self.confirms.append((message, tuple(options)))
        return self._answer(message)

    async def notify(
        self,
        message: str,
        actions: Sequence[str] = (),
        *,
        level: str = "info",
    ) -> str | None:
        self.notifications.append(Notification(message, tuple(actions), level))
        if not actions:
            return None
        return self._answer(message)

    async def read_clipboard(self) -> str:
        return self.clipboard

    async def write_clipboard(self, text: str) -> None:
        self.clipboard = text

    def messages(self, level: str | None = None) -> list[str]:
        return [n.message for n in self.notifications if level is None or n.level == level]


class RecordingSleep:
    """Stands in for ``anyio.sleep``: records the delay and yields once."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)
        await anyio.lowlevel.checkpoint()


async def settle(rounds: int = 50) -> None:
    """Yield to the event loop until spawned tasks have run."""
    for _ in range(rounds):
        await anyio.lowlevel.checkpoint()


@pytest.fixture
def session_host() -> FakeSessionHost:
    return FakeSessionHost()


@pytest.fixture
def interaction() -> FakeInteraction:
    return FakeInteraction()


# ---------------------------------------------------------------------------
# Workspaces
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Workspace:
    """A temporary workspace with a frontend and a backend directory."""

    root: Path
    frontend: Path
    backend: Path

    def config(self, **overrides: object) -> Config:
        """Build a Config rooted here with zero launch delays."""
        data: dict[str, object] = {
            "frontend": {"path": "web", "framework": "react-vite"},
            "backend": {"path": "api", "framework": "spring-boot"},
            "supervisor": {"launch_delay": 0, "launch_stagger": 0},
        }
        data.update(overrides)
        return Config.from_dict(data, workspace_root=self.root)


@pytest.fixture
def workspace(tmp_path: Path) -> Workspace:
    """Create a workspace whose services both have installed dependencies.

    Structure:
        tmp_path/
            web/
                package.json
                node_modules/
            api/
                pom.xml
                target/
    """
    frontend = tmp_path / "web"
    frontend.mkdir()
    (frontend / "package.json").write_text('{"scripts": {"dev": "vite"}}')
    (frontend / "node_modules").mkdir()

    backend = tmp_path / "api"
    backend.mkdir()
    (backend / "pom.xml").write_text("<project />")
    (backend / "target").mkdir()

    return Workspace(root=tmp_path, frontend=frontend, backend=backend)


@pytest.fixture
def console() -> Console:
    return Console(
        width=70,
        force_terminal=True,
        highlight=False,
        color_system=None,
        legacy_windows=False,
    )

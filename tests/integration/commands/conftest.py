from collections.abc import Callable
from pathlib import Path

import pytest

from devpair.cli import CLIContext, app

RunCLI = Callable[..., int]


@pytest.fixture(autouse=True)
def isolated_cli(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the user config and DEVPAIR_* variables out of CLI runs."""
    user_path = tmp_path / "user" / "config.toml"
    monkeypatch.setattr("devpair.config._discovery.get_user_config_path", lambda: user_path)
    for name in ("DEVPAIR_CONTROL_PORT", "DEVPAIR_DEBUG", "DEVPAIR_LOG_LEVEL", "DEVPAIR_USE_DOCKER"):
        monkeypatch.delenv(name, raising=False)
    CLIContext.reset()


@pytest.fixture
def devpair_cli() -> RunCLI:
    """Run the devpair CLI in-process and return its exit code."""

    def run(*args: str) -> int:
        try:
            app.meta(list(args))
        except SystemExit as e:
            return int(e.code or 0)
        return 0

    return run

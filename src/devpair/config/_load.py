"""Config loading for CLI entry points."""

import os
import sys
from pathlib import Path
from typing import Never

from devpair.exceptions import ConfigError

from ._models import Config

STRICT_ENV = "DEVPAIR_STRICT_CONFIG"


def _fail(message: str) -> Never:
    print(f"Error: {message}", file=sys.stderr)  # noqa: T201
    sys.exit(1)


def safe_load_config(
    *,
    config_path: Path | None = None,
    workspace_root: Path | None = None,
    cli_overrides: dict[str, object] | None = None,
) -> tuple[Config, str | None]:
    """Load configuration without letting a bad file stop the CLI.

    A broken layer prints a warning and yields built-in defaults, so
    commands like ``config show`` still run and can report the problem.
    With ``DEVPAIR_STRICT_CONFIG=1`` the process exits instead. A
    ``--config`` path that does not exist always exits, since the user
    named it explicitly.

    Returns:
        The config and, when loading failed, the error message.
    """
    if config_path is not None and not config_path.exists():
        _fail(f"Config file not found: {config_path}")

    try:
        if config_path is not None:
            return Config.from_file(config_path), None
        config = Config.load(
            workspace_root=workspace_root,
            include_env=True,
            include_cli=cli_overrides is not None,
            cli_overrides=cli_overrides,
        )
    except (ConfigError, OSError) as e:
        if os.environ.get(STRICT_ENV, "0") == "1":
            _fail(str(e))
        print(f"Warning: Failed to load config: {e}", file=sys.stderr)  # noqa: T201
        return Config.from_dict({}, workspace_root=workspace_root), str(e)
    return config, None

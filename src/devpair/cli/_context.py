# ruff: noqa: TC003  # Path needed at runtime for dataclass field
"""Per-invocation CLI state.

The meta command loads configuration once and publishes it here; commands
read it back with ``CLIContext.get_current()`` instead of reloading.
"""

import contextvars
from dataclasses import dataclass, field
from pathlib import Path

from devpair.config import Config

_current: contextvars.ContextVar["CLIContext | None"] = contextvars.ContextVar(
    "devpair_cli_context", default=None
)


@dataclass(frozen=True, slots=True)
class CLIContext:
    """Options shared by every command of one CLI run.

    Attributes:
        config: The merged configuration, or defaults when loading failed.
        verbose: ``--verbose`` was given.
        workspace_root: Workspace the config came from, or ``--workspace``.
        config_error: Why loading failed, if it did.
    """

    config: Config = field(repr=False)
    verbose: bool = False
    workspace_root: Path | None = None
    config_error: str | None = None

    @classmethod
    def get_current(cls) -> "CLIContext":
        """Return the published context, or one holding default config."""
        return _current.get() or cls(config=Config.from_dict({}))

    @classmethod
    def set_current(cls, ctx: "CLIContext") -> None:
        _ = _current.set(ctx)

    @classmethod
    def reset(cls) -> None:
        _ = _current.set(None)

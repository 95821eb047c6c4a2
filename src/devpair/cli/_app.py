"""The command-line interface for devpair."""
# ruff: noqa: TC003  # Path needed at runtime for cyclopts parameter parsing

from pathlib import Path
from typing import Annotated

from cyclopts import App, Parameter

from devpair.config import safe_load_config

from ._commands import register_commands
from ._context import CLIContext

app = App(
    name="devpair",
    help="Launch and supervise a frontend/backend service pair.",
    help_on_error=True,
)
register_commands(app)


@app.meta.default
def devpair_main(
    *tokens: Annotated[str, Parameter(show=False, allow_leading_hyphen=True)],
    verbose: Annotated[bool, Parameter(help="Log at debug level")] = False,
    config: Annotated[
        Path | None, Parameter(name="--config", help="Path to a devpair.toml file")
    ] = None,
    workspace: Annotated[
        Path | None, Parameter(name="--workspace", help="Path to the workspace root")
    ] = None,
) -> None:
    """Launch the devpair CLI with global options.

    Args:
        tokens: Command tokens to pass to subcommands.
        verbose: Log at debug level.
        config: Explicit path to a config file.
        workspace: Workspace root (defaults to the nearest devpair.toml).
    """
    cli_overrides: dict[str, object] | None = None
    if verbose:
        cli_overrides = {"logging": {"level": "debug"}}

    loaded_config, config_error = safe_load_config(
        config_path=config,
        workspace_root=workspace,
        cli_overrides=cli_overrides,
    )

    ctx = CLIContext(
        config=loaded_config,
        verbose=verbose,
        workspace_root=loaded_config.workspace_root or workspace,
        config_error=config_error,
    )
    CLIContext.set_current(ctx)

    try:
        app(tokens)
    finally:
        CLIContext.reset()


def main() -> None:
    """Default entrypoint for the `devpair` CLI."""
    app.meta()


if __name__ == "__main__":
    main()

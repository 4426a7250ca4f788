"""
Main CLI application definition.

cliprogress: animated progress bars for shell commands.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import typer

from cliprogress.cli import utils as cli_utils
from cliprogress.cli.commands import config as config_commands
from cliprogress.cli.commands import run as run_commands
from cliprogress.config.settings import ConfigService
from cliprogress.utils.logging import configure_from_settings

app = typer.Typer(
    name="cliprogress",
    help="""cliprogress: animated progress bars for shell commands

    \b
    COMMANDS:
      run estimate - Bar eased over an expected duration
      run track    - Bar driven by the command's own output
      config show  - Print the effective configuration

    \b
    EXAMPLES:
      cliprogress run estimate "docker compose up -d" -e 26000
      cliprogress run track "make -j4" --total 12 --step-pattern "^CC "
      cliprogress run track "./download.sh" --percent-pattern "(\\d+)%"
    """,
    no_args_is_help=True,
)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    config: Path | None = typer.Option(
        None, "--config", "-c", help="Path to config YAML"
    ),
    color: bool | None = typer.Option(
        None, "--color/--no-color", help="Enable or disable color output"
    ),
    verbose: int = typer.Option(
        0, "--verbose", "-v", count=True, help="Increase verbosity (stackable)"
    ),
    quiet: int = typer.Option(
        0, "--quiet", "-q", count=True, help="Decrease verbosity (stackable)"
    ),
):
    """Global options and configuration bootstrap."""

    cli_overrides: dict[str, Any] = {"general": {}}
    if color is not None:
        cli_overrides["general"]["color_enabled"] = color

    config_service = ConfigService()
    try:
        settings = cli_utils.load_settings_with_cli_overrides(
            config_service=config_service,
            config_path=config,
            cli_overrides=cli_overrides,
        )
        # -v/-q shift whatever level the merged config settled on
        if verbose or quiet:
            cli_overrides["general"]["verbosity"] = cli_utils.compute_verbosity(
                settings.general.verbosity, verbose, quiet
            )
            settings = cli_utils.load_settings_with_cli_overrides(
                config_service=config_service,
                config_path=config,
                cli_overrides=cli_overrides,
            )
    except ValueError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=2)

    configure_from_settings(settings)
    ctx.obj = {"settings": settings}

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


@app.command()
def version():
    """Show version information."""
    from cliprogress import __version__

    typer.echo(f"cliprogress version {__version__}")


app.add_typer(config_commands.app, name="config")
app.add_typer(run_commands.app, name="run")


if __name__ == "__main__":
    app()

"""Run command implementation - shell commands behind a progress bar.

This module provides:
- estimate: bar eased over an expected duration
- track: bar driven by step or percentage patterns in the output
"""

from __future__ import annotations

import asyncio
import re
from collections.abc import Awaitable, Callable
from pathlib import Path

import typer
from rich.console import Console

from cliprogress.cli.utils import get_settings
from cliprogress.config.settings import Settings
from cliprogress.core.engine import ProgressEngine, create_progress
from cliprogress.core.exceptions import CommandFailed
from cliprogress.core.tracking import percent_parser, step_observer
from cliprogress.utils.logging import get_logger

app = typer.Typer(name="run", help="Run a shell command behind a progress bar")

logger = get_logger(__name__)


def _build_engine(settings: Settings) -> ProgressEngine:
    no_color = not settings.general.color_enabled
    return create_progress(
        settings.progress,
        console=Console(highlight=False, no_color=no_color),
        error_console=Console(stderr=True, highlight=False, no_color=no_color),
    )


def _execute(run: Callable[[], Awaitable[object]]) -> None:
    try:
        asyncio.run(run())
    except CommandFailed as exc:
        logger.debug("cli_command_failed", exit_code=exc.exit_code, command=exc.command)
        raise typer.Exit(code=exc.exit_code or 1)


@app.command()
def estimate(
    ctx: typer.Context,
    command: str = typer.Argument(..., help="Shell command to run"),
    estimate_ms: float = typer.Option(
        ..., "--estimate-ms", "-e", min=0, help="Expected duration in milliseconds"
    ),
    label: str | None = typer.Option(None, "--label", "-l", help="Text next to the bar"),
    cwd: Path | None = typer.Option(None, "--cwd", help="Working directory"),
    done_label: str | None = typer.Option(None, "--done-label", help="Label on success"),
    tolerate_failure: bool = typer.Option(
        False, "--tolerate-failure", help="Treat a non-zero exit as success"
    ),
) -> None:
    """Run COMMAND with a bar that fills over the estimated duration."""

    engine = _build_engine(get_settings(ctx.obj))
    _execute(
        lambda: engine.run_estimated(
            label or command,
            command,
            estimate_ms,
            cwd=cwd,
            done_label=done_label,
            tolerate_failure=(lambda: True) if tolerate_failure else None,
        )
    )


@app.command()
def track(
    ctx: typer.Context,
    command: str = typer.Argument(..., help="Shell command to run"),
    label: str | None = typer.Option(None, "--label", "-l", help="Text next to the bar"),
    cwd: Path | None = typer.Option(None, "--cwd", help="Working directory"),
    total: int | None = typer.Option(None, "--total", "-t", min=1, help="Total number of steps"),
    step_pattern: str | None = typer.Option(
        None, "--step-pattern", help="Regex; each match in the output counts one step"
    ),
    percent_pattern: str | None = typer.Option(
        None,
        "--percent-pattern",
        help="Regex whose first group is a 0-100 percentage (e.g. '(\\d+)%')",
    ),
    done_label: str | None = typer.Option(None, "--done-label", help="Label on success"),
    tolerate_failure: bool = typer.Option(
        False, "--tolerate-failure", help="Treat a non-zero exit as success"
    ),
) -> None:
    """Run COMMAND with a bar driven by what it prints."""

    if step_pattern and total is None:
        raise typer.BadParameter("--step-pattern needs --total", param_hint="--step-pattern")

    try:
        parse_progress = percent_parser(percent_pattern) if percent_pattern else None
    except (ValueError, re.error) as exc:
        raise typer.BadParameter(str(exc), param_hint="--percent-pattern")
    try:
        on_output = step_observer(step_pattern) if step_pattern else None
    except re.error as exc:
        raise typer.BadParameter(str(exc), param_hint="--step-pattern")

    engine = _build_engine(get_settings(ctx.obj))
    _execute(
        lambda: engine.run_tracked(
            label or command,
            command,
            cwd=cwd,
            total=total,
            on_output=on_output,
            parse_progress=parse_progress,
            done_label=done_label,
            tolerate_failure=(lambda: True) if tolerate_failure else None,
        )
    )

"""Config command implementation."""

from __future__ import annotations

import json

import typer
import yaml

from cliprogress.cli.utils import get_settings

app = typer.Typer(name="config", help="Configuration management")


@app.command()
def show(
    ctx: typer.Context,
    format: str = typer.Option("yaml", help="Output format: yaml or json"),
) -> None:
    """Show the effective configuration after all layers are merged."""

    data = get_settings(ctx.obj).model_dump(mode="json")

    if format.lower() == "json":
        typer.echo(json.dumps(data, indent=2, ensure_ascii=False))
    else:
        typer.echo(yaml.safe_dump(data, sort_keys=False, allow_unicode=True))

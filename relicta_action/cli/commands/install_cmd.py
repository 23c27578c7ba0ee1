from __future__ import annotations

from pathlib import Path

import typer

from relicta_action.cli.commands._helpers import exit_on_action_error
from relicta_action.cli.context import build_context
from relicta_action.core.inputs import parse_plugin_list
from relicta_action.core.result import Err


def install(
    version: str = typer.Option("latest", "--version", "-v", help="Release tag or 'latest'."),
    plugins: str = typer.Option("", "--plugins", help="Comma-separated plugin names."),
    settings: Path | None = typer.Option(
        None,
        "--settings",
        help="TOML file overriding release coordinates, HTTP and paths.",
        exists=True,
        dir_okay=False,
    ),
) -> None:
    """Install relicta (and plugins) without running it; print the binary path."""
    ctx = build_context(settings)
    result = ctx.action_service().install(version, parse_plugin_list(plugins))
    if isinstance(result, Err):
        exit_on_action_error(result.error, ctx.console)

    typer.echo(str(result.value.binary))

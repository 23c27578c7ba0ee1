from __future__ import annotations

from pathlib import Path

import typer

from relicta_action.cli.commands._helpers import exit_on_action_error
from relicta_action.cli.context import build_context
from relicta_action.core.result import Err


def run(
    settings: Path | None = typer.Option(
        None,
        "--settings",
        help="TOML file overriding release coordinates, HTTP and paths.",
        exists=True,
        dir_okay=False,
    ),
) -> None:
    """Run the action: read step inputs, install relicta, run the command."""
    ctx = build_context(settings)
    result = ctx.action_service().run()
    if isinstance(result, Err):
        exit_on_action_error(result.error, ctx.console)

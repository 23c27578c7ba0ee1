"""Shared helpers for CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING, NoReturn

import typer

from relicta_action.output.errors import action_error_exit_code, print_action_error

if TYPE_CHECKING:
    from relicta_action.core.action_errors import ActionError
    from relicta_action.output.console import ConsoleProtocol


def exit_on_action_error(error: ActionError, console: ConsoleProtocol) -> NoReturn:
    """Report a fatal error and exit with its code.

    Replaces the common pattern:
        print_action_error(error, console)
        raise typer.Exit(code=action_error_exit_code(error))
    """
    print_action_error(error, console)
    raise typer.Exit(code=action_error_exit_code(error))

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import typer

from relicta_action.ci.workflow import WorkflowFiles
from relicta_action.core.errors import ErrorCode
from relicta_action.core.result import Err
from relicta_action.core.settings import Settings, load_settings
from relicta_action.output.console import ConsoleProtocol, RichConsole, WorkflowConsole
from relicta_action.platform.environment import HostEnvironment, ProcessEnvironment
from relicta_action.services.action import ActionService
from relicta_action.tools.http import RealHttpClient


@dataclass(frozen=True, slots=True)
class CLIContext:
    host: HostEnvironment
    settings: Settings
    console: ConsoleProtocol
    workflow: WorkflowFiles

    def action_service(self) -> ActionService:
        http = RealHttpClient(
            timeout=self.settings.http_timeout,
            attempts=self.settings.download_attempts,
        )
        return ActionService(
            host=self.host,
            settings=self.settings,
            http=http,
            console=self.console,
            workflow=self.workflow,
        )


def _console() -> ConsoleProtocol:
    if os.environ.get("GITHUB_ACTIONS") == "true":
        return WorkflowConsole(debug=os.environ.get("RUNNER_DEBUG") == "1")
    return RichConsole(verbose=os.environ.get("RELICTA_ACTION_DEBUG") == "1")


def build_context(settings_path: Path | None = None) -> CLIContext:
    console = _console()

    settings_result = load_settings(settings_path, os.environ)
    if isinstance(settings_result, Err):
        console.error(settings_result.error.message)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    return CLIContext(
        host=ProcessEnvironment(),
        settings=settings_result.value,
        console=console,
        workflow=WorkflowFiles(os.environ),
    )

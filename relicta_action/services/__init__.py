"""Application services for the relicta action.

Services implement the workflow of the action, coordinating between the
domain layer (core/) and infrastructure (platform/, tools/, ci/).
"""

from relicta_action.services.action import ActionResult, ActionService, InstallResult
from relicta_action.services.install import InstallService, PluginFailure, PluginReport
from relicta_action.services.outputs import ActionOutputs, OutputParser, RegexOutputParser
from relicta_action.services.runner import (
    CommandExecutor,
    ReleaseRunner,
    SubprocessExecutor,
)

__all__ = [
    # Orchestration
    "ActionResult",
    "ActionService",
    "InstallResult",
    # Install
    "InstallService",
    "PluginFailure",
    "PluginReport",
    # Outputs
    "ActionOutputs",
    "OutputParser",
    "RegexOutputParser",
    # Runner
    "CommandExecutor",
    "ReleaseRunner",
    "SubprocessExecutor",
]

"""The action: read inputs, install relicta, run it, publish outputs."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from relicta_action.core.action_errors import ActionError, WorkflowFileError
from relicta_action.core.inputs import read_inputs
from relicta_action.core.result import Err, Ok, Result
from relicta_action.platform.detection import HostPlatform, detect_host_platform
from relicta_action.services.install import InstallService, PluginReport
from relicta_action.services.outputs import ActionOutputs, OutputParser
from relicta_action.services.runner import CommandExecutor, ReleaseRunner, SubprocessExecutor
from relicta_action.tools.cache import ToolCache
from relicta_action.tools.pipeline import ArtifactPipeline

if TYPE_CHECKING:
    from relicta_action.ci.workflow import WorkflowFiles
    from relicta_action.core.settings import Settings
    from relicta_action.output.console import ConsoleProtocol
    from relicta_action.platform.environment import HostEnvironment
    from relicta_action.tools.http import HttpClient

__all__ = ["ActionService", "ActionResult", "InstallResult"]


@dataclass(frozen=True, slots=True)
class InstallResult:
    binary: Path
    plugins: PluginReport


@dataclass(frozen=True, slots=True)
class ActionResult:
    binary: Path
    plugins: PluginReport
    outputs: ActionOutputs


class ActionService:
    def __init__(
        self,
        *,
        host: HostEnvironment,
        settings: Settings,
        http: HttpClient,
        console: ConsoleProtocol,
        workflow: WorkflowFiles,
        executor: CommandExecutor | None = None,
        parser: OutputParser | None = None,
    ) -> None:
        self._host = host
        self._settings = settings
        self._http = http
        self._console = console
        self._workflow = workflow
        self._executor = executor if executor is not None else SubprocessExecutor(console)
        self._parser = parser

    def _installer(self, platform: HostPlatform) -> InstallService:
        return InstallService(
            settings=self._settings,
            platform=platform,
            pipeline=ArtifactPipeline(self._http, self._console, self._settings.temp_dir),
            cache=ToolCache(self._settings.tool_cache_dir),
            console=self._console,
        )

    def install(
        self, version: str, plugins: tuple[str, ...] = ()
    ) -> Result[InstallResult, ActionError]:
        """Install the binary and plugins, and put the binary on PATH."""
        platform = detect_host_platform(self._host)
        if isinstance(platform, Err):
            return platform

        installer = self._installer(platform.value)
        binary = installer.install_main(version)
        if isinstance(binary, Err):
            return binary
        self._console.success(f"{self._settings.tool} installed at: {binary.value}")
        on_path = self._workflow.add_path(binary.value.parent)
        if isinstance(on_path, Err):
            return on_path

        report = installer.install_plugins(version, plugins, binary.value)
        return Ok(InstallResult(binary=binary.value, plugins=report))

    def run(self) -> Result[ActionResult, ActionError]:
        """Run the whole action from the step inputs.

        Inputs are validated before any download starts. Outputs are written
        only after every step succeeded.
        """
        inputs = read_inputs(self._host.environ)
        if isinstance(inputs, Err):
            return inputs
        args = inputs.value

        self._console.info("Starting relicta action...")
        self._console.info(f"Version: {args.version}")
        self._console.info(f"Command: {args.command}")
        self._console.info(f"Dry run: {str(args.dry_run).lower()}")

        installed = self.install(args.version, args.plugins)
        if isinstance(installed, Err):
            return installed

        runner = ReleaseRunner(
            settings=self._settings,
            executor=self._executor,
            console=self._console,
            base_env=self._host.environ,
            parser=self._parser,
        )
        outputs = runner.run(installed.value.binary, args)
        if isinstance(outputs, Err):
            return outputs

        published = self._publish(outputs.value)
        if isinstance(published, Err):
            return published
        self._console.success("relicta action completed successfully")
        return Ok(
            ActionResult(
                binary=installed.value.binary,
                plugins=installed.value.plugins,
                outputs=outputs.value,
            )
        )

    def _publish(self, outputs: ActionOutputs) -> Result[None, WorkflowFileError]:
        labels = {
            "version": "Version",
            "release-url": "Release URL",
            "tag-name": "Tag",
            "release-id": "Release ID",
        }
        for name, value in outputs.as_step_outputs().items():
            written = self._workflow.set_output(name, value)
            if isinstance(written, Err):
                return written
            self._console.info(f"{labels[name]}: {value}")
        return Ok(None)

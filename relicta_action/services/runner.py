"""Run relicta subcommands.

The requested command decides which subcommands run:

- full: plan, bump, notes, approve, publish (stops at the first failure)
- plan / bump / notes / approve / publish: that subcommand alone
- anything else: split on whitespace and passed to relicta verbatim

Every invocation gets the same flags (``--config``, ``--dry-run``) and
environment (``GITHUB_TOKEN``, dry-run marker). Output of ``publish`` is
scraped into step outputs.
"""

from __future__ import annotations

import contextlib
import os
import tempfile
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from relicta_action.core.action_errors import CommandFailed
from relicta_action.core.result import Err, Ok, Result
from relicta_action.platform.process import stream
from relicta_action.services.outputs import ActionOutputs, OutputParser, RegexOutputParser

if TYPE_CHECKING:
    from relicta_action.core.inputs import ActionInputs
    from relicta_action.core.settings import Settings
    from relicta_action.output.console import ConsoleProtocol

__all__ = [
    "AUTO_APPROVE_FLAG",
    "FULL_SEQUENCE",
    "CommandExecutor",
    "ReleaseRunner",
    "Step",
    "SubprocessExecutor",
    "build_env",
    "common_flags",
    "plan_steps",
]

FULL_SEQUENCE = ("plan", "bump", "notes", "approve", "publish")
AUTO_APPROVE_FLAG = "--yes"
_SINGLE_COMMANDS = frozenset(FULL_SEQUENCE)


@dataclass(frozen=True, slots=True)
class Step:
    """One relicta invocation.

    Attributes:
        args: Arguments after the binary path
        scrape: Parse stdout into step outputs
    """

    args: tuple[str, ...]
    scrape: bool = False

    @property
    def name(self) -> str:
        return self.args[0] if self.args else ""


def _subcommand(name: str, common: tuple[str, ...], auto_approve: bool) -> Step:
    extra = (AUTO_APPROVE_FLAG,) if name == "approve" and auto_approve else ()
    return Step(args=(name, *extra, *common), scrape=name == "publish")


def plan_steps(command: str, common: tuple[str, ...], *, auto_approve: bool) -> tuple[Step, ...]:
    """Translate the requested command into relicta invocations.

    Known command names match case-insensitively.

    Example:
        plan_steps("approve", ("--dry-run",), auto_approve=True)
        -> (Step(("approve", "--yes", "--dry-run")),)
    """
    name = command.strip().lower()
    if name == "full":
        return tuple(_subcommand(step, common, auto_approve) for step in FULL_SEQUENCE)
    if name in _SINGLE_COMMANDS:
        return (_subcommand(name, common, auto_approve),)
    return (Step(args=(*command.split(), *common)),)


def common_flags(config_path: str | None, dry_run: bool) -> tuple[str, ...]:
    flags: list[str] = []
    if config_path:
        flags += ["--config", config_path]
    if dry_run:
        flags.append("--dry-run")
    return tuple(flags)


def build_env(
    base: Mapping[str, str], *, token: str, dry_run: bool, dry_run_env: str
) -> dict[str, str]:
    """Subprocess environment: the inherited one plus the token and dry-run marker."""
    env = dict(base)
    env["GITHUB_TOKEN"] = token
    if dry_run:
        env[dry_run_env] = "true"
    return env


class CommandExecutor(Protocol):
    """Runs one relicta invocation and returns its stdout."""

    def execute(
        self,
        binary: Path,
        args: tuple[str, ...],
        *,
        env: Mapping[str, str],
        cwd: Path,
    ) -> Result[str, CommandFailed]: ...


class SubprocessExecutor:
    """Executor spawning the binary, streaming its output to the console.

    stdout lines are printed as they arrive, stderr lines become warnings.
    Each invocation is wrapped in a console group.
    """

    def __init__(self, console: ConsoleProtocol, *, display_name: str = "relicta") -> None:
        self._console = console
        self._display_name = display_name

    def execute(
        self,
        binary: Path,
        args: tuple[str, ...],
        *,
        env: Mapping[str, str],
        cwd: Path,
    ) -> Result[str, CommandFailed]:
        self._console.start_group(f"Running: {self._display_name} {' '.join(args)}")
        try:
            result = stream(
                [str(binary), *args],
                cwd=cwd,
                env=env,
                on_stdout=self._console.print,
                on_stderr=self._console.warning,
            )
        finally:
            self._console.end_group()

        if isinstance(result, Err):
            error = result.error
            return Err(
                CommandFailed(args=args, exit_code=error.returncode, reason=error.message or None)
            )
        return result


class ReleaseRunner:
    """Runs the requested command against an installed binary.

    Usage:
        runner = ReleaseRunner(settings=settings, executor=SubprocessExecutor(console),
                               console=console, base_env=os.environ)
        result = runner.run(binary, inputs)
        if is_ok(result):
            print(result.value.version)
    """

    def __init__(
        self,
        *,
        settings: Settings,
        executor: CommandExecutor,
        console: ConsoleProtocol,
        base_env: Mapping[str, str],
        parser: OutputParser | None = None,
    ) -> None:
        self._settings = settings
        self._executor = executor
        self._console = console
        self._base_env = base_env
        self._parser = parser if parser is not None else RegexOutputParser()

    @contextlib.contextmanager
    def _config_path(self, inputs: ActionInputs) -> Iterator[str | None]:
        """Yield the --config value; inline content is written to a temp file.

        The temp file is removed however the block exits.
        """
        if inputs.config_content:
            self._settings.temp_dir.mkdir(parents=True, exist_ok=True)
            fd, name = tempfile.mkstemp(
                prefix="release-config-", suffix=".yaml", dir=self._settings.temp_dir
            )
            path = Path(name)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    handle.write(inputs.config_content)
                self._console.info(f"Using inline configuration (written to {path})")
                yield str(path)
            finally:
                try:
                    path.unlink(missing_ok=True)
                    self._console.debug(f"Cleaned up temporary config file: {path}")
                except OSError as e:
                    self._console.warning(f"Failed to clean up temporary config file: {e}")
            return

        if inputs.config:
            self._console.info(f"Using configuration file: {inputs.config}")
        else:
            self._console.info(
                "No configuration file specified - using defaults with auto-detection"
            )
        yield inputs.config

    def run(self, binary: Path, inputs: ActionInputs) -> Result[ActionOutputs, CommandFailed]:
        """Run every step of the requested command in order.

        Returns:
            Ok with outputs scraped from publish (empty if publish did not run),
            or Err with the first failing step
        """
        outputs = ActionOutputs()
        with self._config_path(inputs) as config_path:
            common = common_flags(config_path, inputs.dry_run)
            env = build_env(
                self._base_env,
                token=inputs.github_token,
                dry_run=inputs.dry_run,
                dry_run_env=self._settings.dry_run_env,
            )
            cwd = Path(inputs.working_directory)

            for step in plan_steps(inputs.command, common, auto_approve=inputs.auto_approve):
                result = self._executor.execute(binary, step.args, env=env, cwd=cwd)
                if isinstance(result, Err):
                    return result
                if step.scrape:
                    outputs = self._parser.parse(result.value)
        return Ok(outputs)

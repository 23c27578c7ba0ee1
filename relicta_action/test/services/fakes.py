"""Test doubles for service tests."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from relicta_action.core.action_errors import CommandFailed
from relicta_action.core.result import Err, Ok, Result


@dataclass(frozen=True, slots=True)
class Invocation:
    binary: Path
    args: tuple[str, ...]
    env: dict[str, str]
    cwd: Path
    config_text: str | None


def _no_invocations() -> list[Invocation]:
    return []


def _no_outputs() -> dict[str, str]:
    return {}


@dataclass
class FakeExecutor:
    """Records invocations instead of spawning relicta.

    Attributes:
        stdout: Canned stdout per subcommand name
        fail: Subcommand names that exit with code 1
        raise_on: Subcommand name that raises RuntimeError
    """

    stdout: dict[str, str] = field(default_factory=_no_outputs)
    fail: frozenset[str] = frozenset()
    raise_on: str | None = None
    invocations: list[Invocation] = field(default_factory=_no_invocations)

    def execute(
        self,
        binary: Path,
        args: tuple[str, ...],
        *,
        env: Mapping[str, str],
        cwd: Path,
    ) -> Result[str, CommandFailed]:
        config_text: str | None = None
        if "--config" in args:
            config = Path(args[args.index("--config") + 1])
            if config.is_file():
                config_text = config.read_text(encoding="utf-8")
        self.invocations.append(Invocation(binary, args, dict(env), cwd, config_text))

        name = args[0] if args else ""
        if name == self.raise_on:
            raise RuntimeError(f"{name} exploded")
        if name in self.fail:
            return Err(CommandFailed(args=args, exit_code=1))
        return Ok(self.stdout.get(name, ""))

    @property
    def commands(self) -> list[tuple[str, ...]]:
        return [inv.args for inv in self.invocations]

    @property
    def names(self) -> list[str]:
        return [inv.args[0] for inv in self.invocations]

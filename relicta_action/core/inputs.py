"""Action inputs.

GitHub Actions exposes each ``with:`` input of a step as an ``INPUT_<NAME>``
environment variable (name uppercased, spaces replaced by underscores,
hyphens kept). Inputs are read once, validated, and frozen into
``ActionInputs``.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from .action_errors import InvalidInput, MissingToken
from .result import Err, Ok, Result

__all__ = [
    "ActionInputs",
    "input_env_name",
    "get_input",
    "get_boolean_input",
    "parse_plugin_list",
    "read_inputs",
]

_TRUE_VALUES = frozenset({"true", "True", "TRUE"})
_FALSE_VALUES = frozenset({"false", "False", "FALSE"})


@dataclass(frozen=True, slots=True)
class ActionInputs:
    """Validated inputs of one action run."""

    github_token: str
    version: str = "latest"
    command: str = "full"
    config: str | None = None
    config_content: str | None = None
    auto_approve: bool = False
    dry_run: bool = False
    working_directory: str = "."
    plugins: tuple[str, ...] = ()


def input_env_name(name: str) -> str:
    """Environment variable carrying the input ``name``.

    Example: input_env_name("github-token") -> "INPUT_GITHUB-TOKEN"
    """
    return f"INPUT_{name.replace(' ', '_').upper()}"


def get_input(env: Mapping[str, str], name: str) -> str:
    """Return the trimmed input value, or "" when the input is unset."""
    return env.get(input_env_name(name), "").strip()


def get_boolean_input(env: Mapping[str, str], name: str) -> Result[bool, InvalidInput]:
    """Parse a boolean input (YAML 1.2 core schema spellings; unset means false)."""
    value = get_input(env, name)
    if not value or value in _FALSE_VALUES:
        return Ok(False)
    if value in _TRUE_VALUES:
        return Ok(True)
    return Err(
        InvalidInput(
            name=name,
            value=value,
            reason="expected one of true, True, TRUE, false, False, FALSE",
        )
    )


def parse_plugin_list(value: str) -> tuple[str, ...]:
    """Split a comma-separated plugin list, dropping blanks.

    Example: parse_plugin_list(" github, ,slack ") -> ("github", "slack")
    """
    return tuple(part.strip() for part in value.split(",") if part.strip())


def read_inputs(env: Mapping[str, str]) -> Result[ActionInputs, MissingToken | InvalidInput]:
    """Read and validate all action inputs.

    The token falls back to ``GITHUB_TOKEN`` when the ``github-token`` input is
    empty. A missing token is reported before anything else is looked at.
    """
    token = get_input(env, "github-token") or env.get("GITHUB_TOKEN", "").strip()
    if not token:
        return Err(MissingToken())

    auto_approve = get_boolean_input(env, "auto-approve")
    if isinstance(auto_approve, Err):
        return auto_approve
    dry_run = get_boolean_input(env, "dry-run")
    if isinstance(dry_run, Err):
        return dry_run

    # config-content is YAML; keep its inner whitespace, only test for emptiness.
    config_content = env.get(input_env_name("config-content"), "")

    return Ok(
        ActionInputs(
            github_token=token,
            version=get_input(env, "version") or "latest",
            command=get_input(env, "command") or "full",
            config=get_input(env, "config") or None,
            config_content=config_content if config_content.strip() else None,
            auto_approve=auto_approve.value,
            dry_run=dry_run.value,
            working_directory=get_input(env, "working-directory") or ".",
            plugins=parse_plugin_list(get_input(env, "plugins")),
        )
    )

"""GitHub Actions file commands.

Steps talk back to the runner by appending to files named in the
environment:

- ``$GITHUB_OUTPUT``: ``name=value`` lines become step outputs
- ``$GITHUB_PATH``: each line is prepended to PATH for the following steps

Multi-line output values use the heredoc form ``name<<DELIM`` ... ``DELIM``.
"""

from __future__ import annotations

import os
import uuid
from collections.abc import MutableMapping
from pathlib import Path

from relicta_action.core.action_errors import WorkflowFileError
from relicta_action.core.result import Err, Ok, Result

__all__ = ["WorkflowFiles", "format_output"]


def format_output(name: str, value: str, *, delimiter: str | None = None) -> str:
    """Render one entry for the ``$GITHUB_OUTPUT`` file.

    Example: format_output("version", "1.2.3") -> "version=1.2.3\\n"
    """
    if "\n" not in value and "\r" not in value:
        return f"{name}={value}\n"

    delim = delimiter or f"ghadelimiter_{uuid.uuid4()}"
    if delim in name or delim in value:
        raise ValueError(f"output {name!r} contains the heredoc delimiter")
    return f"{name}<<{delim}\n{value}\n{delim}\n"


class WorkflowFiles:
    """Writes step outputs and PATH additions for the runner.

    Outside GitHub Actions (variables unset) nothing is written to disk and
    PATH is still updated for the current process, so the same code runs
    locally.
    """

    def __init__(self, env: MutableMapping[str, str]) -> None:
        self._env = env

    @property
    def output_file(self) -> Path | None:
        value = self._env.get("GITHUB_OUTPUT")
        return Path(value) if value else None

    @property
    def path_file(self) -> Path | None:
        value = self._env.get("GITHUB_PATH")
        return Path(value) if value else None

    def set_output(self, name: str, value: str) -> Result[bool, WorkflowFileError]:
        """Record a step output.

        Returns:
            Ok(True) if written to the runner's output file, Ok(False) outside
            a runner, or Err when the file could not be appended to
        """
        target = self.output_file
        if target is None:
            return Ok(False)
        written = _append(target, format_output(name, value))
        if isinstance(written, Err):
            return written
        return Ok(True)

    def add_path(self, directory: Path) -> Result[None, WorkflowFileError]:
        """Put directory first on PATH, for this process and later steps."""
        current = self._env.get("PATH", "")
        self._env["PATH"] = f"{directory}{os.pathsep}{current}" if current else str(directory)

        target = self.path_file
        if target is None:
            return Ok(None)
        return _append(target, f"{directory}\n")


def _append(target: Path, text: str) -> Result[None, WorkflowFileError]:
    try:
        with target.open("a", encoding="utf-8") as f:
            f.write(text)
    except OSError as e:
        return Err(WorkflowFileError(path=target, reason=str(e)))
    return Ok(None)

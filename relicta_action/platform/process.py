"""Subprocess execution with Result-based error handling.

relicta subcommands can run for minutes, so their output is streamed line by
line to callbacks while the process runs instead of being returned at the end.

Usage:
    result = stream(
        ["relicta", "plan"],
        cwd=Path("."),
        on_stdout=console.print,
        on_stderr=console.warning,
    )
    match result:
        case Ok(stdout):
            print(f"captured {len(stdout)} chars")
        case Err(error):
            print(f"Failed: {error}")
"""

from __future__ import annotations

import subprocess
import threading
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import IO

from relicta_action.core.result import Err, Ok, Result

__all__ = ["ProcessError", "stream"]

LineCallback = Callable[[str], None]


@dataclass(frozen=True, slots=True)
class ProcessError:
    """A child that exited non-zero, or never started (returncode -1).

    ``stdout`` holds whatever was printed before the failure; ``message`` is
    only set when the spawn itself failed.
    """

    command: tuple[str, ...]
    returncode: int
    stdout: str
    message: str = ""

    def __str__(self) -> str:
        shown = " ".join(self.command[:3]) + (" ..." if len(self.command) > 3 else "")
        detail = self.message or f"exit {self.returncode}"
        return f"{shown} failed: {detail}"


def _pump(pipe: IO[str], callback: LineCallback) -> None:
    with pipe:
        for line in pipe:
            callback(line.rstrip("\r\n"))


def stream(
    cmd: list[str],
    cwd: Path,
    env: Mapping[str, str] | None = None,
    *,
    on_stdout: LineCallback,
    on_stderr: LineCallback,
) -> Result[str, ProcessError]:
    """Execute a command, streaming its output line by line.

    stdout lines are passed to ``on_stdout`` and also collected; stderr lines
    are passed to ``on_stderr`` only. stderr is drained on a helper thread so
    a chatty child can never block on a full pipe.

    Args:
        cmd: Command and arguments to execute.
        cwd: Working directory for the command.
        env: Environment variables (uses current env if None).
        on_stdout: Called with each stdout line (newline stripped).
        on_stderr: Called with each stderr line (newline stripped).

    Returns:
        Ok(stdout) on success, Err(ProcessError) on failure.
    """
    try:
        proc = subprocess.Popen(
            cmd,
            cwd=str(cwd),
            env=dict(env) if env is not None else None,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            stdin=subprocess.DEVNULL,
            text=True,
            encoding="utf-8",
            errors="replace",
        )
    except OSError as e:
        return Err(ProcessError(command=tuple(cmd), returncode=-1, stdout="", message=str(e)))

    assert proc.stdout is not None
    assert proc.stderr is not None

    captured: list[str] = []

    def collect(line: str) -> None:
        captured.append(line)
        on_stdout(line)

    stderr_thread = threading.Thread(target=_pump, args=(proc.stderr, on_stderr), daemon=True)
    stderr_thread.start()
    try:
        _pump(proc.stdout, collect)
    except BaseException:
        proc.kill()
        raise
    finally:
        returncode = proc.wait()
        stderr_thread.join()

    stdout = "\n".join(captured)
    if returncode != 0:
        return Err(ProcessError(command=tuple(cmd), returncode=returncode, stdout=stdout))
    return Ok(stdout)

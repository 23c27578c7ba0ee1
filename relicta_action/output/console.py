"""Console output abstraction.

This module provides a protocol for console output that can be implemented
by different backends. Services log through it and never print directly:

- RichConsole: styled output for a local terminal
- WorkflowConsole: GitHub Actions workflow commands (annotations, log groups)
- MockConsole: captures output for tests
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Protocol, TextIO

__all__ = [
    "Style",
    "ConsoleProtocol",
    "RichConsole",
    "WorkflowConsole",
    "MockConsole",
    "escape_workflow_data",
]


class Style(Enum):
    """Text styles for console output."""

    DEFAULT = auto()
    SUCCESS = auto()  # Green checkmark, positive message
    ERROR = auto()  # Red X, error message
    WARNING = auto()  # Yellow, warning message
    INFO = auto()  # Blue/cyan, informational
    DIM = auto()  # Dimmed/muted text
    DEBUG = auto()  # Only shown when debugging is enabled
    HEADER = auto()  # Section header / log group title

    def __str__(self) -> str:
        return self.name.lower()


class ConsoleProtocol(Protocol):
    """Sink for everything the action reports.

    Services only see this protocol; the CLI decides which backend they get.
    Group calls are always balanced: every start_group is followed by
    end_group, even when the step inside fails.
    """

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        """Write a line as-is (tool output, plain messages)."""
        ...

    def success(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    def warning(self, message: str) -> None:
        """Report a recoverable problem; the run continues."""
        ...

    def info(self, message: str) -> None: ...

    def debug(self, message: str) -> None:
        """Diagnostic line; backends drop it unless debugging is on."""
        ...

    def start_group(self, title: str) -> None:
        """Open a collapsible section (one per relicta invocation)."""
        ...

    def end_group(self) -> None: ...


class RichConsole:
    """Styled terminal output for local runs of the CLI."""

    def __init__(self, *, verbose: bool = False) -> None:
        # Import Rich lazily to avoid import-time dependency
        from rich.console import Console

        self._console = Console(highlight=False)
        self._verbose = verbose
        self._style_map = {
            Style.DEFAULT: "",
            Style.SUCCESS: "green",
            Style.ERROR: "red bold",
            Style.WARNING: "yellow",
            Style.INFO: "cyan",
            Style.DIM: "dim",
            Style.DEBUG: "dim",
            Style.HEADER: "blue bold",
        }

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        rich_style = self._style_map.get(style, "")
        # Tool output may contain square brackets; never interpret them as markup.
        if rich_style:
            self._console.print(message, style=rich_style, markup=False)
        else:
            self._console.print(message, markup=False)

    def success(self, message: str) -> None:
        self._console.print("[green]OK[/green] ", end="")
        self._console.print(message, markup=False)

    def error(self, message: str) -> None:
        self._console.print("[red bold]error:[/red bold] ", end="")
        self._console.print(message, markup=False)

    def warning(self, message: str) -> None:
        self._console.print("[yellow]warning:[/yellow] ", end="")
        self._console.print(message, markup=False)

    def info(self, message: str) -> None:
        self._console.print("[cyan]info:[/cyan] ", end="")
        self._console.print(message, markup=False)

    def debug(self, message: str) -> None:
        if self._verbose:
            self.print(f"debug: {message}", Style.DEBUG)

    def start_group(self, title: str) -> None:
        self._console.rule(title, style="blue")

    def end_group(self) -> None:
        self._console.print()


def escape_workflow_data(message: str) -> str:
    """Escape a message for the data part of a workflow command.

    Example: escape_workflow_data("50%\\ndone") -> "50%25%0Adone"
    """
    return message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


class WorkflowConsole:
    """Console implementation speaking GitHub Actions workflow commands.

    Warnings and errors become annotations on the run summary, groups become
    collapsible sections of the job log, and debug lines are only shown when
    the run is re-executed with debug logging (``RUNNER_DEBUG=1``).
    """

    def __init__(self, stream: TextIO | None = None, *, debug: bool = False) -> None:
        self._stream = stream if stream is not None else sys.stdout
        self._debug = debug

    def _write(self, line: str) -> None:
        self._stream.write(line + "\n")
        self._stream.flush()

    def _command(self, name: str, message: str) -> None:
        self._write(f"::{name}::{escape_workflow_data(message)}")

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        match style:
            case Style.ERROR:
                self.error(message)
            case Style.WARNING:
                self.warning(message)
            case Style.DEBUG:
                self.debug(message)
            case _:
                self._write(message)

    def success(self, message: str) -> None:
        self._write(f"✓ {message}")

    def error(self, message: str) -> None:
        self._command("error", message)

    def warning(self, message: str) -> None:
        self._command("warning", message)

    def info(self, message: str) -> None:
        self._write(message)

    def debug(self, message: str) -> None:
        if self._debug:
            self._command("debug", message)

    def start_group(self, title: str) -> None:
        self._command("group", title)

    def end_group(self) -> None:
        self._write("::endgroup::")


@dataclass
class OutputRecord:
    """A single output record for MockConsole."""

    message: str
    style: Style


def _empty_outputs() -> list[OutputRecord]:
    """Factory for empty outputs list (helps type inference)."""
    return []


@dataclass
class MockConsole:
    """Console implementation that captures output for testing.

    Use this in tests to verify what would have been printed without
    actually printing anything.
    """

    outputs: list[OutputRecord] = field(default_factory=_empty_outputs)

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        self.outputs.append(OutputRecord(message, style))

    def success(self, message: str) -> None:
        self.outputs.append(OutputRecord(f"OK {message}", Style.SUCCESS))

    def error(self, message: str) -> None:
        self.outputs.append(OutputRecord(f"error: {message}", Style.ERROR))

    def warning(self, message: str) -> None:
        self.outputs.append(OutputRecord(f"warning: {message}", Style.WARNING))

    def info(self, message: str) -> None:
        self.outputs.append(OutputRecord(f"info: {message}", Style.INFO))

    def debug(self, message: str) -> None:
        self.outputs.append(OutputRecord(f"debug: {message}", Style.DEBUG))

    def start_group(self, title: str) -> None:
        self.outputs.append(OutputRecord(title, Style.HEADER))

    def end_group(self) -> None:
        self.outputs.append(OutputRecord("", Style.DEFAULT))

    # Helpers for assertions

    def clear(self) -> None:
        self.outputs.clear()

    @property
    def messages(self) -> list[str]:
        """Recorded messages, in order, with their backend prefixes."""
        return [record.message for record in self.outputs]

    @property
    def text(self) -> str:
        return "\n".join(self.messages)

    def _seen(self, style: Style) -> bool:
        return self.count(style) > 0

    def has_error(self) -> bool:
        return self._seen(Style.ERROR)

    def has_warning(self) -> bool:
        return self._seen(Style.WARNING)

    def has_success(self) -> bool:
        return self._seen(Style.SUCCESS)

    def find(self, substring: str) -> list[OutputRecord]:
        """Records whose message contains substring."""
        return [record for record in self.outputs if substring in record.message]

    def count(self, style: Style) -> int:
        return sum(record.style is style for record in self.outputs)

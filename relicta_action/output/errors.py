"""Error presentation utilities.

Centralized error formatting and exit code mapping for consistent UX.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from relicta_action.core.action_errors import (
    ActionError,
    BinaryNotFound,
    ChecksumMismatch,
    CommandFailed,
    DownloadFailed,
    ExtractionFailed,
    InvalidInput,
    MissingToken,
    UnsupportedArchitecture,
    UnsupportedArchiveFormat,
    UnsupportedPlatform,
    WorkflowFileError,
)
from relicta_action.core.errors import ErrorCode
from relicta_action.output.console import Style

if TYPE_CHECKING:
    from relicta_action.output.console import ConsoleProtocol

__all__ = ["describe_action_error", "print_action_error", "action_error_exit_code"]


def describe_action_error(error: ActionError) -> str:
    """One-line description of an error."""
    match error:
        case MissingToken():
            return "GitHub token is required"
        case InvalidInput(name=name, value=value, reason=reason):
            return f"Invalid input {name}={value!r}: {reason}"
        case UnsupportedPlatform(system=system):
            return f"Unsupported OS: {system}"
        case UnsupportedArchitecture(machine=machine):
            return f"Unsupported architecture: {machine}"
        case DownloadFailed(url=url, status=status, message=message):
            if status:
                return f"Download failed: HTTP {status} {message} ({url})"
            return f"Download failed: {message} ({url})"
        case ChecksumMismatch(filename=filename):
            return f"Checksum mismatch for {filename}"
        case UnsupportedArchiveFormat(filename=filename):
            return f"Unsupported archive format: {filename}"
        case ExtractionFailed(archive=archive, reason=reason):
            return f"Failed to extract {archive.name}: {reason}"
        case BinaryNotFound(name=name, searched=searched):
            return f"Binary {name} not found in {searched}"
        case CommandFailed(args=args, exit_code=code, reason=reason):
            if reason:
                return f"Command '{' '.join(args)}' failed: {reason}"
            return f"Command '{' '.join(args)}' failed with exit code {code}"
        case WorkflowFileError(path=path, reason=reason):
            return f"Could not write workflow file {path}: {reason}"


def print_action_error(error: ActionError, console: ConsoleProtocol) -> None:
    """Print an error to the console with appropriate formatting."""
    console.error(describe_action_error(error))
    match error:
        case MissingToken(hint=hint):
            console.print(f"hint: {hint}", Style.DIM)
        case ChecksumMismatch(expected=expected, actual=actual):
            console.print(f"expected: {expected}", Style.DIM)
            console.print(f"actual:   {actual}", Style.DIM)
        case _:
            pass


def action_error_exit_code(error: ActionError) -> int:
    """Get exit code for an error."""
    match error:
        case MissingToken() | InvalidInput():
            return int(ErrorCode.USER_ERROR)
        case UnsupportedPlatform() | UnsupportedArchitecture():
            return int(ErrorCode.ENV_ERROR)
        case CommandFailed():
            return int(ErrorCode.COMMAND_ERROR)
        case DownloadFailed():
            return int(ErrorCode.NETWORK_ERROR)
        case ChecksumMismatch():
            return int(ErrorCode.INTEGRITY_ERROR)
        case (
            UnsupportedArchiveFormat()
            | ExtractionFailed()
            | BinaryNotFound()
            | WorkflowFileError()
        ):
            return int(ErrorCode.IO_ERROR)

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class MissingToken:
    hint: str = "Set the github-token input or the GITHUB_TOKEN environment variable"


@dataclass(frozen=True, slots=True)
class InvalidInput:
    name: str
    value: str
    reason: str


@dataclass(frozen=True, slots=True)
class UnsupportedPlatform:
    system: str


@dataclass(frozen=True, slots=True)
class UnsupportedArchitecture:
    machine: str


@dataclass(frozen=True, slots=True)
class DownloadFailed:
    url: str
    status: int
    message: str


@dataclass(frozen=True, slots=True)
class ChecksumMismatch:
    filename: str
    expected: str
    actual: str


@dataclass(frozen=True, slots=True)
class UnsupportedArchiveFormat:
    filename: str


@dataclass(frozen=True, slots=True)
class ExtractionFailed:
    archive: Path
    reason: str


@dataclass(frozen=True, slots=True)
class BinaryNotFound:
    name: str
    searched: Path


@dataclass(frozen=True, slots=True)
class WorkflowFileError:
    path: Path
    reason: str


@dataclass(frozen=True, slots=True)
class CommandFailed:
    args: tuple[str, ...]
    exit_code: int
    reason: str | None = None


PlatformError = UnsupportedPlatform | UnsupportedArchitecture

ArtifactError = (
    DownloadFailed | ChecksumMismatch | UnsupportedArchiveFormat | ExtractionFailed | BinaryNotFound
)

ActionError = (
    MissingToken | InvalidInput | PlatformError | ArtifactError | CommandFailed | WorkflowFileError
)

"""Download, verify and extract one release artifact.

Verification policy: a checksum manifest that cannot be downloaded, or that
has no entry for the archive, only produces a warning. A digest that does not
match is the one integrity failure that stops the install.
"""

from __future__ import annotations

import shutil
import tempfile
from dataclasses import dataclass
from enum import Enum, auto
from pathlib import Path
from typing import TYPE_CHECKING

from relicta_action.core.action_errors import (
    ArtifactError,
    ChecksumMismatch,
    DownloadFailed,
    UnsupportedArchiveFormat,
)
from relicta_action.core.result import Err, Ok, Result
from relicta_action.tools.checksums import digests_match, parse_manifest, sha256_file
from relicta_action.tools.extract import archive_kind, extract_archive

if TYPE_CHECKING:
    from relicta_action.output.console import ConsoleProtocol
    from relicta_action.tools.artifacts import DownloadInfo
    from relicta_action.tools.http import HttpClient

__all__ = ["ArtifactPipeline", "Verification"]


class Verification(Enum):
    """How an archive's checksum check ended (when it did not fail)."""

    VERIFIED = auto()
    MANIFEST_UNAVAILABLE = auto()
    ENTRY_MISSING = auto()

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")


@dataclass(frozen=True, slots=True)
class _Staged:
    work_dir: Path
    archive: Path


class ArtifactPipeline:
    """Fetch-verify-extract for release artifacts.

    Every artifact is staged in its own temporary directory under
    ``work_root``. The archive is deleted once extracted; the extracted tree
    is left for the caller to copy or cache.

    Usage:
        pipeline = ArtifactPipeline(http, console, settings.temp_dir)
        result = pipeline.fetch_verify_extract(info)
        if is_ok(result):
            binary = locate_binary(result.value, "relicta", "relicta")
    """

    def __init__(self, http: HttpClient, console: ConsoleProtocol, work_root: Path) -> None:
        self._http = http
        self._console = console
        self._work_root = work_root

    def fetch_verify_extract(self, info: DownloadInfo) -> Result[Path, ArtifactError]:
        """Run the whole pipeline for one artifact.

        Returns:
            Ok with the extraction root, or Err with the failure
        """
        staged = self._download(info)
        if isinstance(staged, Err):
            return staged

        work_dir, archive = staged.value.work_dir, staged.value.archive
        verified = self.verify(archive, info)
        if isinstance(verified, Err):
            shutil.rmtree(work_dir, ignore_errors=True)
            return verified

        extracted = extract_archive(archive, work_dir / "extracted")
        archive.unlink(missing_ok=True)
        if isinstance(extracted, Err):
            shutil.rmtree(work_dir, ignore_errors=True)
            return extracted

        self._console.debug(f"Extracted {info.filename} to {extracted.value}")
        return extracted

    def _download(self, info: DownloadInfo) -> Result[_Staged, ArtifactError]:
        if archive_kind(info.filename) is None:
            # Reject before spending a download on an archive we cannot open.
            return Err(UnsupportedArchiveFormat(filename=info.filename))

        self._work_root.mkdir(parents=True, exist_ok=True)
        work_dir = Path(tempfile.mkdtemp(prefix="relicta-", dir=self._work_root))

        self._console.info(f"Downloading {info.url}")
        result = self._http.download(info.url, work_dir / info.filename)
        if isinstance(result, Err):
            shutil.rmtree(work_dir, ignore_errors=True)
            error = result.error
            return Err(DownloadFailed(url=error.url, status=error.status, message=error.message))

        return Ok(_Staged(work_dir=work_dir, archive=result.value))

    def verify(self, archive: Path, info: DownloadInfo) -> Result[Verification, ChecksumMismatch]:
        """Check an archive against its release checksum manifest.

        Args:
            archive: Downloaded archive
            info: Artifact coordinates (manifest URL and manifest key)

        Returns:
            Ok with how verification ended, or Err(ChecksumMismatch)
        """
        manifest = self._http.get_text(info.checksum_url)
        if isinstance(manifest, Err):
            self._console.warning(
                f"Failed to download checksums for {info.filename}, skipping verification: "
                f"{manifest.error}"
            )
            return Ok(Verification.MANIFEST_UNAVAILABLE)

        expected = parse_manifest(manifest.value).get(info.filename)
        if expected is None:
            self._console.warning(f"Checksum not found for {info.filename}, skipping verification")
            return Ok(Verification.ENTRY_MISSING)

        actual = sha256_file(archive)
        if not digests_match(expected, actual):
            return Err(ChecksumMismatch(filename=info.filename, expected=expected, actual=actual))

        self._console.success(f"Checksum verified for {info.filename}")
        return Ok(Verification.VERIFIED)

    def discard(self, extracted: Path) -> None:
        """Remove the staging directory of a tree returned by fetch_verify_extract."""
        work_dir = extracted.parent
        if work_dir.parent.resolve() != self._work_root.resolve():
            # Not one of ours; never delete arbitrary directories.
            return
        shutil.rmtree(work_dir, ignore_errors=True)

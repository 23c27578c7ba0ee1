"""Archive extraction.

Release archives are ``.tar.gz`` (Linux, macOS) or ``.zip`` (Windows). Only
regular files are extracted; entries with absolute paths, ``..`` components
or link types are skipped so an archive can never write outside its
destination.
"""

from __future__ import annotations

import contextlib
import os
import shutil
import stat
import tarfile
import zipfile
from pathlib import Path, PurePosixPath

from relicta_action.core.action_errors import ExtractionFailed, UnsupportedArchiveFormat
from relicta_action.core.result import Err, Ok, Result

__all__ = ["extract_archive", "archive_kind"]


def archive_kind(filename: str) -> str | None:
    """Return "tar" or "zip" for a supported archive name, else None."""
    # NOTE: Path.suffixes is not reliable for names like "relicta_1.2.3_Linux.tar.gz"
    # because it splits on every dot.
    name = filename.lower()
    if name.endswith((".tar.gz", ".tgz")):
        return "tar"
    if name.endswith(".zip"):
        return "zip"
    return None


def extract_archive(
    archive: Path, dest: Path
) -> Result[Path, UnsupportedArchiveFormat | ExtractionFailed]:
    """Extract archive into dest (replacing dest if it exists).

    Args:
        archive: Path to archive file; its name selects the format
        dest: Directory to extract to

    Returns:
        Ok with dest, or Err
    """
    kind = archive_kind(archive.name)
    if kind is None:
        return Err(UnsupportedArchiveFormat(filename=archive.name))
    if not archive.exists():
        return Err(ExtractionFailed(archive=archive, reason="archive not found"))

    try:
        if dest.exists():
            shutil.rmtree(dest)
        dest.mkdir(parents=True, exist_ok=True)
        if kind == "tar":
            _extract_tar(archive, dest)
        else:
            _extract_zip(archive, dest)
    except tarfile.TarError as e:
        return Err(ExtractionFailed(archive=archive, reason=f"tar extraction failed: {e}"))
    except zipfile.BadZipFile as e:
        return Err(ExtractionFailed(archive=archive, reason=f"invalid zip file: {e}"))
    except (EOFError, OSError) as e:
        return Err(ExtractionFailed(archive=archive, reason=f"IO error: {e}"))
    return Ok(dest)


def _safe_relative_path(member_name: str) -> Path | None:
    """Return a sanitized relative extraction path, or None if unsafe."""
    normalized = member_name.replace("\\", "/")
    if normalized.startswith("/"):
        return None

    parts = [part for part in PurePosixPath(normalized).parts if part != "."]
    if not parts:
        return None
    if any(part in {"", ".."} for part in parts):
        return None
    if parts[0].endswith(":"):
        return None

    return Path(*parts)


def _is_within_root(root: Path, target: Path) -> bool:
    try:
        return target.resolve().is_relative_to(root.resolve())
    except OSError:
        return False


def _extract_tar(archive: Path, dest: Path) -> None:
    root = dest.resolve()
    with tarfile.open(archive, "r:gz") as tar:
        for member in tar.getmembers():
            # Skip directories and non-regular entries (symlink, hardlink, device, fifo)
            if not member.isreg():
                continue

            rel_path = _safe_relative_path(member.name)
            if rel_path is None:
                continue
            full_path = dest / rel_path
            if not _is_within_root(root, full_path):
                continue

            src = tar.extractfile(member)
            if src is None:
                continue

            full_path.parent.mkdir(parents=True, exist_ok=True)
            with src, open(full_path, "wb") as out:
                shutil.copyfileobj(src, out)

            mode = member.mode & 0o777
            if mode:
                with contextlib.suppress(OSError):
                    os.chmod(full_path, mode)


def _extract_zip(archive: Path, dest: Path) -> None:
    root = dest.resolve()
    with zipfile.ZipFile(archive, "r") as zf:
        for info in zf.infolist():
            if info.is_dir():
                continue

            unix_attrs = info.external_attr >> 16
            if stat.S_ISLNK(unix_attrs):
                continue

            rel_path = _safe_relative_path(info.filename)
            if rel_path is None:
                continue
            full_path = dest / rel_path
            if not _is_within_root(root, full_path):
                continue

            full_path.parent.mkdir(parents=True, exist_ok=True)
            with zf.open(info) as src, open(full_path, "wb") as out:
                shutil.copyfileobj(src, out)

            # Preserve Unix permissions if available
            mode = unix_attrs & 0o777
            if mode:
                with contextlib.suppress(OSError):
                    os.chmod(full_path, mode)

"""Persistent tool cache.

Installed trees are kept in the runner tool cache (``$RUNNER_TOOL_CACHE``)
so later jobs on the same runner can skip the download. Layout:

    <root>/<tool>/<version>/<arch>/           extracted release tree
    <root>/<tool>/<version>/<arch>.complete   marker, written last

An entry without its marker is a partial copy and is ignored. The cache is
advisory: a miss always falls back to a fresh download.
"""

from __future__ import annotations

import json
import shutil
from dataclasses import asdict, dataclass
from datetime import datetime
from pathlib import Path

from relicta_action.core.result import Err, Ok, Result
from relicta_action.platform.files import atomic_write_text
from relicta_action.tools.artifacts import LATEST

__all__ = ["CacheEntry", "CacheError", "ToolCache", "normalize_version"]


@dataclass(frozen=True, slots=True)
class CacheEntry:
    """Contents of a completion marker.

    Attributes:
        version: Cached version string
        installed_at: ISO timestamp of the store
    """

    version: str
    installed_at: str

    @classmethod
    def now(cls, version: str) -> CacheEntry:
        """Create entry with current timestamp."""
        return cls(version=version, installed_at=datetime.now().isoformat())


@dataclass(frozen=True, slots=True)
class CacheError:
    """Failure to store a tree in the cache."""

    path: Path
    message: str

    def __str__(self) -> str:
        return f"{self.message}: {self.path}"


def normalize_version(version: str) -> str:
    """Cache key for a version: surrounding whitespace and a leading 'v' removed.

    Example: normalize_version("v1.2.3") -> "1.2.3"
    """
    return version.strip().removeprefix("v")


class ToolCache:
    """Lookup and store of installed trees keyed by (tool, version, arch).

    ``latest`` is never cached: it names a different release over time.

    Usage:
        cache = ToolCache(settings.tool_cache_dir)
        hit = cache.find("relicta", "v1.2.3", "x86_64")
        if hit is None:
            ...
            cache.store(extracted_dir, "relicta", "v1.2.3", "x86_64")
    """

    def __init__(self, root: Path) -> None:
        self._root = root

    @property
    def root(self) -> Path:
        return self._root

    def entry_dir(self, tool: str, version: str, arch: str) -> Path:
        return self._root / tool / normalize_version(version) / arch

    def _marker(self, tool: str, version: str, arch: str) -> Path:
        entry = self.entry_dir(tool, version, arch)
        return entry.with_name(f"{entry.name}.complete")

    def is_cacheable(self, version: str) -> bool:
        return bool(normalize_version(version)) and version.strip() != LATEST

    def find(self, tool: str, version: str, arch: str) -> Path | None:
        """Return the cached tree, or None when there is no complete entry."""
        if not self.is_cacheable(version):
            return None
        entry = self.entry_dir(tool, version, arch)
        if entry.is_dir() and self._marker(tool, version, arch).is_file():
            return entry
        return None

    def read_entry(self, tool: str, version: str, arch: str) -> CacheEntry | None:
        """Read the completion marker of an entry, if present and valid."""
        marker = self._marker(tool, version, arch)
        try:
            data = json.loads(marker.read_text(encoding="utf-8"))
            return CacheEntry(**data)
        except (OSError, json.JSONDecodeError, TypeError):
            return None

    def store(self, source: Path, tool: str, version: str, arch: str) -> Result[Path, CacheError]:
        """Copy ``source`` into the cache and mark the entry complete.

        Args:
            source: Extracted tree to cache
            tool: Tool name
            version: Version (not "latest")
            arch: Architecture

        Returns:
            Ok with the cached tree, or Err with CacheError
        """
        entry = self.entry_dir(tool, version, arch)
        if not self.is_cacheable(version):
            return Err(CacheError(path=entry, message=f"version {version!r} is not cacheable"))

        marker = self._marker(tool, version, arch)
        try:
            marker.unlink(missing_ok=True)
            _remove_tree(entry)
            entry.parent.mkdir(parents=True, exist_ok=True)
            shutil.copytree(source, entry)
            payload = asdict(CacheEntry.now(normalize_version(version)))
            atomic_write_text(marker, json.dumps(payload, indent=2))
        except (OSError, shutil.Error) as e:
            return Err(CacheError(path=entry, message=f"cache store failed ({e})"))
        return Ok(entry)

    def evict(self, tool: str, version: str, arch: str) -> Result[bool, CacheError]:
        """Remove an entry and its marker.

        Returns:
            Ok(True) if anything was removed, or Err when removal failed
        """
        marker = self._marker(tool, version, arch)
        entry = self.entry_dir(tool, version, arch)
        removed = marker.exists() or entry.exists() or entry.is_symlink()
        try:
            marker.unlink(missing_ok=True)
            _remove_tree(entry)
        except OSError as e:
            return Err(CacheError(path=entry, message=f"cache evict failed ({e})"))
        return Ok(removed)


def _remove_tree(path: Path) -> None:
    # a symlinked entry is removed as a link; its target is left alone
    if path.is_symlink():
        path.unlink()
    elif path.exists():
        shutil.rmtree(path)

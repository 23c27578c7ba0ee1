"""Checksum manifests and SHA-256 digests.

A manifest is the ``sha256sum`` output published with each release:

    9f86d081884c7d659a2feaa0c55ad015a3bf4f1b2b0b822cd15d6c15b0f00a08  relicta_Linux_x86_64.tar.gz
"""

from __future__ import annotations

import hashlib
from pathlib import Path

__all__ = ["parse_manifest", "sha256_file", "digests_match"]


def parse_manifest(text: str) -> dict[str, str]:
    """Parse a checksum manifest into filename -> lowercase hex digest.

    Only the first two whitespace-separated fields of a line matter. Lines
    with fewer fields are skipped. When a filename repeats, the first entry
    wins.
    """
    entries: dict[str, str] = {}
    for line in text.splitlines():
        parts = line.split()
        if len(parts) < 2:
            continue
        digest, filename = parts[0], parts[1]
        # sha256sum marks binary-mode entries with a leading '*'
        filename = filename.removeprefix("*")
        entries.setdefault(filename, digest.lower())
    return entries


def sha256_file(path: Path, *, chunk_size: int = 1024 * 1024) -> str:
    """Compute the SHA-256 hex digest of a file."""
    digest = hashlib.sha256()
    with path.open("rb") as f:
        while chunk := f.read(chunk_size):
            digest.update(chunk)
    return digest.hexdigest()


def digests_match(expected: str, actual: str) -> bool:
    """Compare two hex digests, ignoring case and surrounding whitespace."""
    return expected.strip().lower() == actual.strip().lower()

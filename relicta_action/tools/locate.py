"""Find binaries inside extracted release archives.

Archive layouts vary: goreleaser may put the binary at the root or inside a
single folder named like ``relicta_Linux_x86_64/``. Only the root and its
immediate subdirectories are searched.
"""

from __future__ import annotations

from pathlib import Path

__all__ = ["locate_binary", "locate_plugin_binary"]


def _subdirectories(root: Path) -> list[Path]:
    try:
        return sorted(p for p in root.iterdir() if p.is_dir())
    except OSError:
        return []


def locate_binary(root: Path, expected_name: str, prefix: str) -> Path | None:
    """Find the main binary.

    Args:
        root: Extraction root
        expected_name: Binary filename (e.g. "relicta" or "relicta.exe")
        prefix: Only subdirectories starting with this are searched

    Returns:
        Path to the binary, or None if not found
    """
    candidate = root / expected_name
    if candidate.is_file():
        return candidate

    for subdir in _subdirectories(root):
        if not subdir.name.startswith(prefix):
            continue
        candidate = subdir / expected_name
        if candidate.is_file():
            return candidate
    return None


def locate_plugin_binary(root: Path, plugin: str, exe_suffix: str) -> Path | None:
    """Find a plugin binary, matching its name loosely.

    Checks ``root/<plugin><suffix>``, then any root file whose name equals
    the plugin name with or without the suffix (case-insensitive), then
    ``<subdir>/<plugin><suffix>`` for every immediate subdirectory.
    """
    binary_name = f"{plugin}{exe_suffix}"
    candidate = root / binary_name
    if candidate.is_file():
        return candidate

    accepted = {plugin.lower(), binary_name.lower()}
    try:
        entries = sorted(root.iterdir())
    except OSError:
        return None
    for entry in entries:
        if entry.is_file() and entry.name.lower() in accepted:
            return entry

    for subdir in _subdirectories(root):
        candidate = subdir / binary_name
        if candidate.is_file():
            return candidate
    return None

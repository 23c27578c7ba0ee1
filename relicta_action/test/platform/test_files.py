"""Tests for relicta_action.platform.files module."""

from __future__ import annotations

import os
import stat
import sys
from pathlib import Path

import pytest

from relicta_action.platform.files import atomic_write_text, make_executable


class TestAtomicWriteText:
    def test_creates_parents_and_writes(self, tmp_path: Path) -> None:
        path = tmp_path / "a" / "b" / "marker.json"
        atomic_write_text(path, '{"version": "1.2.3"}')
        assert path.read_text(encoding="utf-8") == '{"version": "1.2.3"}'

    def test_replaces_existing(self, tmp_path: Path) -> None:
        path = tmp_path / "file.txt"
        path.write_text("old", encoding="utf-8")
        atomic_write_text(path, "new")
        assert path.read_text(encoding="utf-8") == "new"

    def test_leaves_no_temp_files(self, tmp_path: Path) -> None:
        atomic_write_text(tmp_path / "file.txt", "content")
        assert [p.name for p in tmp_path.iterdir()] == ["file.txt"]


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX permissions")
class TestMakeExecutable:
    def test_adds_execute_bits(self, tmp_path: Path) -> None:
        path = tmp_path / "relicta"
        path.write_bytes(b"#!/bin/sh\n")
        path.chmod(0o644)

        make_executable(path)

        mode = path.stat().st_mode
        assert mode & stat.S_IXUSR
        assert mode & stat.S_IXGRP
        assert mode & stat.S_IXOTH
        assert os.access(path, os.X_OK)

    def test_keeps_other_bits(self, tmp_path: Path) -> None:
        path = tmp_path / "relicta"
        path.write_bytes(b"")
        path.chmod(0o600)

        make_executable(path)

        assert stat.S_IMODE(path.stat().st_mode) == 0o711

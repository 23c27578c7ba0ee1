"""Tests for relicta_action.tools.extract module."""

from __future__ import annotations

import io
import stat
import sys
import tarfile
import zipfile
from pathlib import Path

import pytest

from relicta_action.core.action_errors import ExtractionFailed, UnsupportedArchiveFormat
from relicta_action.core.result import Err, Ok
from relicta_action.test._archives import tar_gz_bytes, write_archive, zip_bytes
from relicta_action.tools.extract import archive_kind, extract_archive


class TestArchiveKind:
    @pytest.mark.parametrize(
        ("name", "kind"),
        [
            ("relicta_Linux_x86_64.tar.gz", "tar"),
            ("relicta_1.2.3_linux.TGZ", "tar"),
            ("relicta_Windows_x86_64.zip", "zip"),
            ("relicta.tar.xz", None),
            ("relicta.rar", None),
            ("relicta", None),
        ],
    )
    def test_kinds(self, name: str, kind: str | None) -> None:
        assert archive_kind(name) == kind


class TestExtractTar:
    def test_extracts_files(self, tmp_path: Path) -> None:
        archive = write_archive(
            tmp_path / "a.tar.gz",
            tar_gz_bytes({"relicta": b"bin", "LICENSE": b"MIT"}, prefix="relicta_Linux_x86_64"),
        )
        dest = tmp_path / "out"

        result = extract_archive(archive, dest)

        assert result == Ok(dest)
        assert (dest / "relicta_Linux_x86_64" / "relicta").read_bytes() == b"bin"
        assert (dest / "relicta_Linux_x86_64" / "LICENSE").read_bytes() == b"MIT"

    @pytest.mark.skipif(sys.platform == "win32", reason="POSIX permissions")
    def test_preserves_mode(self, tmp_path: Path) -> None:
        archive = write_archive(tmp_path / "a.tar.gz", tar_gz_bytes({"relicta": b"bin"}))
        dest = tmp_path / "out"

        extract_archive(archive, dest)

        assert stat.S_IMODE((dest / "relicta").stat().st_mode) == 0o755

    def test_replaces_existing_dest(self, tmp_path: Path) -> None:
        dest = tmp_path / "out"
        dest.mkdir()
        (dest / "stale").write_text("old")
        archive = write_archive(tmp_path / "a.tar.gz", tar_gz_bytes({"relicta": b"bin"}))

        extract_archive(archive, dest)

        assert not (dest / "stale").exists()
        assert (dest / "relicta").exists()

    def test_skips_path_traversal(self, tmp_path: Path) -> None:
        archive = write_archive(
            tmp_path / "a.tar.gz",
            tar_gz_bytes({"../evil": b"x", "/abs/evil": b"x", "ok": b"fine"}),
        )
        dest = tmp_path / "out"

        result = extract_archive(archive, dest)

        assert isinstance(result, Ok)
        assert (dest / "ok").read_bytes() == b"fine"
        assert not (tmp_path / "evil").exists()
        assert not Path("/abs/evil").exists()

    def test_skips_symlinks(self, tmp_path: Path) -> None:
        buffer = io.BytesIO()
        with tarfile.open(fileobj=buffer, mode="w:gz") as tar:
            link = tarfile.TarInfo("link")
            link.type = tarfile.SYMTYPE
            link.linkname = "/etc/passwd"
            tar.addfile(link)
        archive = write_archive(tmp_path / "a.tar.gz", buffer.getvalue())
        dest = tmp_path / "out"

        assert isinstance(extract_archive(archive, dest), Ok)
        assert not (dest / "link").exists()

    def test_corrupt_archive(self, tmp_path: Path) -> None:
        archive = write_archive(tmp_path / "a.tar.gz", b"not a tarball")

        result = extract_archive(archive, tmp_path / "out")

        assert isinstance(result, Err)
        assert isinstance(result.error, ExtractionFailed)
        assert result.error.archive == archive


class TestExtractZip:
    def test_extracts_files(self, tmp_path: Path) -> None:
        archive = write_archive(tmp_path / "a.zip", zip_bytes({"relicta.exe": b"MZ"}))
        dest = tmp_path / "out"

        assert extract_archive(archive, dest) == Ok(dest)
        assert (dest / "relicta.exe").read_bytes() == b"MZ"

    def test_skips_path_traversal(self, tmp_path: Path) -> None:
        archive = write_archive(
            tmp_path / "a.zip", zip_bytes({"../evil.txt": b"x", "good.txt": b"y"})
        )
        dest = tmp_path / "out"

        extract_archive(archive, dest)

        assert (dest / "good.txt").exists()
        assert not (tmp_path / "evil.txt").exists()

    def test_skips_symlinks(self, tmp_path: Path) -> None:
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w") as zf:
            info = zipfile.ZipInfo("link")
            info.external_attr = (stat.S_IFLNK | 0o777) << 16
            zf.writestr(info, "/etc/passwd")
        archive = write_archive(tmp_path / "a.zip", buffer.getvalue())
        dest = tmp_path / "out"

        extract_archive(archive, dest)

        assert not (dest / "link").exists()

    def test_corrupt_archive(self, tmp_path: Path) -> None:
        archive = write_archive(tmp_path / "a.zip", b"PK not really")

        result = extract_archive(archive, tmp_path / "out")

        assert isinstance(result, Err)
        assert isinstance(result.error, ExtractionFailed)
        assert "zip" in result.error.reason


class TestExtractErrors:
    def test_unsupported_format(self, tmp_path: Path) -> None:
        archive = write_archive(tmp_path / "a.rar", b"")
        result = extract_archive(archive, tmp_path / "out")
        assert result == Err(UnsupportedArchiveFormat(filename="a.rar"))

    def test_missing_archive(self, tmp_path: Path) -> None:
        result = extract_archive(tmp_path / "missing.zip", tmp_path / "out")
        assert isinstance(result, Err)
        assert result.error == ExtractionFailed(
            archive=tmp_path / "missing.zip", reason="archive not found"
        )

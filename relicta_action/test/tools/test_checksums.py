"""Tests for relicta_action.tools.checksums module."""

from __future__ import annotations

import hashlib
from pathlib import Path

from relicta_action.tools.checksums import digests_match, parse_manifest, sha256_file

DIGEST_A = "a" * 64
DIGEST_B = "b" * 64


class TestParseManifest:
    def test_sha256sum_format(self) -> None:
        text = f"{DIGEST_A}  relicta_Linux_x86_64.tar.gz\n{DIGEST_B}  relicta_Windows_x86_64.zip\n"
        assert parse_manifest(text) == {
            "relicta_Linux_x86_64.tar.gz": DIGEST_A,
            "relicta_Windows_x86_64.zip": DIGEST_B,
        }

    def test_binary_marker_stripped(self) -> None:
        assert parse_manifest(f"{DIGEST_A} *file.zip") == {"file.zip": DIGEST_A}

    def test_digest_lowercased(self) -> None:
        assert parse_manifest(f"{DIGEST_A.upper()}  file.zip") == {"file.zip": DIGEST_A}

    def test_first_entry_wins(self) -> None:
        text = f"{DIGEST_A}  file.zip\n{DIGEST_B}  file.zip\n"
        assert parse_manifest(text) == {"file.zip": DIGEST_A}

    def test_malformed_lines_skipped(self) -> None:
        text = f"\n   \nonlyonefield\n{DIGEST_A}\tfile.zip\textra\n"
        assert parse_manifest(text) == {"file.zip": DIGEST_A}

    def test_crlf(self) -> None:
        assert parse_manifest(f"{DIGEST_A}  file.zip\r\n") == {"file.zip": DIGEST_A}


class TestSha256File:
    def test_known_digest(self, tmp_path: Path) -> None:
        path = tmp_path / "data.bin"
        path.write_bytes(b"test")
        assert sha256_file(path) == hashlib.sha256(b"test").hexdigest()

    def test_chunked(self, tmp_path: Path) -> None:
        data = bytes(range(256)) * 100
        path = tmp_path / "data.bin"
        path.write_bytes(data)
        assert sha256_file(path, chunk_size=1000) == hashlib.sha256(data).hexdigest()


class TestDigestsMatch:
    def test_case_insensitive(self) -> None:
        assert digests_match(DIGEST_A.upper(), DIGEST_A)

    def test_whitespace_ignored(self) -> None:
        assert digests_match(f" {DIGEST_A}\n", DIGEST_A)

    def test_mismatch(self) -> None:
        assert not digests_match(DIGEST_A, DIGEST_B)

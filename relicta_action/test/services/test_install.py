"""Tests for relicta_action.services.install module."""

from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

from relicta_action.core.action_errors import BinaryNotFound, ChecksumMismatch, DownloadFailed
from relicta_action.core.result import Err, Ok
from relicta_action.core.settings import Settings
from relicta_action.output.console import MockConsole
from relicta_action.platform.detection import Arch, HostPlatform, OsName
from relicta_action.services.install import InstallService, PluginReport
from relicta_action.test._archives import serve_artifact
from relicta_action.tools.artifacts import main_download_info, plugin_download_info
from relicta_action.tools.cache import CacheError, ToolCache
from relicta_action.tools.http import HttpError, MockHttpClient
from relicta_action.tools.pipeline import ArtifactPipeline

LINUX = HostPlatform(OsName.LINUX, Arch.X86_64)
WINDOWS = HostPlatform(OsName.WINDOWS, Arch.X86_64)


class _Harness:
    def __init__(self, tmp_path: Path, platform: HostPlatform = LINUX) -> None:
        self.settings = Settings(tool_cache_dir=tmp_path / "cache", temp_dir=tmp_path / "tmp")
        self.platform = platform
        self.http = MockHttpClient()
        self.console = MockConsole()
        self.cache = ToolCache(self.settings.tool_cache_dir)
        self.service = InstallService(
            settings=self.settings,
            platform=platform,
            pipeline=ArtifactPipeline(self.http, self.console, self.settings.temp_dir),
            cache=self.cache,
            console=self.console,
        )

    def serve_main(self, version: str, *, prefix: str = "relicta_Linux_x86_64") -> None:
        info = main_download_info(version, self.platform, self.settings)
        binary = self.platform.exe_name("relicta")
        serve_artifact(self.http, info, {binary: b"relicta", "README.md": b"docs"}, prefix=prefix)

    def serve_plugin(self, name: str, version: str) -> None:
        info = plugin_download_info(name, version, self.platform, self.settings)
        serve_artifact(self.http, info, {self.platform.exe_name(name): name.encode()})


class TestInstallMain:
    def test_fresh_install_latest(self, tmp_path: Path) -> None:
        h = _Harness(tmp_path)
        h.serve_main("latest")

        result = h.service.install_main("latest")

        assert isinstance(result, Ok)
        assert result.value.name == "relicta"
        assert result.value.read_bytes() == b"relicta"
        assert h.cache.find("relicta", "latest", "x86_64") is None
        assert h.console.find("Detected platform: Linux/x86_64")

    @pytest.mark.skipif(sys.platform == "win32", reason="POSIX permissions")
    def test_binary_is_executable(self, tmp_path: Path) -> None:
        h = _Harness(tmp_path)
        h.serve_main("latest")

        binary = h.service.install_main("latest").unwrap()

        assert binary is not None
        assert os.access(binary, os.X_OK)

    def test_versioned_install_is_cached(self, tmp_path: Path) -> None:
        h = _Harness(tmp_path)
        h.serve_main("v1.2.3")

        result = h.service.install_main("v1.2.3")

        cached = h.cache.find("relicta", "v1.2.3", "x86_64")
        assert cached is not None
        assert result == Ok(cached / "relicta_Linux_x86_64" / "relicta")
        assert list((tmp_path / "tmp").iterdir()) == []

    def test_cache_hit_skips_network(self, tmp_path: Path) -> None:
        h = _Harness(tmp_path)
        h.serve_main("v1.2.3")
        first = h.service.install_main("v1.2.3").unwrap()
        h.http.calls.clear()

        second = h.service.install_main("v1.2.3")

        assert second == Ok(first)
        assert h.http.calls == []
        assert h.console.find("Found cached relicta")

    def test_cache_hit_without_binary_redownloads(self, tmp_path: Path) -> None:
        h = _Harness(tmp_path)
        h.serve_main("v1.2.3")
        first = h.service.install_main("v1.2.3").unwrap()
        assert first is not None
        first.unlink()
        h.http.calls.clear()

        result = h.service.install_main("v1.2.3")

        assert isinstance(result, Ok)
        assert result.value.exists()
        assert h.console.find("warning: Cached binary not found, re-downloading...")
        assert len(h.http.urls("download")) == 1

    @pytest.mark.skipif(sys.platform == "win32", reason="symlinks need privileges")
    def test_symlinked_cache_entry_is_replaced(self, tmp_path: Path) -> None:
        h = _Harness(tmp_path)
        h.serve_main("v1.2.3")
        elsewhere = tmp_path / "elsewhere"
        elsewhere.mkdir()
        entry = h.cache.entry_dir("relicta", "v1.2.3", "x86_64")
        entry.parent.mkdir(parents=True)
        entry.symlink_to(elsewhere, target_is_directory=True)
        (entry.parent / "x86_64.complete").write_text("{}")

        result = h.service.install_main("v1.2.3")

        assert isinstance(result, Ok)
        assert result.value.read_bytes() == b"relicta"
        assert not entry.is_symlink()
        assert elsewhere.is_dir()
        assert h.console.find("Cached binary not found, re-downloading...")

    def test_stale_entry_eviction_failure_is_not_fatal(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        h = _Harness(tmp_path)
        h.serve_main("v1.2.3")
        h.service.install_main("v1.2.3").unwrap().unlink()
        entry = h.cache.entry_dir("relicta", "v1.2.3", "x86_64")
        monkeypatch.setattr(
            h.cache, "evict", lambda *_: Err(CacheError(path=entry, message="cache evict failed"))
        )

        result = h.service.install_main("v1.2.3")

        assert isinstance(result, Ok)
        assert result.value.read_bytes() == b"relicta"
        assert h.console.find("warning: Could not remove stale cache entry: cache evict failed")

    def test_cache_store_failure_is_not_fatal(self, tmp_path: Path) -> None:
        h = _Harness(tmp_path)
        h.settings.tool_cache_dir.write_text("not a directory")
        h.serve_main("v1.2.3")

        result = h.service.install_main("v1.2.3")

        assert isinstance(result, Ok)
        assert result.value.read_bytes() == b"relicta"
        assert result.value.is_relative_to(h.settings.temp_dir)
        assert h.console.find("warning: Could not cache relicta: cache store failed")

    def test_binary_at_archive_root(self, tmp_path: Path) -> None:
        h = _Harness(tmp_path)
        h.serve_main("latest", prefix="")

        result = h.service.install_main("latest")

        assert isinstance(result, Ok)
        assert result.value.parent.name == "extracted"

    def test_windows_zip(self, tmp_path: Path) -> None:
        h = _Harness(tmp_path, WINDOWS)
        h.serve_main("latest", prefix="")

        result = h.service.install_main("latest")

        assert isinstance(result, Ok)
        assert result.value.name == "relicta.exe"
        assert h.http.urls("download")[0].endswith("relicta_Windows_x86_64.zip")

    def test_binary_missing_from_archive(self, tmp_path: Path) -> None:
        h = _Harness(tmp_path)
        info = main_download_info("latest", LINUX, h.settings)
        serve_artifact(h.http, info, {"README.md": b"docs"})

        result = h.service.install_main("latest")

        assert isinstance(result, Err)
        assert isinstance(result.error, BinaryNotFound)
        assert result.error.name == "relicta"

    def test_download_failure(self, tmp_path: Path) -> None:
        h = _Harness(tmp_path)

        result = h.service.install_main("v9.9.9")

        assert isinstance(result, Err)
        assert isinstance(result.error, DownloadFailed)
        assert result.error.status == 404

    def test_checksum_mismatch(self, tmp_path: Path) -> None:
        h = _Harness(tmp_path)
        h.serve_main("v1.2.3")
        info = main_download_info("v1.2.3", LINUX, h.settings)
        h.http.set_text(info.checksum_url, f"{'f' * 64}  {info.filename}\n")

        result = h.service.install_main("v1.2.3")

        assert isinstance(result, Err)
        assert isinstance(result.error, ChecksumMismatch)
        assert h.cache.find("relicta", "v1.2.3", "x86_64") is None


class TestInstallPlugins:
    def test_no_plugins(self, tmp_path: Path) -> None:
        h = _Harness(tmp_path)
        report = h.service.install_plugins("latest", (), tmp_path / "bin" / "relicta")
        assert report == PluginReport()
        assert h.http.calls == []

    def test_installs_with_naming_convention(self, tmp_path: Path) -> None:
        h = _Harness(tmp_path)
        h.serve_plugin("github", "v1.2.3")
        binary = tmp_path / "bin" / "relicta"

        report = h.service.install_plugins("v1.2.3", ("github",), binary)

        assert report.ok
        assert report.installed == ("github",)
        assert report.plugins_dir == tmp_path / "bin" / "plugins"
        assert (tmp_path / "bin" / "plugins" / "relicta-github").read_bytes() == b"github"
        assert h.console.find("OK Installed plugin github")

    def test_windows_plugin_name(self, tmp_path: Path) -> None:
        h = _Harness(tmp_path, WINDOWS)
        h.serve_plugin("slack", "latest")

        report = h.service.install_plugins("latest", ("slack",), tmp_path / "relicta.exe")

        assert report.installed == ("slack",)
        assert (tmp_path / "plugins" / "relicta-slack.exe").exists()

    def test_one_failure_does_not_block_others(self, tmp_path: Path) -> None:
        h = _Harness(tmp_path)
        h.serve_plugin("github", "v1.2.3")
        h.serve_plugin("jira", "v1.2.3")
        slack = plugin_download_info("slack", "v1.2.3", LINUX, h.settings)
        h.http.set_download(slack.url, HttpError(url=slack.url, status=500, message="boom"))

        names = ("github", "slack", "jira")
        report = h.service.install_plugins("v1.2.3", names, tmp_path / "relicta")

        assert report.installed == ("github", "jira")
        assert [f.name for f in report.failed] == ["slack"]
        assert not report.ok
        assert h.console.find("warning: Failed to install plugin slack")
        assert not h.console.has_error()
        plugins = tmp_path / "plugins"
        assert sorted(p.name for p in plugins.iterdir()) == ["relicta-github", "relicta-jira"]

    def test_all_plugins_attempted_in_order(self, tmp_path: Path) -> None:
        h = _Harness(tmp_path)

        report = h.service.install_plugins("v1.2.3", ("a", "b", "c"), tmp_path / "relicta")

        assert [f.name for f in report.failed] == ["a", "b", "c"]
        downloads = h.http.urls("download")
        assert [url.rsplit("/", 1)[1] for url in downloads] == [
            "a_linux_x86_64.tar.gz",
            "b_linux_x86_64.tar.gz",
            "c_linux_x86_64.tar.gz",
        ]

    def test_invalid_name_rejected_without_download(self, tmp_path: Path) -> None:
        h = _Harness(tmp_path)

        report = h.service.install_plugins("latest", ("../evil",), tmp_path / "relicta")

        assert [f.name for f in report.failed] == ["../evil"]
        assert h.http.calls == []

    def test_plugin_binary_missing(self, tmp_path: Path) -> None:
        h = _Harness(tmp_path)
        info = plugin_download_info("github", "latest", LINUX, h.settings)
        serve_artifact(h.http, info, {"README.md": b"docs"})

        report = h.service.install_plugins("latest", ("github",), tmp_path / "relicta")

        assert report.failed[0].message.startswith("Binary github not found")

    def test_work_dirs_removed(self, tmp_path: Path) -> None:
        h = _Harness(tmp_path)
        h.serve_plugin("github", "latest")

        h.service.install_plugins("latest", ("github",), tmp_path / "bin" / "relicta")

        assert list((tmp_path / "tmp").iterdir()) == []

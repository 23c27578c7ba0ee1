"""Install the relicta binary and its plugins.

The main binary is required: any failure aborts the run. Plugins are
optional extras: each one is installed independently and a failure only
produces a warning, so one broken plugin release never blocks a release.
"""

from __future__ import annotations

import re
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from relicta_action.core.action_errors import ActionError, BinaryNotFound, InvalidInput
from relicta_action.core.result import Err, Ok, Result
from relicta_action.output.errors import describe_action_error
from relicta_action.platform.files import make_executable
from relicta_action.tools.artifacts import main_download_info, plugin_download_info
from relicta_action.tools.locate import locate_binary, locate_plugin_binary

if TYPE_CHECKING:
    from relicta_action.core.settings import Settings
    from relicta_action.output.console import ConsoleProtocol
    from relicta_action.platform.detection import HostPlatform
    from relicta_action.tools.cache import ToolCache
    from relicta_action.tools.pipeline import ArtifactPipeline

__all__ = ["InstallService", "PluginFailure", "PluginReport"]

_PLUGIN_NAME = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")


@dataclass(frozen=True, slots=True)
class PluginFailure:
    name: str
    message: str


@dataclass(frozen=True, slots=True)
class PluginReport:
    """Outcome of a plugin install pass.

    Attributes:
        plugins_dir: Directory the plugins were installed into (None if no plugins requested)
        installed: Plugins installed, in request order
        failed: Plugins that could not be installed, in request order
    """

    plugins_dir: Path | None = None
    installed: tuple[str, ...] = field(default_factory=tuple)
    failed: tuple[PluginFailure, ...] = field(default_factory=tuple)

    @property
    def ok(self) -> bool:
        return not self.failed


class InstallService:
    def __init__(
        self,
        *,
        settings: Settings,
        platform: HostPlatform,
        pipeline: ArtifactPipeline,
        cache: ToolCache,
        console: ConsoleProtocol,
    ) -> None:
        self._settings = settings
        self._platform = platform
        self._pipeline = pipeline
        self._cache = cache
        self._console = console

    @property
    def binary_name(self) -> str:
        return self._platform.exe_name(self._settings.tool)

    def _from_cache(self, version: str) -> Path | None:
        tool = self._settings.tool
        arch = str(self._platform.arch)
        cached = self._cache.find(tool, version, arch)
        if cached is None:
            return None

        entry = self._cache.read_entry(tool, version, arch)
        when = f" (cached {entry.installed_at})" if entry else ""
        self._console.info(f"Found cached {tool} at {cached}{when}")

        binary = locate_binary(cached, self.binary_name, tool)
        if binary is not None:
            return binary

        self._console.warning("Cached binary not found, re-downloading...")
        evicted = self._cache.evict(tool, version, arch)
        if isinstance(evicted, Err):
            self._console.warning(f"Could not remove stale cache entry: {evicted.error}")
        return None

    def install_main(self, version: str) -> Result[Path, ActionError]:
        """Install the main binary and return its path.

        Args:
            version: Release tag (e.g. "v1.2.3") or "latest"

        Returns:
            Ok with the binary path, or Err with the fatal failure
        """
        tool = self._settings.tool
        self._console.info(f"Installing {tool} {version}...")

        cached = self._from_cache(version)
        if cached is not None:
            return Ok(cached)

        self._console.info(f"Detected platform: {self._platform}")
        info = main_download_info(version, self._platform, self._settings)

        extracted = self._pipeline.fetch_verify_extract(info)
        if isinstance(extracted, Err):
            return extracted
        root = extracted.value

        binary = locate_binary(root, self.binary_name, tool)
        if binary is None:
            return Err(BinaryNotFound(name=self.binary_name, searched=root))
        self._console.info(f"Found binary at: {binary}")

        if self._platform.is_unix:
            make_executable(binary)

        if not self._cache.is_cacheable(version):
            return Ok(binary)

        stored = self._cache.store(root, tool, version, str(self._platform.arch))
        if isinstance(stored, Err):
            self._console.warning(f"Could not cache {tool}: {stored.error}")
            return Ok(binary)

        self._console.info(f"Cached {tool} to: {stored.value}")
        self._pipeline.discard(root)
        return Ok(stored.value / binary.relative_to(root))

    def install_plugin(
        self, version: str, name: str, plugins_dir: Path
    ) -> Result[Path, ActionError]:
        """Install one plugin into plugins_dir.

        The installed file is named ``relicta-<name>[.exe]``; relicta only
        loads plugins following that convention.
        """
        if not _PLUGIN_NAME.match(name):
            return Err(
                InvalidInput(
                    name="plugins",
                    value=name,
                    reason="plugin names may only contain letters, digits, '.', '_' and '-'",
                )
            )

        info = plugin_download_info(name, version, self._platform, self._settings)
        extracted = self._pipeline.fetch_verify_extract(info)
        if isinstance(extracted, Err):
            return extracted
        root = extracted.value

        try:
            binary = locate_plugin_binary(root, name, self._platform.exe_suffix)
            if binary is None:
                return Err(BinaryNotFound(name=self._platform.exe_name(name), searched=root))

            target = plugins_dir / self._platform.exe_name(
                f"{self._settings.plugin_binary_prefix}{name}"
            )
            shutil.copyfile(binary, target)
            if self._platform.is_unix:
                make_executable(target)
        finally:
            self._pipeline.discard(root)
        return Ok(target)

    def install_plugins(self, version: str, names: tuple[str, ...], binary: Path) -> PluginReport:
        """Install plugins next to the main binary, isolating failures.

        Args:
            version: Release tag of the plugins, or "latest"
            names: Plugin names, installed in this order
            binary: Path of the installed main binary

        Returns:
            PluginReport; this method never fails as a whole
        """
        if not names:
            return PluginReport()

        plugins_dir = binary.parent / "plugins"
        self._console.info(f"Installing plugins: {', '.join(names)}")
        try:
            plugins_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            message = f"cannot create {plugins_dir}: {e}"
            self._console.warning(f"Failed to install plugins: {message}")
            return PluginReport(
                plugins_dir=plugins_dir,
                failed=tuple(PluginFailure(name=name, message=message) for name in names),
            )

        installed: list[str] = []
        failed: list[PluginFailure] = []
        for name in names:
            try:
                result = self.install_plugin(version, name, plugins_dir)
            except OSError as e:
                failed.append(PluginFailure(name=name, message=str(e)))
                self._console.warning(f"Failed to install plugin {name}: {e}")
                continue

            if isinstance(result, Err):
                message = describe_action_error(result.error)
                failed.append(PluginFailure(name=name, message=message))
                self._console.warning(f"Failed to install plugin {name}: {message}")
                continue

            installed.append(name)
            self._console.success(f"Installed plugin {name}")

        self._console.info(f"Plugins installed to: {plugins_dir}")
        return PluginReport(
            plugins_dir=plugins_dir, installed=tuple(installed), failed=tuple(failed)
        )

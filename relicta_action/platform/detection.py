"""Platform and architecture detection.

relicta release assets are named after Go's GOOS/GOARCH conventions as
rendered by goreleaser: ``Darwin``/``Linux``/``Windows`` and
``x86_64``/``aarch64``. This module maps the host onto those names.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from relicta_action.core.action_errors import UnsupportedArchitecture, UnsupportedPlatform
from relicta_action.core.result import Err, Ok, Result
from relicta_action.platform.environment import HostEnvironment

__all__ = [
    "OsName",
    "Arch",
    "HostPlatform",
    "detect_os",
    "detect_arch",
    "detect_host_platform",
]


class OsName(Enum):
    """Operating system, valued with its release-asset spelling."""

    DARWIN = "Darwin"
    LINUX = "Linux"
    WINDOWS = "Windows"

    def __str__(self) -> str:
        return self.value

    @property
    def is_unix(self) -> bool:
        """Check if this is a Unix-like platform (Linux or macOS)."""
        return self in (OsName.LINUX, OsName.DARWIN)


class Arch(Enum):
    """CPU architecture, valued with its release-asset spelling."""

    X86_64 = "x86_64"
    AARCH64 = "aarch64"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class HostPlatform:
    """Detected platform. Immutable; computed once per run."""

    os: OsName
    arch: Arch

    @property
    def is_windows(self) -> bool:
        return self.os == OsName.WINDOWS

    @property
    def is_unix(self) -> bool:
        return self.os.is_unix

    @property
    def exe_suffix(self) -> str:
        """Executable file suffix for this platform."""
        return ".exe" if self.is_windows else ""

    @property
    def archive_ext(self) -> str:
        """Archive extension used by release assets for this platform."""
        return "zip" if self.is_windows else "tar.gz"

    def exe_name(self, name: str) -> str:
        """Executable name with platform-appropriate suffix.

        Example: exe_name("relicta") -> "relicta.exe" on Windows, "relicta" elsewhere.
        """
        return f"{name}{self.exe_suffix}"

    def __str__(self) -> str:
        return f"{self.os}/{self.arch}"


_ARCH_ALIASES = {
    "x64": Arch.X86_64,
    "x86_64": Arch.X86_64,
    "amd64": Arch.X86_64,
    "arm64": Arch.AARCH64,
    "aarch64": Arch.AARCH64,
}


def detect_os(system: str) -> Result[OsName, UnsupportedPlatform]:
    """Map a ``sys.platform`` value onto OsName."""
    lowered = system.lower()
    if lowered == "darwin":
        return Ok(OsName.DARWIN)
    if lowered.startswith("linux"):
        return Ok(OsName.LINUX)
    if lowered == "win32":
        return Ok(OsName.WINDOWS)
    return Err(UnsupportedPlatform(system=system))


def detect_arch(machine: str) -> Result[Arch, UnsupportedArchitecture]:
    """Map a CPU identifier onto Arch."""
    arch = _ARCH_ALIASES.get(machine.lower())
    if arch is None:
        return Err(UnsupportedArchitecture(machine=machine))
    return Ok(arch)


def detect_host_platform(
    env: HostEnvironment,
) -> Result[HostPlatform, UnsupportedPlatform | UnsupportedArchitecture]:
    """Detect the host platform from an environment provider.

    The OS is checked first, so a host that is unsupported on both counts
    reports UnsupportedPlatform.
    """
    os_result = detect_os(env.system)
    if isinstance(os_result, Err):
        return os_result
    arch_result = detect_arch(env.machine)
    if isinstance(arch_result, Err):
        return arch_result
    return Ok(HostPlatform(os=os_result.value, arch=arch_result.value))

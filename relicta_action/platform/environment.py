"""Host environment provider.

Platform detection and input parsing read process-wide state (``sys.platform``,
the CPU name, environment variables). They take a ``HostEnvironment`` instead
so tests can describe any host without patching globals.
"""

from __future__ import annotations

import os as _os
import platform as _platform
import sys as _sys
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

__all__ = ["HostEnvironment", "ProcessEnvironment", "StaticEnvironment"]


@runtime_checkable
class HostEnvironment(Protocol):
    """Read-only view of the host the action runs on."""

    @property
    def system(self) -> str:
        """OS identifier in ``sys.platform`` form ("linux", "darwin", "win32")."""
        ...

    @property
    def machine(self) -> str:
        """CPU identifier ("x86_64", "AMD64", "arm64", ...)."""
        ...

    @property
    def environ(self) -> Mapping[str, str]:
        """Environment variables."""
        ...


class ProcessEnvironment:
    """The real process environment."""

    @property
    def system(self) -> str:
        return _sys.platform

    @property
    def machine(self) -> str:
        # NOTE: avoid platform.machine() on Windows, it may query WMI (slow/hangs).
        if _sys.platform.startswith(("win32", "cygwin", "msys")):
            return (
                _os.environ.get("PROCESSOR_ARCHITEW6432")
                or _os.environ.get("PROCESSOR_ARCHITECTURE")
                or ""
            )
        return _platform.machine()

    @property
    def environ(self) -> Mapping[str, str]:
        return _os.environ


def _empty_environ() -> dict[str, str]:
    return {}


@dataclass(frozen=True)
class StaticEnvironment:
    """Fixed environment for tests.

    Usage:
        env = StaticEnvironment(system="darwin", machine="arm64")
        assert detect_host_platform(env) == Ok(HostPlatform(OsName.DARWIN, Arch.AARCH64))
    """

    system: str = "linux"
    machine: str = "x86_64"
    environ: Mapping[str, str] = field(default_factory=_empty_environ)

"""Platform abstraction layer."""

from .detection import (
    Arch,
    HostPlatform,
    OsName,
    detect_host_platform,
)
from .environment import (
    HostEnvironment,
    ProcessEnvironment,
    StaticEnvironment,
)
from .process import (
    ProcessError,
    stream,
)

__all__ = [
    # detection
    "Arch",
    "HostPlatform",
    "OsName",
    "detect_host_platform",
    # environment
    "HostEnvironment",
    "ProcessEnvironment",
    "StaticEnvironment",
    # process
    "ProcessError",
    "stream",
]

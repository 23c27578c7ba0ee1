"""Release asset naming and URLs.

relicta and its plugins are distributed via GitHub Releases:
- Assets are named with platform/arch suffixes
- Every release carries a ``checksums.txt`` manifest
- Download URL follows: {host}/{repo}/releases/download/{tag}/{asset}, or
  {host}/{repo}/releases/latest/download/{asset} for the newest release

Plugins are released from their own repositories, ``<owner>/plugin-<name>``,
each with its own checksum manifest.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from relicta_action.core.settings import Settings
    from relicta_action.platform.detection import HostPlatform

__all__ = [
    "LATEST",
    "DownloadInfo",
    "release_asset_url",
    "main_archive_name",
    "main_download_info",
    "plugin_archive_name",
    "plugin_download_info",
]

LATEST = "latest"


@dataclass(frozen=True, slots=True)
class DownloadInfo:
    """Where to fetch one artifact and its checksum manifest.

    Attributes:
        url: Archive URL
        filename: Archive filename, also its key in the checksum manifest
        checksum_url: Checksum manifest URL of the same release
    """

    url: str
    filename: str
    checksum_url: str


def release_asset_url(repo: str, version: str, filename: str, host: str = "github.com") -> str:
    """Get the download URL of a release asset.

    Args:
        repo: Repository as "owner/name"
        version: Release tag, used verbatim, or "latest"
        filename: Asset filename
        host: Release host

    Returns:
        Full URL to the asset
    """
    if version == LATEST:
        return f"https://{host}/{repo}/releases/latest/download/{filename}"
    return f"https://{host}/{repo}/releases/download/{version}/{filename}"


def main_archive_name(platform: HostPlatform, tool: str) -> str:
    """Archive name of the main binary.

    Example: main_archive_name(Linux/x86_64, "relicta") -> "relicta_Linux_x86_64.tar.gz"
    """
    return f"{tool}_{platform.os}_{platform.arch}.{platform.archive_ext}"


def main_download_info(version: str, platform: HostPlatform, settings: Settings) -> DownloadInfo:
    filename = main_archive_name(platform, settings.tool)
    return DownloadInfo(
        url=release_asset_url(settings.main_repo, version, filename, settings.host),
        filename=filename,
        checksum_url=release_asset_url(
            settings.main_repo, version, settings.checksums_file, settings.host
        ),
    )


def plugin_archive_name(plugin: str, platform: HostPlatform) -> str:
    """Archive name of a plugin; the OS part is lowercase.

    Example: plugin_archive_name("github", Darwin/aarch64) -> "github_darwin_aarch64.tar.gz"
    """
    return f"{plugin}_{platform.os.value.lower()}_{platform.arch}.{platform.archive_ext}"


def plugin_download_info(
    plugin: str, version: str, platform: HostPlatform, settings: Settings
) -> DownloadInfo:
    repo = settings.plugin_repo(plugin)
    filename = plugin_archive_name(plugin, platform)
    return DownloadInfo(
        url=release_asset_url(repo, version, filename, settings.host),
        filename=filename,
        checksum_url=release_asset_url(repo, version, settings.checksums_file, settings.host),
    )

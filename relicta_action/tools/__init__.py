"""Release artifact handling: URLs, downloads, verification, extraction, cache."""

from .artifacts import DownloadInfo, main_download_info, plugin_download_info
from .cache import ToolCache
from .http import HttpClient, HttpError, MockHttpClient, RealHttpClient
from .pipeline import ArtifactPipeline, Verification

__all__ = [
    "ArtifactPipeline",
    "DownloadInfo",
    "HttpClient",
    "HttpError",
    "MockHttpClient",
    "RealHttpClient",
    "ToolCache",
    "Verification",
    "main_download_info",
    "plugin_download_info",
]

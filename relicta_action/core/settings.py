"""Typed settings loading and access.

The defaults describe where relicta and its plugins are published. A TOML
file can override them, which is how the action is pointed at a fork or a
GitHub Enterprise mirror:

    [release]
    owner = "acme"
    repo = "relicta"
    host = "github.example.com"

    [http]
    timeout = 60
    attempts = 5

    [paths]
    tool_cache = "/opt/hostedtoolcache"
    temp = "/tmp/runner"
"""

from __future__ import annotations

import tempfile
from collections.abc import Mapping
from dataclasses import dataclass, replace
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_float, get_int, get_str, get_table

__all__ = [
    "Settings",
    "SettingsError",
    "load_settings",
    "DEFAULT_OWNER",
    "DEFAULT_REPO",
    "DEFAULT_TOOL",
]

DEFAULT_OWNER = "relicta-tech"
DEFAULT_REPO = "relicta"
DEFAULT_TOOL = "relicta"
DEFAULT_HOST = "github.com"
DEFAULT_HTTP_TIMEOUT = 30.0
DEFAULT_DOWNLOAD_ATTEMPTS = 3


@dataclass(frozen=True, slots=True)
class SettingsError:
    """Error when a settings file cannot be loaded or parsed."""

    message: str
    path: Path | None = None


def _default_tool_cache(env: Mapping[str, str]) -> Path:
    runner_cache = env.get("RUNNER_TOOL_CACHE")
    if runner_cache:
        return Path(runner_cache)
    return Path.home() / ".cache" / "relicta-action" / "tool-cache"


def _default_temp(env: Mapping[str, str]) -> Path:
    runner_temp = env.get("RUNNER_TEMP")
    if runner_temp:
        return Path(runner_temp)
    return Path(tempfile.gettempdir())


@dataclass(frozen=True, slots=True)
class Settings:
    """Release coordinates, naming conventions and local directories.

    Attributes:
        owner: GitHub owner of the relicta repository and its plugin repositories
        repo: Repository publishing the main binary
        tool: Binary name, also the archive name prefix
        host: Release host
        checksums_file: Name of the checksum manifest asset in every release
        plugin_repo_prefix: Plugins live in ``<owner>/<prefix><name>``
        plugin_binary_prefix: Installed plugins are named ``<prefix><name>``
        dry_run_env: Variable set to ``true`` for the subprocess on dry runs
        http_timeout: Per-request timeout in seconds
        download_attempts: Attempts per download for transient failures
        tool_cache_dir: Root of the persistent tool cache
        temp_dir: Where downloads and extractions are staged
    """

    owner: str = DEFAULT_OWNER
    repo: str = DEFAULT_REPO
    tool: str = DEFAULT_TOOL
    host: str = DEFAULT_HOST
    checksums_file: str = "checksums.txt"
    plugin_repo_prefix: str = "plugin-"
    plugin_binary_prefix: str = "relicta-"
    dry_run_env: str = "RELICTA_DRY_RUN"
    http_timeout: float = DEFAULT_HTTP_TIMEOUT
    download_attempts: int = DEFAULT_DOWNLOAD_ATTEMPTS
    tool_cache_dir: Path = Path("tool-cache")
    temp_dir: Path = Path("tmp")

    @property
    def main_repo(self) -> str:
        return f"{self.owner}/{self.repo}"

    def plugin_repo(self, plugin: str) -> str:
        return f"{self.owner}/{self.plugin_repo_prefix}{plugin}"

    @classmethod
    def from_env(cls, env: Mapping[str, str]) -> Settings:
        """Default settings with directories taken from the runner environment."""
        return cls(tool_cache_dir=_default_tool_cache(env), temp_dir=_default_temp(env))

    def overlay(self, data: Mapping[str, object]) -> Settings:
        """Return a copy with values from a parsed TOML mapping applied."""
        release: StrDict = get_table(data, "release") or {}
        http: StrDict = get_table(data, "http") or {}
        paths: StrDict = get_table(data, "paths") or {}

        attempts = get_int(http, "attempts")
        if attempts is not None and attempts < 1:
            raise ValueError(f"http.attempts must be >= 1, got {attempts}")
        timeout = get_float(http, "timeout")
        if timeout is not None and timeout <= 0:
            raise ValueError(f"http.timeout must be positive, got {timeout}")

        tool_cache = get_str(paths, "tool_cache")
        temp = get_str(paths, "temp")

        return replace(
            self,
            owner=get_str(release, "owner") or self.owner,
            repo=get_str(release, "repo") or self.repo,
            tool=get_str(release, "tool") or self.tool,
            host=get_str(release, "host") or self.host,
            http_timeout=timeout if timeout is not None else self.http_timeout,
            download_attempts=attempts if attempts is not None else self.download_attempts,
            tool_cache_dir=Path(tool_cache).expanduser() if tool_cache else self.tool_cache_dir,
            temp_dir=Path(temp).expanduser() if temp else self.temp_dir,
        )


def _parse_toml(path: Path) -> Result[StrDict, SettingsError]:
    """Parse a TOML file, handling read and parse errors."""
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(SettingsError("Settings root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(SettingsError(f"Settings file not found: {path}", path=path))
    except PermissionError:
        return Err(SettingsError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(SettingsError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(SettingsError(f"Error reading settings: {e}", path=path))


def load_settings(path: Path | None, env: Mapping[str, str]) -> Result[Settings, SettingsError]:
    """Load settings, overlaying an optional TOML file on the runner defaults.

    Args:
        path: Settings file, or None to use the defaults only
        env: Environment used for the runner directories

    Returns:
        Ok(Settings) on success, Err(SettingsError) on failure
    """
    base = Settings.from_env(env)
    if path is None:
        return Ok(base)

    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(base.overlay(result.value))
    except ValueError as e:
        return Err(SettingsError(f"Invalid settings: {e}", path=path))

"""HTTP client abstraction for release downloads.

This module provides:
- HttpClient: Protocol for HTTP operations (injectable for tests)
- RealHttpClient: Real implementation using urllib, with retries
- MockHttpClient: Mock implementation for testing
"""

from __future__ import annotations

import ssl
import time
import urllib.error
import urllib.request
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from relicta_action import __version__
from relicta_action.core.result import Err, Ok, Result

if TYPE_CHECKING:
    from collections.abc import Callable

__all__ = [
    "HttpClient",
    "RealHttpClient",
    "MockHttpClient",
    "HttpError",
    "is_retryable",
]

# Request timeout, rate limiting and server-side errors are worth another try.
_RETRYABLE_STATUSES = frozenset({408, 429, 500, 502, 503, 504})


@dataclass(frozen=True, slots=True)
class HttpError:
    """HTTP error details.

    Attributes:
        url: The URL that failed
        status: HTTP status code (0 for network errors)
        message: Human-readable error message
    """

    url: str
    status: int
    message: str

    def __str__(self) -> str:
        if self.status:
            return f"HTTP {self.status}: {self.message} ({self.url})"
        return f"{self.message} ({self.url})"


def is_retryable(error: HttpError) -> bool:
    """Network errors (status 0) and transient HTTP statuses are retryable."""
    return error.status == 0 or error.status in _RETRYABLE_STATUSES


@runtime_checkable
class HttpClient(Protocol):
    """The two requests the installer makes: a checksum manifest and an archive."""

    def get_text(self, url: str) -> Result[str, HttpError]:
        """Body of url decoded as UTF-8."""
        ...

    def download(self, url: str, dest: Path) -> Result[Path, HttpError]:
        """Stream url into dest (parents created) and return dest.

        A failed download leaves no file at dest.
        """
        ...


class RealHttpClient:
    """urllib client with system certificates, redirects and retries.

    Release assets are served from a CDN behind a 302, which urllib follows.
    Transient failures are retried with a linear back-off.
    """

    def __init__(
        self,
        timeout: float = 30.0,
        *,
        attempts: int = 3,
        backoff: float = 2.0,
        user_agent: str = f"relicta-action/{__version__}",
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """
        Args:
            timeout: Per-request timeout in seconds
            attempts: Tries per request, at least one
            backoff: Base delay; the wait after try n is backoff * n
            user_agent: Sent with every request
            sleep: Replaced in tests to avoid real waits
        """
        self.timeout = timeout
        self.attempts = max(1, attempts)
        self.backoff = backoff
        self.user_agent = user_agent
        self._sleep = sleep
        self._ssl_context = ssl.create_default_context()

    def _fetch_once(self, url: str, dest: Path | None) -> Result[bytes, HttpError]:
        try:
            req = urllib.request.Request(url, headers={"User-Agent": self.user_agent})
            with urllib.request.urlopen(
                req,
                timeout=self.timeout,
                context=self._ssl_context,
            ) as response:
                if dest is None:
                    return Ok(response.read())

                dest.parent.mkdir(parents=True, exist_ok=True)
                with open(dest, "wb") as f:
                    while chunk := response.read(64 * 1024):
                        f.write(chunk)
                return Ok(b"")
        except urllib.error.HTTPError as e:
            return Err(HttpError(url=url, status=e.code, message=str(e.reason)))
        except urllib.error.URLError as e:
            return Err(HttpError(url=url, status=0, message=str(e.reason)))
        except TimeoutError:
            return Err(HttpError(url=url, status=0, message="Request timed out"))
        except ValueError as e:
            return Err(HttpError(url=url, status=0, message=str(e)))
        except OSError as e:
            return Err(HttpError(url=url, status=0, message=str(e)))

    def _fetch(self, url: str, dest: Path | None = None) -> Result[bytes, HttpError]:
        result = self._fetch_once(url, dest)
        attempt = 1
        while isinstance(result, Err) and is_retryable(result.error) and attempt < self.attempts:
            self._sleep(self.backoff * attempt)
            attempt += 1
            result = self._fetch_once(url, dest)

        if isinstance(result, Err) and dest is not None:
            # no partial files
            dest.unlink(missing_ok=True)
        return result

    def get_text(self, url: str) -> Result[str, HttpError]:
        """Fetch url and decode it as UTF-8."""
        result = self._fetch(url)
        if isinstance(result, Err):
            return result

        try:
            return Ok(result.value.decode("utf-8"))
        except UnicodeDecodeError as e:
            return Err(HttpError(url=url, status=0, message=f"Decode error: {e}"))

    def download(self, url: str, dest: Path) -> Result[Path, HttpError]:
        """Stream url into dest."""
        result = self._fetch(url, dest)
        if isinstance(result, Err):
            return result
        return Ok(dest)


class MockHttpClient:
    """In-memory client answering canned responses per URL.

    URLs without a canned response answer 404. Every request is recorded in
    ``calls``.

    Usage:
        client = MockHttpClient()
        client.set_text("https://example.com/checksums.txt", "abc  file.tar.gz\\n")
        result = client.get_text("https://example.com/checksums.txt")
        assert result == Ok("abc  file.tar.gz\\n")
    """

    def __init__(self) -> None:
        self._texts: dict[str, str | HttpError] = {}
        self._files: dict[str, bytes | HttpError] = {}
        self.calls: list[tuple[str, str]] = []

    def set_text(self, url: str, response: str | HttpError) -> None:
        self._texts[url] = response

    def set_download(self, url: str, response: bytes | HttpError) -> None:
        self._files[url] = response

    def urls(self, kind: str | None = None) -> list[str]:
        """URLs requested so far, optionally only those of one call kind."""
        return [url for call, url in self.calls if kind is None or call == kind]

    @staticmethod
    def _not_found(url: str) -> HttpError:
        return HttpError(url=url, status=404, message="Not found (mock)")

    def get_text(self, url: str) -> Result[str, HttpError]:
        self.calls.append(("get_text", url))
        response = self._texts.get(url)
        if response is None:
            return Err(self._not_found(url))
        if isinstance(response, HttpError):
            return Err(response)
        return Ok(response)

    def download(self, url: str, dest: Path) -> Result[Path, HttpError]:
        """Write the canned bytes for url to dest."""
        self.calls.append(("download", url))
        response = self._files.get(url)
        if response is None:
            return Err(self._not_found(url))
        if isinstance(response, HttpError):
            return Err(response)

        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_bytes(response)
        return Ok(dest)

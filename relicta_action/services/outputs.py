"""Scrape release details from ``relicta publish`` output.

relicta prints human-oriented lines such as:

    Tag: v1.3.0
    Release URL: https://github.com/acme/app/releases/tag/v1.3.0
    Release ID: 123456789

Parsing is best-effort: a line that is missing or phrased differently leaves
the corresponding output unset and is never an error. The parser is a
protocol so a structured output format can replace the patterns later.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Protocol

__all__ = ["ActionOutputs", "OutputParser", "RegexOutputParser"]


@dataclass(frozen=True, slots=True)
class ActionOutputs:
    """Step outputs; None means "not found"."""

    version: str | None = None
    release_url: str | None = None
    tag_name: str | None = None
    release_id: str | None = None

    def as_step_outputs(self) -> dict[str, str]:
        """Outputs keyed by their action output names, unset ones omitted."""
        named = {
            "version": self.version,
            "release-url": self.release_url,
            "tag-name": self.tag_name,
            "release-id": self.release_id,
        }
        return {name: value for name, value in named.items() if value is not None}


class OutputParser(Protocol):
    def parse(self, text: str) -> ActionOutputs: ...


_VERSION = re.compile(r"(?:version|tag):\s*v?(\d+\.\d+\.\d+)", re.IGNORECASE)
_RELEASE_URL = re.compile(r"(?:release url|url):\s*(https://github\.com/\S+)", re.IGNORECASE)
_RELEASE_ID = re.compile(r"(?:release id|id):\s*(\d+)", re.IGNORECASE)


class RegexOutputParser:
    """Default parser; the first match of each pattern wins."""

    def parse(self, text: str) -> ActionOutputs:
        version: str | None = None
        tag_name: str | None = None
        if match := _VERSION.search(text):
            version = match.group(1)
            tag_name = f"v{version}"

        url_match = _RELEASE_URL.search(text)
        id_match = _RELEASE_ID.search(text)
        return ActionOutputs(
            version=version,
            release_url=url_match.group(1) if url_match else None,
            tag_name=tag_name,
            release_id=id_match.group(1) if id_match else None,
        )

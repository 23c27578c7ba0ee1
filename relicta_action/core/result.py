"""Result type for explicit error handling.

Every fallible step of the action (detecting the platform, downloading an
archive, running a relicta subcommand) returns ``Ok(value)`` or ``Err(error)``
instead of raising. Errors are plain dataclasses, so the entry point can
render them and pick an exit code in one place.

Usage:
    def resolve(version: str) -> Result[DownloadInfo, ActionError]:
        platform = detect_host_platform(env)
        if isinstance(platform, Err):
            return platform
        return Ok(main_download_info(version, platform.value, settings))

    match resolve("v1.2.0"):
        case Ok(info):
            print(info.url)
        case Err(error):
            print(f"cannot resolve: {error}")

Steps that must run in order and stop at the first failure chain with
``flat_map``:

    plan(binary).flat_map(lambda _: bump(binary)).flat_map(lambda _: notes(binary))
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TypeGuard, TypeVar

T = TypeVar("T")
U = TypeVar("U")
E = TypeVar("E")
F = TypeVar("F")


@dataclass(frozen=True, slots=True)
class Ok[T]:
    """Successful result carrying ``value``."""

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    def unwrap_or(self, default: T) -> T:
        return self.value

    def map(self, f: Callable[[T], U]) -> Ok[U]:
        """Ok(f(value))."""
        return Ok(f(self.value))

    def map_err(self, f: Callable[[E], F]) -> Ok[T]:
        return self

    def flat_map(self, f: Callable[[T], Result[U, E]]) -> Result[U, E]:
        """Run the next fallible step on the value and return its Result."""
        return f(self.value)

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err[E]:
    """Failed result carrying ``error``."""

    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> None:
        """Always raises ValueError; check the variant first."""
        raise ValueError(f"called unwrap on Err: {self.error}")

    def unwrap_or(self, default: T) -> T:
        return default

    def map(self, f: Callable[[T], U]) -> Err[E]:
        return self

    def map_err(self, f: Callable[[E], F]) -> Err[F]:
        """Err(f(error))."""
        return Err(f(self.error))

    def flat_map(self, f: Callable[[T], Result[U, E]]) -> Err[E]:
        """f is never called."""
        return self

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


type Result[T, E] = Ok[T] | Err[E]


def is_ok[T, E](result: Result[T, E]) -> TypeGuard[Ok[T]]:
    """Narrow to Ok for type checkers."""
    return isinstance(result, Ok)


def is_err[T, E](result: Result[T, E]) -> TypeGuard[Err[E]]:
    """Narrow to Err for type checkers."""
    return isinstance(result, Err)

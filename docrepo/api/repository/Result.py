"""Explicit per-call outcome returned by the ``try_*`` repository operations."""

from dataclasses import dataclass
from typing import Generic, TypeVar

from .errors import RepositoryError

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    """Value of an operation plus the error that stopped it, if any.

    ``value`` carries the operation's fallback on failure (``None`` for
    lookups, ``False`` for boolean writes).
    """

    value: T | None = None
    error: RepositoryError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T | None = None) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: RepositoryError, value: T | None = None) -> "Result[T]":
        return cls(value=value, error=error)

    def unwrap(self) -> T | None:
        """Return the value, raising the recorded error if there is one."""
        if self.error is not None:
            raise self.error
        return self.value

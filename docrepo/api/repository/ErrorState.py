"""Immutable holder of the last error recorded by a repository."""

from dataclasses import dataclass

from .errors import RepositoryError, innermost_exception


@dataclass(frozen=True)
class ErrorState:
    message: str = ""
    cause: BaseException | None = None

    @classmethod
    def empty(cls) -> "ErrorState":
        return cls()

    @classmethod
    def from_message(cls, message: str | None) -> "ErrorState":
        if not message:
            return cls.empty()
        return cls(message=message, cause=RepositoryError(message))

    @classmethod
    def from_exception(cls, exc: BaseException, check_inner: bool = False) -> "ErrorState":
        """Build the state for ``exc``, optionally unwrapped to its innermost cause."""
        cause = innermost_exception(exc) if check_inner else exc
        return cls(message=str(cause) or type(cause).__name__, cause=cause)

    @property
    def has_error(self) -> bool:
        return bool(self.message)

    def __bool__(self) -> bool:
        return self.has_error

"""Repository error taxonomy."""


class RepositoryError(Exception):
    """Base class for all errors raised or recorded by a repository."""


class DocumentNotFoundError(RepositoryError):
    """No document matched; surfaced to callers as a ``None`` result."""


class EntityValidationError(RepositoryError, ValueError):
    """A required argument is missing or an entity failed validation."""


class ParseError(RepositoryError, ValueError):
    """A query or document string could not be parsed."""


class DriverError(RepositoryError):
    """The database driver reported a failure."""

    @classmethod
    def wrap(cls, exc: BaseException) -> "DriverError":
        """Wrap a driver exception, keeping it as ``__cause__``."""
        error = cls(str(exc) or type(exc).__name__)
        error.__cause__ = exc
        return error


def innermost_exception(exc: BaseException) -> BaseException:
    """Follow the ``__cause__``/``__context__`` chain down to the original exception."""
    seen = {id(exc)}
    current = exc
    while True:
        nested = current.__cause__
        if nested is None and not current.__suppress_context__:
            nested = current.__context__
        if nested is None or id(nested) in seen:
            return current
        seen.add(id(nested))
        current = nested

"""docrepo - typed document repositories over MongoDB."""

from .api.database import Context, DatabaseConfig
from .api.repository import (
    DocumentNotFoundError,
    DocumentRepository,
    DriverError,
    Entity,
    EntityValidationError,
    ErrorState,
    HasId,
    ParseError,
    RepositoryError,
    Result,
    SaveResult,
)

__all__ = [
    "Context",
    "DatabaseConfig",
    "DocumentNotFoundError",
    "DocumentRepository",
    "DriverError",
    "Entity",
    "EntityValidationError",
    "ErrorState",
    "HasId",
    "ParseError",
    "RepositoryError",
    "Result",
    "SaveResult",
]

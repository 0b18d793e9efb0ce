"""Document repository: typed CRUD over a single collection."""

from .DocumentRepository import DocumentRepository, default_collection_name
from .DocumentSequence import DocumentSequence
from .Entity import Entity
from .errors import (
    DocumentNotFoundError,
    DriverError,
    EntityValidationError,
    ParseError,
    RepositoryError,
)
from .ErrorState import ErrorState
from .generate_id import generate_id
from .HasId import HasId
from .parse_document import parse_document
from .pluralize import pluralize
from .Result import Result
from .SaveResult import SaveResult
from .to_strict_json import to_strict_json

__all__ = [
    "DocumentNotFoundError",
    "DocumentRepository",
    "DocumentSequence",
    "DriverError",
    "Entity",
    "EntityValidationError",
    "ErrorState",
    "HasId",
    "ParseError",
    "RepositoryError",
    "Result",
    "SaveResult",
    "default_collection_name",
    "generate_id",
    "parse_document",
    "pluralize",
    "to_strict_json",
]

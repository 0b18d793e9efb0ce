"""Generic document repository: binds an entity type to a collection."""

import logging
from collections.abc import Mapping, MutableMapping
from typing import Any, Generic, TypeVar

from bson import ObjectId
from bson.errors import BSONError
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from pymongo.errors import PyMongoError

from ...constants import (
    ENTITY_REQUIRED,
    INVALID_DELETE_KEY,
    INVALID_LOAD_KEY,
    NO_ENTITY_TO_SAVE,
    NO_MATCH_FOUND,
)
from ..database.Context import Context
from ..database.DatabaseConfig import DatabaseConfig
from ..database.DatabaseHandle import DatabaseHandle
from .DocumentSequence import DocumentSequence
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

logger = logging.getLogger(__name__)

TEntity = TypeVar("TEntity")
T = TypeVar("T")

_DRIVER_ERRORS = (PyMongoError, BSONError)


def default_collection_name(entity_cls: type) -> str:
    """Collection name for ``entity_cls``: its ``collection_name`` or its pluralized class name."""
    if entity_cls is dict:
        raise ValueError("collection_name is required when the repository works with raw documents")
    declared = getattr(entity_cls, "collection_name", None)
    if isinstance(declared, str) and declared:
        return declared
    return pluralize(entity_cls.__name__)


def _is_valid_key(key: Any) -> bool:
    if isinstance(key, bool):
        return False
    if isinstance(key, str):
        return bool(key)
    return isinstance(key, (int, ObjectId))


class DocumentRepository(Generic[TEntity]):
    """CRUD operations for one entity type stored in one collection.

    Operations that can fail return ``None``/``False`` and record the error
    (``last_error_message``) instead of raising; misuse such as saving
    ``None`` raises. Each ``try_*`` variant returns an explicit ``Result``
    and leaves the recorded error untouched.

    Args:
        entity_cls: Entity model class (an ``Entity`` or any pydantic model; an ``id``
            field is stored as ``_id``) or ``dict`` for raw documents.
        collection_name: Collection to bind (default: pluralized entity class name).
        database_name: Database to use (default: the configured database).
        connection_string: MongoDB URI; when given, no config file is read.
        context: An open ``Context`` owned by the caller.

    Example:
        ```python
        class User(Entity):
            name: str

        with DocumentRepository(User, connection_string="mongodb://localhost:27017", database_name="app") as users:
            users.save(User(id="u1", name="Alice"))
            alice = users.load("u1")
            if not users.delete("u1"):
                print(users.last_error_message)
        ```
    """

    context_class: type[Context] = Context

    # Run validate() before each full-featured save()
    auto_validate: bool = False

    def __init__(
        self,
        entity_cls: type[TEntity],
        collection_name: str | None = None,
        database_name: str | None = None,
        connection_string: str | None = None,
        context: Context | None = None,
    ):
        self.entity_cls = entity_cls
        self.collection_name = collection_name or default_collection_name(entity_cls)
        self._error = ErrorState.empty()

        if context is None:
            context = self._create_context(database_name, connection_string)
            self._owns_context = True
        elif not context.is_open:
            context.open()
            self._owns_context = True
        else:
            self._owns_context = False
        self.context = context

        try:
            self.database: DatabaseHandle = context.get_database(database_name)
            self.collection = self._open_collection(self.collection_name)
        except Exception:
            self.close()
            raise

        self.initialize()

    def _create_context(self, database_name: str | None, connection_string: str | None) -> Context:
        if connection_string:
            if not database_name:
                raise ValueError("database_name is required when a connection_string is given")
            database_config = DatabaseConfig.from_connection_string(connection_string, database_name)
        else:
            from ..config.DocRepoConfig import DocRepoConfig

            database_config = DocRepoConfig.load().database
            if database_name:
                database_config = database_config.model_copy(update={"name": database_name})
        return self.context_class(database_config).open()

    def _open_collection(self, collection_name: str) -> Any:
        if not self.database.collection_exists(collection_name):
            logger.info(f"Creating collection {self.database.name}.{collection_name}")
            return self.database.create_collection(collection_name)
        return self.database.get_collection(collection_name)

    def initialize(self) -> None:
        """Hook run at the end of construction, once the collection is open."""

    def close(self) -> None:
        """Close the context if this repository opened it."""
        if self._owns_context:
            self._owns_context = False
            self.context.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    # ------------------------------------------------------------------
    # Error state
    # ------------------------------------------------------------------

    @property
    def last_error(self) -> ErrorState:
        return self._error

    @property
    def last_error_message(self) -> str:
        return self._error.message

    @property
    def error_exception(self) -> BaseException | None:
        return self._error.cause

    def set_error(self, error: str | BaseException | None = None, check_inner: bool = False) -> None:
        """Record an error message or exception; ``None`` or an empty message clears it.

        Args:
            error: Message or exception to record
            check_inner: Record the innermost exception of the cause chain instead
        """
        if isinstance(error, BaseException):
            self._error = ErrorState.from_exception(error, check_inner=check_inner)
        else:
            self._error = ErrorState.from_message(error)
        if self._error:
            logger.warning(f"{type(self).__name__}[{self.collection_name}]: {self._error.message}")

    def clear_error(self) -> None:
        self._error = ErrorState.empty()

    def _record(self, result: Result[T]) -> T | None:
        if result.error is not None:
            # Driver failures are reported by their innermost cause
            self.set_error(result.error, check_inner=isinstance(result.error, DriverError))
        return result.value

    def __str__(self) -> str:
        if self._error:
            return f"Error: {self._error.message}"
        return f"{type(self).__name__}({self.database.name}.{self.collection_name})"

    # ------------------------------------------------------------------
    # Conversion helpers
    # ------------------------------------------------------------------

    def _get_collection(self, collection_name: str | None) -> Any:
        if not collection_name or collection_name == self.collection_name:
            return self.collection
        return self.database.get_collection(collection_name)

    @staticmethod
    def _to_entity(entity_cls: type[T], document: dict[str, Any] | None) -> T | None:
        """Convert a stored document to ``entity_cls``.

        Raises:
            EntityValidationError: If the document does not fit the model
        """
        if document is None:
            return None
        if entity_cls is dict:
            return document  # type: ignore[return-value]
        fields = entity_cls.model_fields  # type: ignore[attr-defined]
        if "_id" in document and "id" in fields and "id" not in document:
            document = {"id": document["_id"], **{k: v for k, v in document.items() if k != "_id"}}
        try:
            return entity_cls.model_validate(document)  # type: ignore[attr-defined]
        except PydanticValidationError as e:
            raise EntityValidationError(f"Cannot load document as {entity_cls.__name__}: {e}") from e

    @staticmethod
    def _model_document(model: BaseModel, **dump_options: Any) -> dict[str, Any]:
        # Models without an ``_id`` alias store their ``id`` field as ``_id``
        document = model.model_dump(by_alias=True, **dump_options)
        if "_id" not in document and "id" in document:
            document["_id"] = document.pop("id")
        return document

    @staticmethod
    def _to_document(entity: Any) -> dict[str, Any]:
        if isinstance(entity, BaseModel):
            return DocumentRepository._model_document(entity)
        if isinstance(entity, Mapping):
            return dict(entity)
        raise TypeError(f"Cannot convert {type(entity).__name__} to a document")

    def get_query_from_string(self, json_query: str) -> dict[str, Any]:
        """Create a filter document from a mongo shell query string.

        Raises:
            ParseError: If the string is empty or malformed
        """
        return parse_document(json_query)

    @staticmethod
    def _build_query(query: Any) -> dict[str, Any]:
        if query is None:
            return {}
        if isinstance(query, str):
            return parse_document(query)
        if isinstance(query, BaseModel):
            return DocumentRepository._model_document(query, exclude_none=True)
        if isinstance(query, Mapping):
            return dict(query)
        raise TypeError(f"Unsupported query type: {type(query).__name__}")

    def _query_or_raise(self, query: Any) -> dict[str, Any]:
        try:
            return self._build_query(query)
        except ParseError as e:
            self.set_error(e)
            raise

    # ------------------------------------------------------------------
    # Finders
    # ------------------------------------------------------------------

    def try_find_one(self, query: Any, collection_name: str | None = None) -> Result[TEntity]:
        return self.try_find_one_as(self.entity_cls, query, collection_name)

    def try_find_one_as(self, entity_cls: type[T], query: Any, collection_name: str | None = None) -> Result[T]:
        try:
            filter = self._build_query(query)
        except ParseError as e:
            return Result.failure(e)
        try:
            document = self._get_collection(collection_name).find_one(filter)
        except _DRIVER_ERRORS as e:
            return Result.failure(DriverError.wrap(e))
        try:
            return Result.success(self._to_entity(entity_cls, document))
        except EntityValidationError as e:
            return Result.failure(e)

    def find_one(self, query: Any, collection_name: str | None = None) -> TEntity | None:
        """Return the first entity matching ``query`` or ``None``; zero matches is not an error."""
        return self.find_one_as(self.entity_cls, query, collection_name)

    def find_one_as(self, entity_cls: type[T], query: Any, collection_name: str | None = None) -> T | None:
        return self._record(self.try_find_one_as(entity_cls, self._query_or_raise(query), collection_name))

    def find(
        self, query: Any, collection_name: str | None = None, skip: int = -1, limit: int = -1
    ) -> DocumentSequence[TEntity]:
        return self.find_as(self.entity_cls, query, collection_name, skip, limit)

    def find_as(
        self, entity_cls: type[T], query: Any, collection_name: str | None = None, skip: int = -1, limit: int = -1
    ) -> DocumentSequence[T]:
        filter = self._query_or_raise(query)
        return DocumentSequence(
            self._get_collection(collection_name),
            filter,
            lambda document: self._to_entity(entity_cls, document),
            skip=skip,
            limit=limit,
        )

    def find_all(self, collection_name: str | None = None) -> DocumentSequence[TEntity]:
        """Lazy, restartable sequence over every document in the collection."""
        return self.find_as(self.entity_cls, {}, collection_name)

    def find_all_as(self, entity_cls: type[T], collection_name: str | None = None) -> DocumentSequence[T]:
        return self.find_as(entity_cls, {}, collection_name)

    def find_from_string(
        self, json_query: str, collection_name: str | None = None, skip: int = -1, limit: int = -1
    ) -> DocumentSequence[TEntity]:
        """Query with a mongo shell query string.

        Raises:
            ParseError: If the string is malformed (also recorded as the last error)
        """
        return self.find_as(self.entity_cls, self._parse_or_raise(json_query), collection_name, skip, limit)

    def find_from_string_as(
        self, entity_cls: type[T], json_query: str, collection_name: str | None = None, skip: int = -1, limit: int = -1
    ) -> DocumentSequence[T]:
        return self.find_as(entity_cls, self._parse_or_raise(json_query), collection_name, skip, limit)

    def try_find_one_from_string(self, json_query: str, collection_name: str | None = None) -> Result[TEntity]:
        try:
            filter = parse_document(json_query)
        except ParseError as e:
            return Result.failure(e)
        return self.try_find_one(filter, collection_name)

    def find_one_from_string(self, json_query: str, collection_name: str | None = None) -> TEntity | None:
        """Find a single entity with a mongo shell query string such as ``{ name: 'Alice' }``."""
        return self.find_one_as(self.entity_cls, self._parse_or_raise(json_query), collection_name)

    def find_one_from_string_as(
        self, entity_cls: type[T], json_query: str, collection_name: str | None = None
    ) -> T | None:
        return self.find_one_as(entity_cls, self._parse_or_raise(json_query), collection_name)

    def find_one_from_string_json(self, json_query: str, collection_name: str | None = None) -> str | None:
        """Find a single raw document and return it as strict JSON, or ``None``."""
        document = self.find_one_as(dict, self._parse_or_raise(json_query), collection_name)
        if document is None:
            return None
        return to_strict_json(document)

    def find_from_string_json(
        self, json_query: str, collection_name: str | None = None, skip: int = -1, limit: int = -1
    ) -> str | None:
        """Find raw documents and return them as a strict JSON array.

        Returns ``None`` and records the error when the driver fails.
        """
        documents = self.find_as(dict, self._parse_or_raise(json_query), collection_name, skip, limit)
        try:
            return to_strict_json(documents.to_list())
        except _DRIVER_ERRORS as e:
            self.set_error(DriverError.wrap(e), check_inner=True)
            return None

    def find_from_object(self, query_object: Any, collection_name: str | None = None) -> DocumentSequence[TEntity]:
        """Query with a mapping or model whose structure is a mongo query document."""
        return self.find_as(self.entity_cls, self._object_query(query_object), collection_name)

    def find_from_object_as(
        self, entity_cls: type[T], query_object: Any, collection_name: str | None = None
    ) -> DocumentSequence[T]:
        return self.find_as(entity_cls, self._object_query(query_object), collection_name)

    @staticmethod
    def _object_query(query_object: Any) -> dict[str, Any]:
        if isinstance(query_object, str) or query_object is None:
            raise TypeError("query_object must be a mapping or a model, not a string or None")
        return DocumentRepository._build_query(query_object)

    def _parse_or_raise(self, json_query: str) -> dict[str, Any]:
        try:
            return parse_document(json_query)
        except ParseError as e:
            self.set_error(e)
            raise

    # ------------------------------------------------------------------
    # Load by id
    # ------------------------------------------------------------------

    def try_load(self, id: str | int | ObjectId) -> Result[TEntity]:
        if not _is_valid_key(id):
            return Result.failure(EntityValidationError(INVALID_LOAD_KEY))
        try:
            document = self.collection.find_one({"_id": id})
        except _DRIVER_ERRORS as e:
            return Result.failure(DriverError.wrap(e))
        if document is None:
            return Result.failure(DocumentNotFoundError(NO_MATCH_FOUND))
        try:
            return Result.success(self._to_entity(self.entity_cls, document))
        except EntityValidationError as e:
            return Result.failure(e)

    def load(self, id: str | int | ObjectId) -> TEntity | None:
        """Load an entity by its id.

        Returns ``None`` and records "No match found." when nothing matches.
        """
        return self._record(self.try_load(id))

    def load_where(self, query: Any) -> TEntity | None:
        """Load the first entity matching ``query``; clears the last error first."""
        self.clear_error()
        return self.find_one(query)

    def load_json(self, id: str | int | ObjectId, collection_name: str | None = None) -> str | None:
        """Load a raw document by id and return it as strict JSON."""
        if not _is_valid_key(id):
            self.set_error(INVALID_LOAD_KEY)
            return None
        result = self.try_find_one_as(dict, {"_id": id}, collection_name)
        if result.ok and result.value is None:
            result = Result.failure(DocumentNotFoundError(NO_MATCH_FOUND))
        document = self._record(result)
        if document is None:
            return None
        return to_strict_json(document)

    # ------------------------------------------------------------------
    # Save
    # ------------------------------------------------------------------

    def validate(self, entity: TEntity) -> None:
        """Validate ``entity`` before a full-featured save.

        Raises:
            EntityValidationError: If the entity is invalid
        """
        if isinstance(entity, BaseModel):
            try:
                type(entity).model_validate(entity.model_dump(by_alias=True))
            except PydanticValidationError as e:
                raise EntityValidationError(str(e)) from e

    def on_before_save(self, entity: TEntity) -> bool:
        """Hook run before a full-featured save; return False to cancel it."""
        return True

    def on_after_save(self, entity: TEntity) -> None:
        """Hook run after a successful full-featured save."""

    def _upsert(self, collection: Any, entity: Any) -> dict[str, Any]:
        document = self._to_document(entity)
        if document.get("_id") is not None:
            collection.replace_one({"_id": document["_id"]}, document, upsert=True)
        else:
            document.pop("_id", None)
            collection.insert_one(document)
            if isinstance(entity, MutableMapping):
                entity["_id"] = document["_id"]
        return document

    def try_save(self, entity: TEntity, collection_name: str | None = None) -> Result[bool]:
        if entity is None:
            raise EntityValidationError(ENTITY_REQUIRED)
        if self.auto_validate:
            try:
                self.validate(entity)
            except EntityValidationError as e:
                return Result.failure(e, value=False)
        if not self.on_before_save(entity):
            return Result.failure(RepositoryError("Save cancelled by on_before_save."), value=False)
        try:
            self._upsert(self._get_collection(collection_name), entity)
        except _DRIVER_ERRORS as e:
            return Result.failure(DriverError.wrap(e), value=False)
        self.on_after_save(entity)
        return Result.success(True)

    def save(self, entity: TEntity, collection_name: str | None = None) -> bool:
        """Upsert ``entity`` by id, running validation and the save hooks.

        Raises:
            EntityValidationError: If ``entity`` is None
        """
        return bool(self._record(self.try_save(entity, collection_name)))

    def try_save_as(self, entity: Any, collection_name: str | None = None) -> Result[bool]:
        if entity is None:
            return Result.failure(EntityValidationError(NO_ENTITY_TO_SAVE), value=False)
        collection = self.database.get_collection(collection_name or pluralize(type(entity).__name__))
        try:
            self._upsert(collection, entity)
        except _DRIVER_ERRORS as e:
            return Result.failure(DriverError.wrap(e), value=False)
        return Result.success(True)

    def save_as(self, entity: Any, collection_name: str | None = None) -> bool:
        """Upsert an entity of any type without validation or save hooks.

        The default collection is the pluralized class name of ``entity``.
        """
        return bool(self._record(self.try_save_as(entity, collection_name)))

    def try_save_from_json(self, entity_json: str | None, collection_name: str | None = None) -> Result[SaveResult]:
        if entity_json is None or not entity_json.strip():
            return Result.failure(EntityValidationError(NO_ENTITY_TO_SAVE))
        try:
            document = parse_document(entity_json)
        except ParseError as e:
            return Result.failure(e)
        try:
            saved = self._upsert(self._get_collection(collection_name), document)
        except _DRIVER_ERRORS as e:
            return Result.failure(DriverError.wrap(e))
        return Result.success(SaveResult(id=str(saved["_id"]), ok=True, message=""))

    def save_from_json(self, entity_json: str | None, collection_name: str | None = None) -> SaveResult | None:
        """Save a raw JSON document; returns its id in a ``SaveResult`` or ``None`` on failure."""
        return self._record(self.try_save_from_json(entity_json, collection_name))

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    @staticmethod
    def _key_of(entity_or_id: Any) -> Any:
        if isinstance(entity_or_id, (str, int, ObjectId)):
            return entity_or_id
        if isinstance(entity_or_id, Mapping):
            return entity_or_id.get("_id")
        if isinstance(entity_or_id, HasId):
            return entity_or_id.id
        return None

    def try_delete(self, entity_or_id: Any) -> Result[bool]:
        if entity_or_id is None:
            return Result.success(True)
        key = self._key_of(entity_or_id)
        if not _is_valid_key(key):
            return Result.failure(EntityValidationError(INVALID_DELETE_KEY), value=False)
        try:
            self.collection.delete_one({"_id": key})
        except _DRIVER_ERRORS as e:
            return Result.failure(DriverError.wrap(e), value=False)
        return Result.success(True)

    def delete(self, entity_or_id: Any) -> bool:
        """Remove an entity (or the document with the given id).

        ``None`` is a no-op that succeeds. Returns False and records the
        error for a malformed id or a driver failure.
        """
        return bool(self._record(self.try_delete(entity_or_id)))

    # ------------------------------------------------------------------
    # Ids
    # ------------------------------------------------------------------

    @staticmethod
    def generate_id() -> str:
        """Generate a new unique id string, independent of any entity."""
        return generate_id()

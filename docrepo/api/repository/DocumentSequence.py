"""Lazy, restartable sequence over the documents matching a filter."""

from collections.abc import Callable, Iterator
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class DocumentSequence(Generic[T]):
    """Re-runs the query on every iteration, so it can be iterated more than once.

    Example:
        ```python
        users = repository.find_all()
        names = [user.name for user in users]
        first = users.first()
        ```
    """

    def __init__(
        self,
        collection: Any,
        query: dict[str, Any],
        convert: Callable[[dict[str, Any]], T],
        skip: int = -1,
        limit: int = -1,
    ):
        self._collection = collection
        self._query = query
        self._convert = convert
        self._skip = skip
        self._limit = limit

    @property
    def query(self) -> dict[str, Any]:
        return self._query

    def cursor(self) -> Any:
        """Open a fresh driver cursor with skip/limit applied."""
        cursor = self._collection.find(self._query)
        if self._skip > -1:
            cursor = cursor.skip(self._skip)
        if self._limit > -1:
            cursor = cursor.limit(self._limit)
        return cursor

    def __iter__(self) -> Iterator[T]:
        for document in self.cursor():
            yield self._convert(document)

    def first(self) -> T | None:
        return next(iter(self), None)

    def to_list(self) -> list[T]:
        return list(self)

    def __repr__(self) -> str:
        return f"DocumentSequence({self._collection.name!r}, {self._query!r})"

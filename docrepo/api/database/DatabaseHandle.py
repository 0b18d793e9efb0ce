"""Database handle exposing the collection operations a repository needs."""

from contextlib import suppress
from typing import Any

from pymongo.errors import CollectionInvalid


class DatabaseHandle:
    """Thin wrapper over a driver database object.

    Exposes only collection-exists, collection-creation and get-collection
    so that repositories never reach into the driver's database API directly.
    """

    def __init__(self, database: Any):
        self._database = database

    @property
    def name(self) -> str:
        return self._database.name

    def collection_exists(self, collection_name: str) -> bool:
        return collection_name in self._database.list_collection_names()

    def create_collection(self, collection_name: str) -> Any:
        """Create ``collection_name`` and return its driver collection.

        A collection created concurrently by another client counts as created.
        """
        with suppress(CollectionInvalid):
            self._database.create_collection(collection_name)
        return self._database[collection_name]

    def get_collection(self, collection_name: str) -> Any:
        return self._database[collection_name]

    def list_collection_names(self) -> list[str]:
        return sorted(self._database.list_collection_names())

    def __repr__(self) -> str:
        return f"DatabaseHandle({self.name!r})"

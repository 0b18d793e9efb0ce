"""In-memory backend built on mongomock."""

from typing import Any

import mongomock

from .._AbstractBackend import _AbstractBackend
from ..DatabaseConfig import DatabaseConfig
from ._Data import _Data

# One client per process so every Context sees the same in-memory data
_client: mongomock.MongoClient | None = None


def _shared_client() -> mongomock.MongoClient:
    global _client
    if _client is None:
        _client = mongomock.MongoClient()
    return _client


class _Backend(_AbstractBackend):
    def __init__(self, database_config: DatabaseConfig):
        if not isinstance(database_config.data, _Data):
            raise ValueError("mongomock backend requires mongomock config data")
        self._client: mongomock.MongoClient | None = None

    def __enter__(self):
        self._client = _shared_client()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        # The shared client outlives every context
        self._client = None
        return False

    def get_database(self, database_name: str) -> Any:
        if self._client is None:
            raise RuntimeError("mongomock backend is not open")
        return self._client[database_name]

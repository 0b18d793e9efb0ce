"""MongoDB backend: one pymongo client per open context."""

import logging
from typing import Any

from pymongo import MongoClient
from pymongo.database import Database

from .._AbstractBackend import _AbstractBackend
from ..DatabaseConfig import DatabaseConfig
from ._Data import _Data

logger = logging.getLogger(__name__)


class _Backend(_AbstractBackend):
    def __init__(self, database_config: DatabaseConfig):
        if not isinstance(database_config.data, _Data):
            raise ValueError("MongoDB config data is required")
        self._settings = database_config.data
        self._client: MongoClient[Any] | None = None

    def __enter__(self):
        client: MongoClient[Any] = MongoClient(self._settings.uri, serverSelectionTimeoutMS=self._settings.timeout_ms)
        try:
            # Fail on open rather than on the first query
            client.server_info()
        except Exception:
            client.close()
            raise
        self._client = client
        logger.debug("Opened MongoDB client (server selection timeout %sms)", self._settings.timeout_ms)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        client, self._client = self._client, None
        if client is not None:
            client.close()
        return False

    def get_database(self, database_name: str) -> Database:
        if self._client is None:
            raise RuntimeError("Mongo client not initialized")
        return self._client[database_name]

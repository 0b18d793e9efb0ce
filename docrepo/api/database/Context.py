"""Database context: opens a backend and hands out database handles."""

from importlib import import_module
from typing import Any

from ._AbstractBackend import _AbstractBackend
from .DatabaseConfig import _BACKEND_REGISTRY, DatabaseConfig
from .DatabaseHandle import DatabaseHandle


class Context:
    """Supplies handles to named databases on the configured endpoint.

    Example:
        ```python
        with Context(database_config) as context:
            database = context.get_database()
            if not database.collection_exists("Users"):
                database.create_collection("Users")
        ```
    """

    def __init__(self, database_config: DatabaseConfig):
        self.database_config = database_config
        self.database_name = database_config.name
        self._backend: _AbstractBackend | None = None

    def __enter__(self):
        if self.is_open:
            return self

        backend_type = self.database_config.type

        if backend_type not in _BACKEND_REGISTRY:
            raise ValueError(f"Unsupported backend type: {backend_type!r} (supported: {list(_BACKEND_REGISTRY.keys())})")

        module = import_module(f"docrepo.api.database._{backend_type}._Backend")
        backend = module._Backend(self.database_config)
        backend.__enter__()
        self._backend = backend
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self._backend:
            backend, self._backend = self._backend, None
            return backend.__exit__(exc_type, exc_val, exc_tb)
        return False

    @property
    def is_open(self) -> bool:
        return self._backend is not None

    def open(self) -> "Context":
        """Open the backend outside of a ``with`` block (pair with ``close()``)."""
        return self.__enter__()

    def close(self) -> None:
        self.__exit__(None, None, None)

    def get_database(self, database_name: str | None = None) -> DatabaseHandle:
        """Get a handle to ``database_name`` (default: the configured database)."""
        return DatabaseHandle(self._get_backend().get_database(database_name or self.database_name))

    def list_collection_names(self, database_name: str | None = None) -> list[str]:
        return self.get_database(database_name).list_collection_names()

    def _get_backend(self) -> Any:
        if not self._backend:
            raise RuntimeError("Context not opened. Use as context manager first.")
        return self._backend

"""Contract every database backend implements."""

from abc import ABC, abstractmethod
from typing import Any


class _AbstractBackend(ABC):
    """Opens a driver client on ``__enter__`` and releases it on ``__exit__``."""

    @abstractmethod
    def __enter__(self): ...

    @abstractmethod
    def __exit__(self, exc_type, exc_val, exc_tb): ...

    @abstractmethod
    def get_database(self, database_name: str) -> Any:
        """Driver database object for ``database_name``; the backend must be open."""

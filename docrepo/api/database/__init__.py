"""Database endpoint layer: backend registry, context and database handles."""

from .Context import Context
from .DatabaseConfig import DatabaseConfig
from .DatabaseHandle import DatabaseHandle

__all__ = [
    "Context",
    "DatabaseConfig",
    "DatabaseHandle",
]

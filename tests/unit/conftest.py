"""Unit test fixtures.

Configuration helpers live in tests/conftest.py; this file holds the
repository fixtures shared by the repository and command tests.
"""

import pytest

from docrepo.api.database.Context import Context
from docrepo.api.repository.DocumentRepository import DocumentRepository
from docrepo.api.repository.Entity import Entity
from tests.conftest import minimal_config_dict, run_cmd

__all__ = [
    "User",
    "minimal_config_dict",
    "run_cmd",
]


class User(Entity):
    name: str
    age: int = 0


@pytest.fixture
def context(database_config):
    """An open mongomock context on a database unique to the test."""
    with Context(database_config) as ctx:
        yield ctx


@pytest.fixture
def users(context) -> DocumentRepository[User]:
    """A ``User`` repository bound to the ``Users`` collection."""
    with DocumentRepository(User, context=context) as repository:
        yield repository


@pytest.fixture
def fresh_logging(monkeypatch):
    """Let configure_logging run again, and drop the handlers it adds."""
    import logging

    from docrepo.utils import logger as logger_module

    monkeypatch.setattr(logger_module, "_CONFIGURED", False)
    root = logging.getLogger("docrepo")
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers = handlers
    root.setLevel(level)

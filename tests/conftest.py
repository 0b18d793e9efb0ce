"""Shared pytest configuration and fixtures for all tests."""

import json
import uuid
from pathlib import Path

import pytest

from docrepo.api.config.DocRepoConfig import DocRepoConfig
from docrepo.api.database.DatabaseConfig import DatabaseConfig


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests that run against the mongomock backend")


def pytest_collection_modifyitems(config, items):
    """Automatically apply markers based on test file location."""
    for item in items:
        if "/unit/" in str(item.fspath):
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Configuration Helpers
# =============================================================================


def unique_database_name() -> str:
    """Database name unique to one test; the mongomock client is shared by the whole process."""
    return f"docrepo_test_{uuid.uuid4().hex[:12]}"


def minimal_config_dict(database_name: str | None = None) -> dict:
    """Minimal valid docrepo configuration dict backed by mongomock."""
    return {
        "database": {
            "type": "mongomock",
            "name": database_name or unique_database_name(),
            "data": {},
        },
        "log": {
            "level": "INFO",
        },
    }


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture(name="minimal_config_dict")
def minimal_config_dict_fixture() -> dict:
    """Pytest fixture returning a fresh minimal config dict."""
    return minimal_config_dict()


@pytest.fixture
def database_config(minimal_config_dict: dict) -> DatabaseConfig:
    """A mongomock DatabaseConfig with a database name unique to the test."""
    return DatabaseConfig(**minimal_config_dict["database"])


@pytest.fixture
def docrepo_home(tmp_path: Path, monkeypatch, minimal_config_dict: dict) -> Path:
    """Set up DOCREPO_HOME with a minimal config file.

    Returns:
        Path to the docrepo home directory (tmp_path)
    """
    monkeypatch.setenv("DOCREPO_HOME", str(tmp_path))
    config_path = tmp_path / "config.json"
    config_path.write_text(json.dumps(minimal_config_dict))
    return tmp_path


@pytest.fixture
def docrepo_config(docrepo_home: Path) -> DocRepoConfig:
    """The DocRepoConfig written by ``docrepo_home``."""
    return DocRepoConfig.load()


# =============================================================================
# Test Helpers
# =============================================================================


def run_cmd(cmd_func, *args, **kwargs):
    """Execute a cmd function and return the result with progress_callback executed."""
    return cmd_func(*args, **kwargs).run()

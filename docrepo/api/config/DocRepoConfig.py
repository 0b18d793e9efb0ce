"""Config file model: ``$DOCREPO_HOME/config.json``."""

import json
import os
import tempfile
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ...constants import CONFIG_FILE_NAME
from ...utils.get_home_dir import get_home_dir
from ..database.DatabaseConfig import DatabaseConfig
from .LogConfig import LogConfig


def _describe(error: ValidationError) -> str:
    """First validation problem as ``<field path>: <message>``."""
    problems = error.errors()
    if not problems:
        return str(error)
    first = problems[0]
    field = ".".join(str(part) for part in first.get("loc", ()))
    message = first.get("msg", str(error))
    return f"{field}: {message}" if field else message


class DocRepoConfig(BaseModel):
    """Everything docrepo reads from its config file.

    Example config.json:
        ```json
        {
            "database": {"type": "mongo", "name": "app", "data": {"uri": "mongodb://localhost:27017"}},
            "log": {"level": "INFO"}
        }
        ```
    """

    model_config = ConfigDict(extra="forbid")

    database: DatabaseConfig = Field(..., description="Endpoint and default database for repositories")
    log: LogConfig = Field(default_factory=LogConfig)

    @classmethod
    def get_home_dir(cls) -> Path:
        return get_home_dir()

    @classmethod
    def get_config_path(cls) -> Path:
        return get_home_dir(CONFIG_FILE_NAME)

    @classmethod
    def load(cls) -> "DocRepoConfig":
        """Read and validate the config file.

        Raises:
            ValueError: If the file is missing, is not JSON, or does not validate
        """
        path = cls.get_config_path()
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            raise ValueError(f"Configuration file not found at {path}") from None
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in config file {path}: {e}") from e

        try:
            return cls.model_validate(raw)
        except ValidationError as e:
            raise ValueError(f"Configuration validation error: {_describe(e)}") from e

    def to_dict(self) -> dict[str, Any]:
        return {"database": self.database.model_dump(), "log": self.log.model_dump()}

    def save(self) -> None:
        """Write the config file atomically (temp file beside it, then replace)."""
        path = self.get_config_path()
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, temp_name = tempfile.mkstemp(prefix=".config.", suffix=".tmp", dir=path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(self.to_dict(), fh, indent=4)
            os.replace(temp_name, path)
        except OSError as e:
            Path(temp_name).unlink(missing_ok=True)
            raise RuntimeError(f"Failed to save config: {e}") from e

"""Database endpoint configuration with a per-backend ``data`` section."""

from typing import Any

from pydantic import BaseModel, Field, model_validator

from ._mongo._Data import _Data as _MongoData
from ._mongomock._Data import _Data as _MongomockData

# Backend type -> model of its ``data`` section; Context imports ``_<type>._Backend``
_BACKEND_REGISTRY: dict[str, type[BaseModel]] = {
    "mongo": _MongoData,
    "mongomock": _MongomockData,
}


class DatabaseConfig(BaseModel):
    """Which backend to open and which database repositories use by default.

    ``data`` is validated by the model registered for ``type``.
    """

    type: str = Field(..., description="Backend type (mongo or mongomock)")
    name: str = Field(..., min_length=1, description="Default database name")
    data: BaseModel = Field(..., description="Backend-specific settings")

    @model_validator(mode="before")
    @classmethod
    def _resolve_backend_data(cls, values: Any) -> Any:
        if not isinstance(values, dict):
            raise ValueError(f"database config must be a dict, got {type(values).__name__}")
        backend_type = values.get("type")
        if not backend_type:
            raise ValueError("database.type is required")
        data_model = _BACKEND_REGISTRY.get(backend_type)
        if data_model is None:
            raise ValueError(f"Unknown backend type: {backend_type!r} (supported: {sorted(_BACKEND_REGISTRY)})")
        data = values.get("data")
        if data is None:
            raise ValueError("database.data is required")
        if not isinstance(data, data_model):
            data = data_model.model_validate(data.model_dump() if isinstance(data, BaseModel) else data)
        return {**values, "data": data}

    def model_dump(self, **kwargs) -> dict[str, Any]:
        """Dump including the backend ``data`` fields (the field is declared as plain ``BaseModel``)."""
        dumped = super().model_dump(**kwargs)
        dumped["data"] = self.data.model_dump(**kwargs)
        return dumped

    @classmethod
    def from_connection_string(cls, connection_string: str, database_name: str) -> "DatabaseConfig":
        """Mongo backend config for ``connection_string`` with ``database_name`` as the default database."""
        return cls.model_validate({"type": "mongo", "name": database_name, "data": {"uri": connection_string}})

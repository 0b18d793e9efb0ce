"""Settings of the ``mongo`` backend."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

_URI_SCHEMES = ("mongodb://", "mongodb+srv://")


class _Data(BaseModel):
    model_config = ConfigDict(extra="forbid")

    uri: str = Field(..., description="MongoDB connection string")
    timeout_ms: int = Field(5000, gt=0, description="Server selection timeout in milliseconds")

    @field_validator("uri")
    @classmethod
    def _check_scheme(cls, uri: str) -> str:
        if not uri.startswith(_URI_SCHEMES):
            raise ValueError(f"database.uri must start with 'mongodb://' or 'mongodb+srv://' (found: {uri!r})")
        return uri

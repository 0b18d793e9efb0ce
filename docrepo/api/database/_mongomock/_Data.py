"""Settings of the in-memory ``mongomock`` backend (there are none)."""

from pydantic import BaseModel, ConfigDict


class _Data(BaseModel):
    model_config = ConfigDict(extra="forbid")

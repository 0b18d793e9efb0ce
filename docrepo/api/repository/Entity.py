"""Base model for documents persisted by a DocumentRepository."""

from typing import Any, ClassVar

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .generate_id import generate_id


class Entity(BaseModel):
    """Base document model.

    The ``id`` field is stored as the document's ``_id``. Subclasses may set
    ``collection_name`` to override the pluralized class name.

    Example:
        ```python
        class User(Entity):
            name: str

        user = User(id="u1", name="Alice")
        user.to_document()  # {"_id": "u1", "name": "Alice"}
        ```
    """

    model_config = ConfigDict(populate_by_name=True)

    collection_name: ClassVar[str | None] = None

    id: str | int = Field(default_factory=generate_id, alias="_id")

    @field_validator("id", mode="before")
    @classmethod
    def coerce_object_id(cls, v: Any) -> Any:
        if isinstance(v, ObjectId):
            return str(v)
        return v

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> "Entity":
        return cls.model_validate(document)

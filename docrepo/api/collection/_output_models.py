"""Output models for collection commands."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class _BaseOutput(BaseModel):
    model_config = ConfigDict(extra="forbid")

    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


class CollectionListOutput(_BaseOutput):
    database: str
    collections: list[str]


class CollectionShowOutput(_BaseOutput):
    collection: str
    query: str
    skip: int
    limit: int
    count: int
    results: list[dict[str, Any]]


class CollectionLoadOutput(_BaseOutput):
    collection: str
    id: str
    document: dict[str, Any] | None


class CollectionSaveOutput(_BaseOutput):
    collection: str
    id: str
    ok: bool
    message: str


class CollectionDeleteOutput(_BaseOutput):
    collection: str
    id: str
    deleted: bool


class CollectionNewIdOutput(_BaseOutput):
    id: str

"""Collection commands over a raw-document repository."""

from ._output_models import (
    CollectionDeleteOutput,
    CollectionListOutput,
    CollectionLoadOutput,
    CollectionNewIdOutput,
    CollectionSaveOutput,
    CollectionShowOutput,
)

__all__ = [
    "CollectionDeleteOutput",
    "CollectionListOutput",
    "CollectionLoadOutput",
    "CollectionNewIdOutput",
    "CollectionSaveOutput",
    "CollectionShowOutput",
]

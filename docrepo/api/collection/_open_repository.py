"""Open a raw-document repository on a collection from the loaded config."""

from ..config.DocRepoConfig import DocRepoConfig
from ..database.Context import Context
from ..repository.DocumentRepository import DocumentRepository


def _open_repository(config: DocRepoConfig, collection: str) -> DocumentRepository[dict]:
    """Open a repository over ``collection`` that owns its own context (close it when done)."""
    return DocumentRepository(dict, collection_name=collection, context=Context(config.database))

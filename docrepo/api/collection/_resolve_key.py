from bson import ObjectId

from ..repository.DocumentRepository import DocumentRepository


def _resolve_key(repository: DocumentRepository, id: str) -> str | ObjectId:
    """Return ``id`` as stored: the string itself, or its ObjectId when only that matches."""
    if not ObjectId.is_valid(id):
        return id
    collection = repository.collection
    if collection.count_documents({"_id": id}, limit=1):
        return id
    if collection.count_documents({"_id": ObjectId(id)}, limit=1):
        return ObjectId(id)
    return id

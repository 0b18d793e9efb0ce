"""Generate a new document id."""

from bson import ObjectId


def generate_id() -> str:
    """Generate a new ObjectId and return it as a string.

    Usable by clients and APIs that only work with string identifiers.
    """
    return str(ObjectId())

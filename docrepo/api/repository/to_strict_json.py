"""Serialize documents to strict extended JSON."""

from typing import Any

from bson import json_util

# MongoDB Extended JSON v1 "strict" mode: {"$oid": ...}, {"$date": <millis>}
STRICT_JSON_OPTIONS = json_util.LEGACY_JSON_OPTIONS


def to_strict_json(value: Any) -> str:
    """Serialize a document (or list of documents) to strict extended JSON text."""
    return json_util.dumps(value, json_options=STRICT_JSON_OPTIONS)

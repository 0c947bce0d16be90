"""Shared document helpers."""

from typing import Any, Dict, Iterable

from bson import ObjectId


def serialize_document(doc: Dict[str, Any], reference_fields: Iterable[str] = ()) -> Dict[str, Any]:
    """Convert a raw Mongo document into its API representation.

    ``_id`` becomes a string ``id`` and ObjectId references become strings.
    """
    data = dict(doc)
    if "_id" in data:
        data["id"] = str(data.pop("_id"))
    for field in reference_fields:
        value = data.get(field)
        if isinstance(value, ObjectId):
            data[field] = str(value)
    return data

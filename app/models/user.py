"""User document model."""

from typing import Any, Dict

from pymongo import ASCENDING, IndexModel

from app.models.base import serialize_document

USERS = "users"

USER_INDEXES = [
    IndexModel([("email", ASCENDING)], unique=True),
    IndexModel([("googleId", ASCENDING)], unique=True, sparse=True),
]


def public_profile(doc: Dict[str, Any]) -> Dict[str, Any]:
    """Subset of the user document returned by auth endpoints."""
    return {
        "id": str(doc["_id"]),
        "email": doc.get("email"),
        "role": doc.get("role", "user"),
        "name": doc.get("name"),
        "profilePicture": doc.get("profilePicture"),
        "isVerified": doc.get("isVerified", True),
    }


def serialize_user(doc: Dict[str, Any]) -> Dict[str, Any]:
    return serialize_document(doc)

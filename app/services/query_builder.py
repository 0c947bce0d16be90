"""
Ownership-scoped query building.

Every list/read/update/delete on an owned resource goes through an
``OwnerScope`` so that the owner predicate cannot be forgotten by a route.
"""

import asyncio
import logging
import math
import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING

from app.core.exceptions import AuthorizationException, ValidationException
from app.core.security import UserContext, can_access_any_owner
from app.models.user import USERS

logger = logging.getLogger(__name__)

SortSpec = List[Tuple[str, int]]


def to_object_id(value: str, field: str = "id") -> ObjectId:
    """Parse a path/query id, 400 on malformed values."""
    if not ObjectId.is_valid(value):
        raise ValidationException("Invalid ID format", field=field)
    return ObjectId(value)


class OwnerScope:
    """Owner predicate for one request, decided once from the caller's role."""

    def __init__(self, owner_id: ObjectId, elevated: bool = False):
        self.owner_id = owner_id
        self.elevated = elevated

    @classmethod
    def for_user(cls, user: UserContext) -> "OwnerScope":
        return cls(ObjectId(user.id), elevated=can_access_any_owner(user.role))

    def constrain(
        self,
        field: str,
        filter_: Optional[Dict[str, Any]] = None,
        honour_elevation: bool = True,
    ) -> Dict[str, Any]:
        """Intersect ``filter_`` with the owner predicate on ``field``."""
        query = dict(filter_ or {})
        if self.elevated and honour_elevation:
            return query
        query[field] = self.owner_id
        return query

    def owns(self, doc: Dict[str, Any], field: str) -> bool:
        return doc.get(field) == self.owner_id

    def ensure_owns(self, doc: Dict[str, Any], field: str, message: str = "Not authorized to modify this record") -> None:
        """Raise 403 unless the caller owns ``doc`` or has elevated access."""
        if self.elevated or self.owns(doc, field):
            return
        raise AuthorizationException(message)


def contains(text: str) -> Dict[str, Any]:
    """Case-insensitive substring predicate; user text is matched literally."""
    return {"$regex": re.escape(text), "$options": "i"}


def search(q: Optional[str], fields: Iterable[str]) -> Dict[str, Any]:
    """``$or`` of substring matches over ``fields``; empty when q is blank."""
    if not q or not q.strip():
        return {}
    predicate = contains(q.strip())
    return {"$or": [{field: predicate} for field in fields]}


def stipend_range(minimum: Optional[float], maximum: Optional[float]) -> Dict[str, Any]:
    bounds: Dict[str, Any] = {}
    if minimum is not None:
        bounds["$gte"] = minimum
    if maximum is not None:
        bounds["$lte"] = maximum
    return bounds


@dataclass
class PageParams:
    page: int
    limit: int

    @classmethod
    def build(cls, page: int, limit: Optional[int], default: int, maximum: int) -> "PageParams":
        """Clamp ``limit`` into [1, maximum]; ``page`` is validated upstream."""
        if limit is None:
            limit = default
        return cls(page=max(page, 1), limit=min(max(limit, 1), maximum))

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit


def total_pages(total: int, limit: int) -> int:
    return math.ceil(total / limit) if limit else 0


def parse_sort(sort: Optional[str], allowed: Sequence[str], default: str) -> SortSpec:
    """Parse ``-field`` / ``field`` into a Mongo sort spec."""
    value = (sort or default).strip()
    direction = ASCENDING
    if value.startswith("-"):
        direction = DESCENDING
        value = value[1:]
    if value not in allowed:
        raise ValidationException(
            f"Invalid sort field '{value}'. Allowed: {', '.join(allowed)}",
            field="sort",
        )
    return [(value, direction), ("_id", direction)]


def parse_sort_pair(field: str, direction: str, allowed: Sequence[str]) -> SortSpec:
    if field not in allowed:
        raise ValidationException(
            f"Invalid sortBy '{field}'. Allowed: {', '.join(allowed)}",
            field="sortBy",
        )
    order = ASCENDING if direction == "asc" else DESCENDING
    return [(field, order), ("_id", order)]


async def fetch_page(
    collection: AsyncIOMotorCollection,
    query: Dict[str, Any],
    sort: SortSpec,
    page: PageParams,
) -> Tuple[List[Dict[str, Any]], int]:
    """Run the count and the page query concurrently."""
    cursor = collection.find(query).sort(sort).skip(page.skip).limit(page.limit)
    items, total = await asyncio.gather(
        cursor.to_list(length=page.limit),
        collection.count_documents(query),
    )
    logger.debug("Fetched %d/%d from %s (page %d)", len(items), total, collection.name, page.page)
    return items, total


async def populate_users(
    db: AsyncIOMotorDatabase,
    docs: List[Dict[str, Any]],
    field: str,
) -> List[Dict[str, Any]]:
    """Replace the user id in ``field`` with ``{id, name, email}``.

    One ``$in`` lookup covers the whole batch. A reference to a user that no
    longer exists keeps the id with empty name and email.
    """
    ids = {doc[field] for doc in docs if isinstance(doc.get(field), ObjectId)}
    if not ids:
        return docs

    users = await db[USERS].find({"_id": {"$in": list(ids)}}, projection={"name": 1, "email": 1}).to_list(
        length=len(ids)
    )
    by_id = {user["_id"]: user for user in users}

    for doc in docs:
        ref = doc.get(field)
        if not isinstance(ref, ObjectId):
            continue
        user = by_id.get(ref, {})
        doc[field] = {"id": str(ref), "name": user.get("name"), "email": user.get("email")}
    return docs

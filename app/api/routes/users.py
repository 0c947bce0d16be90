"""User profile endpoints."""

import logging
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument

from app.core.deps import get_db, get_owner_scope
from app.core.exceptions import AuthorizationException, ConflictException, ResourceNotFoundException
from app.core.security import Role, UserContext, require_role
from app.models.settings import SETTINGS
from app.models.user import USERS, serialize_user
from app.schemas.user import UserUpdate
from app.services.query_builder import OwnerScope, PageParams, fetch_page, parse_sort_pair, to_object_id, total_pages
from app.utils.constants import USER_PAGE_SIZE, USER_SORT_FIELDS
from app.utils.helpers import normalize_email, utcnow

logger = logging.getLogger(__name__)

router = APIRouter()


def ensure_self_or_admin(user_id, scope: OwnerScope) -> None:
    if user_id != scope.owner_id and not scope.elevated:
        raise AuthorizationException("Forbidden: not owner or lacking role")


async def move_settings(db: AsyncIOMotorDatabase, old_email: Optional[str], new_email: str) -> None:
    """Re-key the settings document when its owner changes email."""
    if not old_email:
        return
    old_key, new_key = normalize_email(old_email), normalize_email(new_email)
    if old_key == new_key:
        return
    # Stale settings left under the new address belong to no current user
    await db[SETTINGS].delete_many({"username": new_key})
    result = await db[SETTINGS].update_one({"username": old_key}, {"$set": {"username": new_key, "updatedAt": utcnow()}})
    if result.modified_count:
        logger.info("Moved settings from %s to %s", old_key, new_key)


@router.get("", include_in_schema=False)
@router.get("/")
async def list_users(
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, description="Items per page (clamped to 1..100)"),
    sort_by: str = Query("createdAt", alias="sortBy"),
    sort_dir: Literal["asc", "desc"] = Query("desc", alias="sortDir"),
    admin: UserContext = Depends(require_role(Role.ADMIN)),
    db: AsyncIOMotorDatabase = Depends(get_db),
):
    """All users (admin only)."""
    sort_spec = parse_sort_pair(sort_by, sort_dir, USER_SORT_FIELDS)
    page_params = PageParams.build(page, limit, *USER_PAGE_SIZE)

    items, total = await fetch_page(db[USERS], {}, sort_spec, page_params)
    return {
        "items": [serialize_user(item) for item in items],
        "page": page_params.page,
        "limit": page_params.limit,
        "total": total,
        "totalPages": total_pages(total, page_params.limit),
    }


@router.get("/{user_id}")
async def get_user(
    user_id: str,
    scope: OwnerScope = Depends(get_owner_scope),
    db: AsyncIOMotorDatabase = Depends(get_db),
):
    oid = to_object_id(user_id)
    ensure_self_or_admin(oid, scope)

    user = await db[USERS].find_one({"_id": oid})
    if not user:
        raise ResourceNotFoundException("User")
    return serialize_user(user)


@router.put("/{user_id}")
async def update_user(
    user_id: str,
    payload: UserUpdate,
    scope: OwnerScope = Depends(get_owner_scope),
    db: AsyncIOMotorDatabase = Depends(get_db),
):
    """Update name, email or profile picture of a user (self or admin)."""
    oid = to_object_id(user_id)
    ensure_self_or_admin(oid, scope)

    existing = await db[USERS].find_one({"_id": oid}, projection={"email": 1})
    if not existing:
        raise ResourceNotFoundException("User")

    changes = payload.to_document()
    new_email = changes.get("email")
    if new_email:
        taken = await db[USERS].find_one({"email": new_email, "_id": {"$ne": oid}}, projection={"_id": 1})
        if taken:
            raise ConflictException("Email already in use", field="email", value=new_email)

    changes["updatedAt"] = utcnow()
    user = await db[USERS].find_one_and_update(
        {"_id": oid},
        {"$set": changes},
        return_document=ReturnDocument.AFTER,
    )
    if not user:
        raise ResourceNotFoundException("User")

    if new_email and new_email != existing.get("email"):
        await move_settings(db, existing.get("email"), new_email)

    logger.info("User %s updated fields %s", user_id, sorted(changes))
    return serialize_user(user)

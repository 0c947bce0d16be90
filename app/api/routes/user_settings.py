"""Per-user settings endpoints, keyed by the owner's email."""

import logging

from fastapi import APIRouter, Depends
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument

from app.core.deps import get_db
from app.core.exceptions import AuthorizationException
from app.core.security import UserContext, get_current_user
from app.models.settings import DEFAULT_SETTINGS, SETTINGS
from app.schemas.settings import SettingsUpdate
from app.utils.helpers import normalize_email, utcnow

logger = logging.getLogger(__name__)

router = APIRouter()


def resolve_username(username: str, current_user: UserContext) -> str:
    """Normalised settings key; the caller must own it or be an admin."""
    key = normalize_email(username)
    if key != normalize_email(current_user.email) and not current_user.is_admin:
        raise AuthorizationException("Forbidden: not owner or lacking role")
    return key


def present(doc) -> dict:
    doc = doc or {}
    return {field: doc.get(field, default) for field, default in DEFAULT_SETTINGS.items()}


@router.get("/{username}")
async def get_settings(
    username: str,
    current_user: UserContext = Depends(get_current_user),
    db: AsyncIOMotorDatabase = Depends(get_db),
):
    """Stored settings, or the defaults when nothing was saved yet."""
    key = resolve_username(username, current_user)
    doc = await db[SETTINGS].find_one({"username": key})
    return present(doc)


@router.put("/{username}")
async def update_settings(
    username: str,
    payload: SettingsUpdate,
    current_user: UserContext = Depends(get_current_user),
    db: AsyncIOMotorDatabase = Depends(get_db),
):
    key = resolve_username(username, current_user)
    changes = payload.to_document()
    now = utcnow()

    on_insert = {field: default for field, default in DEFAULT_SETTINGS.items() if field not in changes}
    on_insert["createdAt"] = now
    changes["updatedAt"] = now

    doc = await db[SETTINGS].find_one_and_update(
        {"username": key},
        {"$set": changes, "$setOnInsert": on_insert},
        upsert=True,
        return_document=ReturnDocument.AFTER,
    )
    logger.info("Settings for %s updated: %s", key, sorted(changes))
    return present(doc)

"""Application tracking endpoints."""

import logging
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query, status
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument

from app.core.deps import get_db, get_owner_scope
from app.core.exceptions import AuthorizationException, ResourceNotFoundException, ValidationException
from app.models.application import APPLICATIONS, ApplicationStatus
from app.models.base import serialize_document
from app.schemas.application import ApplicationCreate, ApplicationStatusUpdate, ApplicationUpdate
from app.schemas.common import check_date_order
from app.services.query_builder import (
    OwnerScope,
    PageParams,
    contains,
    fetch_page,
    parse_sort_pair,
    to_object_id,
    total_pages,
)
from app.utils.constants import APPLICATION_PAGE_SIZE, APPLICATION_SORT_FIELDS
from app.utils.helpers import utcnow

logger = logging.getLogger(__name__)

router = APIRouter()


def serialize_application(doc):
    return serialize_document(doc, reference_fields=("ownerId",))


async def load_owned_application(db: AsyncIOMotorDatabase, application_id: str, scope: OwnerScope) -> dict:
    """Fetch an application the caller owns (or may administer)."""
    application = await db[APPLICATIONS].find_one({"_id": to_object_id(application_id)})
    if not application:
        raise ResourceNotFoundException("Application")
    scope.ensure_owns(application, "ownerId", "Forbidden")
    return application


async def apply_changes(db: AsyncIOMotorDatabase, application: dict, changes: dict) -> dict:
    changes["updatedAt"] = utcnow()
    updated = await db[APPLICATIONS].find_one_and_update(
        {"_id": application["_id"]},
        {"$set": changes},
        return_document=ReturnDocument.AFTER,
    )
    if not updated:
        raise ResourceNotFoundException("Application")
    return updated


@router.post("", status_code=status.HTTP_201_CREATED, include_in_schema=False)
@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_application(
    payload: ApplicationCreate,
    scope: OwnerScope = Depends(get_owner_scope),
    db: AsyncIOMotorDatabase = Depends(get_db),
):
    application = payload.to_document()
    now = utcnow()
    application.update({"ownerId": scope.owner_id, "createdAt": now, "updatedAt": now})
    result = await db[APPLICATIONS].insert_one(application)
    application["_id"] = result.inserted_id

    logger.info("Application %s created by %s", result.inserted_id, scope.owner_id)
    return serialize_application(application)


@router.get("/user/{user_id}")
async def list_user_applications(
    user_id: str,
    status_filter: Optional[ApplicationStatus] = Query(None, alias="status"),
    company: Optional[str] = Query(None, description="Company substring (case-insensitive)"),
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, description="Items per page (clamped to 1..100)"),
    sort_by: str = Query("createdAt", alias="sortBy"),
    sort_dir: Literal["asc", "desc"] = Query("desc", alias="sortDir"),
    scope: OwnerScope = Depends(get_owner_scope),
    db: AsyncIOMotorDatabase = Depends(get_db),
):
    """Applications of one user. The caller must be that user or an admin."""
    owner_id = to_object_id(user_id, field="userId")
    if owner_id != scope.owner_id and not scope.elevated:
        raise AuthorizationException("Forbidden")

    query = {"ownerId": owner_id}
    if status_filter:
        query["status"] = status_filter.value
    if company:
        query["company"] = contains(company)

    sort_spec = parse_sort_pair(sort_by, sort_dir, APPLICATION_SORT_FIELDS)
    page_params = PageParams.build(page, limit, *APPLICATION_PAGE_SIZE)

    items, total = await fetch_page(db[APPLICATIONS], query, sort_spec, page_params)
    return {
        "items": [serialize_application(item) for item in items],
        "page": page_params.page,
        "limit": page_params.limit,
        "total": total,
        "totalPages": total_pages(total, page_params.limit),
    }


@router.get("/{application_id}")
async def get_application(
    application_id: str,
    scope: OwnerScope = Depends(get_owner_scope),
    db: AsyncIOMotorDatabase = Depends(get_db),
):
    application = await load_owned_application(db, application_id, scope)
    return serialize_application(application)


@router.put("/{application_id}/status")
async def update_application_status(
    application_id: str,
    payload: ApplicationStatusUpdate,
    scope: OwnerScope = Depends(get_owner_scope),
    db: AsyncIOMotorDatabase = Depends(get_db),
):
    application = await load_owned_application(db, application_id, scope)
    updated = await apply_changes(db, application, {"status": payload.status})
    logger.info("Application %s moved to %s", application_id, payload.status)
    return serialize_application(updated)


@router.put("/{application_id}")
async def update_application(
    application_id: str,
    payload: ApplicationUpdate,
    scope: OwnerScope = Depends(get_owner_scope),
    db: AsyncIOMotorDatabase = Depends(get_db),
):
    application = await load_owned_application(db, application_id, scope)

    changes = payload.to_document()
    merged = {**application, **changes}
    try:
        check_date_order(merged.get("deadlineDate"), merged.get("interviewDate"))
    except ValueError as e:
        raise ValidationException(str(e), field="interviewDate")

    updated = await apply_changes(db, application, changes)
    return serialize_application(updated)


@router.delete("/{application_id}")
async def delete_application(
    application_id: str,
    scope: OwnerScope = Depends(get_owner_scope),
    db: AsyncIOMotorDatabase = Depends(get_db),
):
    application = await load_owned_application(db, application_id, scope)
    await db[APPLICATIONS].delete_one({"_id": application["_id"]})

    logger.info("Application %s deleted by %s", application_id, scope.owner_id)
    return {"success": True, "message": "Application deleted successfully", "data": {"deletedId": application_id}}

"""Internship posting endpoints."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import DESCENDING, ReturnDocument

from app.core.deps import get_db, get_owner_scope
from app.core.exceptions import ResourceNotFoundException, ValidationException
from app.models.base import serialize_document
from app.models.internship import INTERNSHIPS, InternshipStatus
from app.schemas.internship import InternshipCreate, InternshipUpdate
from app.services.query_builder import (
    OwnerScope,
    PageParams,
    contains,
    fetch_page,
    parse_sort,
    populate_users,
    search,
    stipend_range,
    to_object_id,
    total_pages,
)
from app.utils.constants import INTERNSHIP_PAGE_SIZE, INTERNSHIP_SORT_FIELDS
from app.utils.helpers import utcnow

logger = logging.getLogger(__name__)

router = APIRouter()

INTERNSHIP_SEARCH_FIELDS = ("title", "company", "location", "description")


def serialize_internship(doc):
    return serialize_document(doc, reference_fields=("postedBy",))


@router.post("", status_code=status.HTTP_201_CREATED, include_in_schema=False)
@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_internship(
    payload: InternshipCreate,
    scope: OwnerScope = Depends(get_owner_scope),
    db: AsyncIOMotorDatabase = Depends(get_db),
):
    internship = payload.to_document()
    now = utcnow()
    internship.update({"postedBy": scope.owner_id, "createdAt": now, "updatedAt": now})
    result = await db[INTERNSHIPS].insert_one(internship)
    internship["_id"] = result.inserted_id

    await populate_users(db, [internship], "postedBy")
    logger.info("Internship %s posted by %s", result.inserted_id, scope.owner_id)
    return serialize_internship(internship)


@router.get("", include_in_schema=False)
@router.get("/")
async def list_internships(
    q: Optional[str] = Query(None, description="Search title, company, location and description"),
    status_filter: Optional[InternshipStatus] = Query(None, alias="status"),
    company: Optional[str] = Query(None, description="Company substring (case-insensitive)"),
    duration: Optional[str] = Query(None, description="Exact duration"),
    stipend_min: Optional[float] = Query(None, alias="stipendMin", ge=0),
    stipend_max: Optional[float] = Query(None, alias="stipendMax", ge=0),
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, description="Items per page (clamped to 1..100)"),
    sort: str = Query("-createdAt"),
    db: AsyncIOMotorDatabase = Depends(get_db),
    scope: OwnerScope = Depends(get_owner_scope),
):
    """List all internship postings (not limited to the caller's own)."""
    if stipend_min is not None and stipend_max is not None and stipend_max < stipend_min:
        raise ValidationException("stipendMax must be greater than or equal to stipendMin", field="stipendMax")

    filters = search(q, INTERNSHIP_SEARCH_FIELDS)
    if status_filter:
        filters["status"] = status_filter.value
    if company:
        filters["company"] = contains(company)
    if duration:
        filters["duration"] = duration
    stipend = stipend_range(stipend_min, stipend_max)
    if stipend:
        filters["stipend"] = stipend

    sort_spec = parse_sort(sort, INTERNSHIP_SORT_FIELDS, "-createdAt")
    page_params = PageParams.build(page, limit, *INTERNSHIP_PAGE_SIZE)

    items, total = await fetch_page(db[INTERNSHIPS], filters, sort_spec, page_params)
    await populate_users(db, items, "postedBy")

    sort_field, direction = sort_spec[0]
    return {
        "success": True,
        "data": [serialize_internship(item) for item in items],
        "meta": {
            "total": total,
            "page": page_params.page,
            "limit": page_params.limit,
            "pages": total_pages(total, page_params.limit),
            "sort": ("-" if direction == DESCENDING else "") + sort_field,
        },
    }


@router.get("/{internship_id}")
async def get_internship(
    internship_id: str,
    db: AsyncIOMotorDatabase = Depends(get_db),
    scope: OwnerScope = Depends(get_owner_scope),
):
    internship = await db[INTERNSHIPS].find_one({"_id": to_object_id(internship_id)})
    if not internship:
        raise ResourceNotFoundException("Internship")
    await populate_users(db, [internship], "postedBy")
    return serialize_internship(internship)


@router.put("/{internship_id}")
async def update_internship(
    internship_id: str,
    payload: InternshipUpdate,
    db: AsyncIOMotorDatabase = Depends(get_db),
    scope: OwnerScope = Depends(get_owner_scope),
):
    """Partial update. Any authenticated user may edit a posting."""
    changes = payload.to_document()
    changes["updatedAt"] = utcnow()

    internship = await db[INTERNSHIPS].find_one_and_update(
        {"_id": to_object_id(internship_id)},
        {"$set": changes},
        return_document=ReturnDocument.AFTER,
    )
    if not internship:
        raise ResourceNotFoundException("Internship")
    await populate_users(db, [internship], "postedBy")
    return serialize_internship(internship)


@router.delete("/{internship_id}")
async def delete_internship(
    internship_id: str,
    db: AsyncIOMotorDatabase = Depends(get_db),
    scope: OwnerScope = Depends(get_owner_scope),
):
    """Delete a posting. Poster or admin only."""
    oid = to_object_id(internship_id)
    existing = await db[INTERNSHIPS].find_one({"_id": oid}, projection={"postedBy": 1})
    if not existing:
        raise ResourceNotFoundException("Internship")
    scope.ensure_owns(existing, "postedBy", "Not authorized to delete this internship")

    await db[INTERNSHIPS].delete_one({"_id": oid})
    logger.info("Internship %s deleted by %s", internship_id, scope.owner_id)
    return {"success": True, "message": "Internship deleted successfully", "data": {"deletedId": internship_id}}

"""Job tracking endpoints (owner-scoped)."""

import logging
from typing import Any, Dict, Optional

from bson import ObjectId
from fastapi import APIRouter, Depends, Query, status
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import DESCENDING, ReturnDocument

from app.core.deps import get_db, get_owner_scope
from app.core.exceptions import ConflictException, ResourceNotFoundException, ValidationException
from app.models.job import JOBS, JobStatus, JobType, is_pipeline_status, serialize_job
from app.schemas.common import check_date_order
from app.schemas.job import JobCreate, JobUpdate
from app.services.query_builder import (
    OwnerScope,
    PageParams,
    contains,
    fetch_page,
    parse_sort,
    populate_users,
    search,
    to_object_id,
    total_pages,
)
from app.utils.constants import JOB_PAGE_SIZE, JOB_SORT_FIELDS, JOB_STATS_BUCKETS
from app.utils.helpers import utcnow

logger = logging.getLogger(__name__)

router = APIRouter()

JOB_SEARCH_FIELDS = ("title", "company", "location", "description", "notes")
DUPLICATE_JOB_MESSAGE = "Duplicate job application for this company and position"


async def ensure_unique_job(
    db: AsyncIOMotorDatabase,
    owner_id: ObjectId,
    job: Dict[str, Any],
    exclude_id: Optional[ObjectId] = None,
) -> None:
    """409 when the owner already tracks this company/title/status in the pipeline."""
    if not is_pipeline_status(job.get("status")):
        return

    query = {
        "postedBy": owner_id,
        "company": job.get("company"),
        "title": job.get("title"),
        "status": job.get("status"),
    }
    if exclude_id is not None:
        query["_id"] = {"$ne": exclude_id}

    if await db[JOBS].find_one(query, projection={"_id": 1}):
        raise ConflictException(DUPLICATE_JOB_MESSAGE, field="title", value=job.get("title"))


def check_merged_job(job: Dict[str, Any]) -> None:
    """Cross-field rules re-checked after a partial update is applied."""
    try:
        check_date_order(job.get("deadlineDate"), job.get("interviewDate"))
    except ValueError as e:
        raise ValidationException(str(e), field="interviewDate")

    salary = job.get("salaryRange") or {}
    low, high = salary.get("min"), salary.get("max")
    if low is not None and high is not None and high < low:
        raise ValidationException(
            "salaryRange.max must be greater than or equal to salaryRange.min",
            field="salaryRange.max",
        )


@router.post("", status_code=status.HTTP_201_CREATED, include_in_schema=False)
@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_job(
    payload: JobCreate,
    scope: OwnerScope = Depends(get_owner_scope),
    db: AsyncIOMotorDatabase = Depends(get_db),
):
    """Create a job entry owned by the caller."""
    job = payload.to_document()
    await ensure_unique_job(db, scope.owner_id, job)

    now = utcnow()
    job.update({"postedBy": scope.owner_id, "dateAdded": now, "createdAt": now, "updatedAt": now})
    result = await db[JOBS].insert_one(job)
    job["_id"] = result.inserted_id

    await populate_users(db, [job], "postedBy")
    logger.info("Job %s created by %s", result.inserted_id, scope.owner_id)
    return {"success": True, "data": serialize_job(job), "message": "Job application created successfully"}


@router.get("", include_in_schema=False)
@router.get("/")
async def list_jobs(
    q: Optional[str] = Query(None, description="Search title, company, location, description and notes"),
    status_filter: Optional[JobStatus] = Query(None, alias="status", description="Exact status"),
    company: Optional[str] = Query(None, description="Company substring (case-insensitive)"),
    job_type: Optional[JobType] = Query(None, alias="jobType"),
    page: int = Query(1, ge=1, description="Page number"),
    limit: Optional[int] = Query(None, description="Items per page (clamped to 1..1000)"),
    sort: str = Query("-dateAdded", description="Sort field, prefix with '-' for descending"),
    scope: OwnerScope = Depends(get_owner_scope),
    db: AsyncIOMotorDatabase = Depends(get_db),
):
    """
    List the caller's jobs.

    Listing is always limited to the caller's own records, admins included.
    """
    filters = search(q, JOB_SEARCH_FIELDS)
    if status_filter:
        filters["status"] = status_filter.value
    if company:
        filters["company"] = contains(company)
    if job_type:
        filters["jobType"] = job_type.value

    query = scope.constrain("postedBy", filters, honour_elevation=False)
    sort_spec = parse_sort(sort, JOB_SORT_FIELDS, "-dateAdded")
    page_params = PageParams.build(page, limit, *JOB_PAGE_SIZE)

    items, total = await fetch_page(db[JOBS], query, sort_spec, page_params)
    await populate_users(db, items, "postedBy")

    sort_field, direction = sort_spec[0]
    return {
        "success": True,
        "data": [serialize_job(item) for item in items],
        "meta": {
            "total": total,
            "page": page_params.page,
            "limit": page_params.limit,
            "pages": total_pages(total, page_params.limit),
            "sort": ("-" if direction == DESCENDING else "") + sort_field,
            "userJobsOnly": True,
        },
    }


@router.get("/stats")
async def job_stats(
    scope: OwnerScope = Depends(get_owner_scope),
    db: AsyncIOMotorDatabase = Depends(get_db),
):
    """Counts of the caller's jobs per status."""
    pipeline = [
        {"$match": {"postedBy": scope.owner_id}},
        {"$group": {"_id": "$status", "count": {"$sum": 1}}},
    ]
    rows = await db[JOBS].aggregate(pipeline).to_list(length=None)
    counts = {row["_id"]: row["count"] for row in rows}

    data = {"total": sum(counts.values())}
    for bucket in JOB_STATS_BUCKETS:
        data[bucket] = counts.get(bucket, 0)
    return {"success": True, "data": data}


@router.get("/{job_id}")
async def get_job(
    job_id: str,
    scope: OwnerScope = Depends(get_owner_scope),
    db: AsyncIOMotorDatabase = Depends(get_db),
):
    oid = to_object_id(job_id)
    job = await db[JOBS].find_one(scope.constrain("postedBy", {"_id": oid}, honour_elevation=False))
    if not job:
        raise ResourceNotFoundException("Job", "Job not found or access denied")
    await populate_users(db, [job], "postedBy")
    return {"success": True, "data": serialize_job(job)}


@router.put("/{job_id}")
async def update_job(
    job_id: str,
    payload: JobUpdate,
    scope: OwnerScope = Depends(get_owner_scope),
    db: AsyncIOMotorDatabase = Depends(get_db),
):
    """Apply a partial update. Owner or admin only."""
    oid = to_object_id(job_id)
    existing = await db[JOBS].find_one({"_id": oid})
    if not existing:
        raise ResourceNotFoundException("Job")
    scope.ensure_owns(existing, "postedBy", "Not authorized to update this job")

    changes = payload.to_document()
    merged = {**existing, **changes}
    check_merged_job(merged)
    await ensure_unique_job(db, existing["postedBy"], merged, exclude_id=oid)

    changes["updatedAt"] = utcnow()
    job = await db[JOBS].find_one_and_update(
        {"_id": oid},
        {"$set": changes},
        return_document=ReturnDocument.AFTER,
    )
    if not job:
        # Deleted between the lookup and the write
        raise ResourceNotFoundException("Job")

    await populate_users(db, [job], "postedBy")
    return {"success": True, "data": serialize_job(job), "message": "Job updated successfully"}


@router.delete("/{job_id}")
async def delete_job(
    job_id: str,
    scope: OwnerScope = Depends(get_owner_scope),
    db: AsyncIOMotorDatabase = Depends(get_db),
):
    oid = to_object_id(job_id)
    existing = await db[JOBS].find_one({"_id": oid}, projection={"postedBy": 1})
    if not existing:
        raise ResourceNotFoundException("Job")
    scope.ensure_owns(existing, "postedBy", "Not authorized to delete this job")

    result = await db[JOBS].delete_one({"_id": oid})
    if result.deleted_count == 0:
        raise ResourceNotFoundException("Job")

    logger.info("Job %s deleted by %s", job_id, scope.owner_id)
    return {"success": True, "message": "Job deleted successfully", "data": {"deletedId": job_id}}


@router.delete("", include_in_schema=False)
@router.delete("/")
async def delete_all_jobs(
    scope: OwnerScope = Depends(get_owner_scope),
    db: AsyncIOMotorDatabase = Depends(get_db),
):
    """Remove every job owned by the caller."""
    result = await db[JOBS].delete_many({"postedBy": scope.owner_id})
    logger.info("Deleted %d jobs for %s", result.deleted_count, scope.owner_id)
    return {
        "success": True,
        "message": f"{result.deleted_count} jobs deleted successfully",
        "data": {"deletedCount": result.deleted_count},
    }

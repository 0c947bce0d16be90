"""Job document model."""

from enum import Enum
from typing import Any, Dict

from pymongo import ASCENDING, DESCENDING, TEXT, IndexModel

from app.models.base import serialize_document
from app.utils.constants import JOB_PIPELINE_STATUSES

JOBS = "jobs"


class JobStatus(str, Enum):
    """Job status. Mixes application pipeline and posting availability values."""

    APPLIED = "applied"
    INTERVIEW = "interview"
    OFFER = "offer"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    OPEN = "open"
    CLOSED = "closed"


class JobType(str, Enum):
    FULL_TIME = "full-time"
    PART_TIME = "part-time"
    INTERNSHIP = "internship"
    REMOTE = "remote"


JOB_INDEXES = [
    IndexModel([("postedBy", ASCENDING), ("createdAt", DESCENDING)]),
    IndexModel([("postedBy", ASCENDING), ("company", ASCENDING)]),
    IndexModel([("postedBy", ASCENDING), ("title", ASCENDING)]),
    IndexModel([("postedBy", ASCENDING), ("status", ASCENDING)]),
    IndexModel([("postedBy", ASCENDING), ("dateAdded", DESCENDING)]),
    IndexModel([("jobType", ASCENDING)]),
    # One tracking entry per (owner, company, title, status) while in the pipeline
    IndexModel(
        [("postedBy", ASCENDING), ("company", ASCENDING), ("title", ASCENDING), ("status", ASCENDING)],
        unique=True,
        partialFilterExpression={"status": {"$in": JOB_PIPELINE_STATUSES}},
        name="job_unique_pipeline_entry",
    ),
    IndexModel(
        [("title", TEXT), ("company", TEXT), ("description", TEXT), ("location", TEXT), ("notes", TEXT)],
        weights={"title": 10, "company": 8, "location": 4, "description": 2, "notes": 1},
        name="job_search_index",
    ),
]


def is_pipeline_status(status: str) -> bool:
    return status in JOB_PIPELINE_STATUSES


def serialize_job(doc: Dict[str, Any]) -> Dict[str, Any]:
    data = serialize_document(doc, reference_fields=("postedBy",))
    data["roleTitle"] = data.get("title")  # Frontend reads roleTitle for jobs and applications alike
    return data

"""Application document model."""

from enum import Enum

from pymongo import ASCENDING, DESCENDING, IndexModel

APPLICATIONS = "applications"


class ApplicationStatus(str, Enum):
    """Application pipeline stages. Independent of JobStatus."""

    APPLIED = "applied"
    IN_REVIEW = "in-review"
    INTERVIEW = "interview"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


APPLICATION_INDEXES = [
    IndexModel([("ownerId", ASCENDING), ("createdAt", DESCENDING)]),
    IndexModel([("ownerId", ASCENDING), ("status", ASCENDING)]),
]

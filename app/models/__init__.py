"""Document models: collection names, enums, indexes and serializers."""

from app.models.application import APPLICATION_INDEXES, APPLICATIONS, ApplicationStatus
from app.models.internship import INTERNSHIP_INDEXES, INTERNSHIPS, InternshipStatus
from app.models.job import JOB_INDEXES, JOBS, JobStatus, JobType
from app.models.settings import SETTINGS, SETTINGS_INDEXES, NotificationsFrequency
from app.models.user import USER_INDEXES, USERS

# Collection name -> indexes created at startup
INDEXES = {
    USERS: USER_INDEXES,
    JOBS: JOB_INDEXES,
    INTERNSHIPS: INTERNSHIP_INDEXES,
    APPLICATIONS: APPLICATION_INDEXES,
    SETTINGS: SETTINGS_INDEXES,
}

__all__ = [
    "APPLICATIONS",
    "INTERNSHIPS",
    "JOBS",
    "SETTINGS",
    "USERS",
    "INDEXES",
    "ApplicationStatus",
    "InternshipStatus",
    "JobStatus",
    "JobType",
    "NotificationsFrequency",
]

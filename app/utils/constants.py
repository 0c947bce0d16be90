"""Common constants."""

# Job statuses covered by the per-owner uniqueness rule
JOB_PIPELINE_STATUSES = ["applied", "interview", "offer", "accepted", "rejected"]

# Buckets reported by the job stats endpoint
JOB_STATS_BUCKETS = ["applied", "interview", "pending", "offer", "accepted", "rejected"]

# Sortable fields per resource
JOB_SORT_FIELDS = [
    "dateAdded",
    "createdAt",
    "updatedAt",
    "title",
    "company",
    "location",
    "status",
    "jobType",
    "deadlineDate",
    "interviewDate",
]
INTERNSHIP_SORT_FIELDS = ["createdAt", "updatedAt", "title", "company", "stipend", "status", "duration"]
APPLICATION_SORT_FIELDS = ["createdAt", "updatedAt", "company", "roleTitle", "status"]
USER_SORT_FIELDS = ["createdAt", "updatedAt", "name", "email"]

# Pagination (default, maximum) per resource
JOB_PAGE_SIZE = (100, 1000)
INTERNSHIP_PAGE_SIZE = (10, 100)
APPLICATION_PAGE_SIZE = (20, 100)
USER_PAGE_SIZE = (20, 100)

# Field limits
TITLE_MAX_LENGTH = 120
LOCATION_MAX_LENGTH = 120
DESCRIPTION_MAX_LENGTH = 10000
NOTES_MAX_LENGTH = 2000
RESUME_VERSION_MAX_LENGTH = 100
LINK_LABEL_MAX_LENGTH = 100

"""Internship document model."""

from enum import Enum

from pymongo import ASCENDING, DESCENDING, TEXT, IndexModel

INTERNSHIPS = "internships"


class InternshipStatus(str, Enum):
    OPEN = "open"
    CLOSED = "closed"


INTERNSHIP_INDEXES = [
    IndexModel([("postedBy", ASCENDING), ("createdAt", DESCENDING)]),
    IndexModel([("company", ASCENDING)]),
    IndexModel([("title", ASCENDING)]),
    IndexModel([("status", ASCENDING)]),
    IndexModel([("stipend", ASCENDING)]),
    IndexModel(
        [("title", TEXT), ("company", TEXT), ("description", TEXT), ("location", TEXT)],
        weights={"title": 6, "company": 5, "description": 2, "location": 2},
        name="internship_text_index",
    ),
]

"""Application request schemas."""

from typing import Any, Dict, List, Optional

from pydantic import Field, ValidationInfo, field_validator

from app.models.application import ApplicationStatus
from app.schemas.common import CamelModel, IsoDatetime, Link, check_date_order, reject_null
from app.utils.constants import NOTES_MAX_LENGTH, RESUME_VERSION_MAX_LENGTH, TITLE_MAX_LENGTH


class ApplicationFields(CamelModel):
    candidate: Optional[str] = Field(default=None, max_length=TITLE_MAX_LENGTH)
    status: Optional[ApplicationStatus] = None
    deadline_date: Optional[IsoDatetime] = None
    interview_date: Optional[IsoDatetime] = None
    resume_version: Optional[str] = Field(default=None, max_length=RESUME_VERSION_MAX_LENGTH)
    links: Optional[List[Link]] = None
    notes: Optional[str] = Field(default=None, max_length=NOTES_MAX_LENGTH)

    @field_validator("interview_date")
    @classmethod
    def interview_after_deadline(cls, v, info: ValidationInfo):
        check_date_order(info.data.get("deadline_date"), v)
        return v


class ApplicationCreate(ApplicationFields):
    candidate: str = Field(..., min_length=1, max_length=TITLE_MAX_LENGTH)
    company: str = Field(..., min_length=1, max_length=TITLE_MAX_LENGTH)
    role_title: str = Field(..., min_length=1, max_length=TITLE_MAX_LENGTH)

    def to_document(self) -> Dict[str, Any]:
        doc = self.model_dump(by_alias=True, exclude_none=True)
        doc.setdefault("status", ApplicationStatus.APPLIED.value)
        doc.setdefault("links", [])
        return doc


class ApplicationUpdate(ApplicationFields):
    company: Optional[str] = Field(default=None, min_length=1, max_length=TITLE_MAX_LENGTH)
    role_title: Optional[str] = Field(default=None, min_length=1, max_length=TITLE_MAX_LENGTH)

    check_not_null = field_validator("candidate", "company", "role_title", "status")(reject_null)


class ApplicationStatusUpdate(CamelModel):
    status: ApplicationStatus

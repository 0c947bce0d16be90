"""Job request schemas."""

from typing import Any, Dict, List, Optional

from pydantic import Field, ValidationInfo, field_validator, model_validator

from app.models.job import JobStatus, JobType
from app.schemas.common import CamelModel, IsoDatetime, Link, check_date_order, reject_null
from app.utils.constants import (
    DESCRIPTION_MAX_LENGTH,
    LOCATION_MAX_LENGTH,
    NOTES_MAX_LENGTH,
    RESUME_VERSION_MAX_LENGTH,
    TITLE_MAX_LENGTH,
)


class SalaryRange(CamelModel):
    min: Optional[float] = Field(default=None, ge=0)
    max: Optional[float] = Field(default=None, ge=0)

    @model_validator(mode="after")
    def check_bounds(self) -> "SalaryRange":
        if self.min is not None and self.max is not None and self.max < self.min:
            raise ValueError("salaryRange.max must be greater than or equal to salaryRange.min")
        return self


class JobFields(CamelModel):
    """Optional job fields shared by create and update."""

    location: Optional[str] = Field(default=None, max_length=LOCATION_MAX_LENGTH)
    description: Optional[str] = Field(default=None, max_length=DESCRIPTION_MAX_LENGTH)
    requirements: Optional[List[str]] = None
    salary_range: Optional[SalaryRange] = None
    job_type: Optional[JobType] = None
    status: Optional[JobStatus] = None
    deadline_date: Optional[IsoDatetime] = None
    interview_date: Optional[IsoDatetime] = None
    resume_version: Optional[str] = Field(default=None, max_length=RESUME_VERSION_MAX_LENGTH)
    links: Optional[List[Link]] = None
    notes: Optional[str] = Field(default=None, max_length=NOTES_MAX_LENGTH)
    extra_fields: Optional[Dict[str, Any]] = None

    @field_validator("interview_date")
    @classmethod
    def interview_after_deadline(cls, v, info: ValidationInfo):
        check_date_order(info.data.get("deadline_date"), v)
        return v


class JobCreate(JobFields):
    title: str = Field(..., min_length=1, max_length=TITLE_MAX_LENGTH)
    company: str = Field(..., min_length=1, max_length=TITLE_MAX_LENGTH)

    def to_document(self) -> Dict[str, Any]:
        doc = self.model_dump(by_alias=True, exclude_none=True)
        doc.setdefault("location", "Not specified")
        doc.setdefault("jobType", JobType.FULL_TIME.value)
        doc.setdefault("status", JobStatus.APPLIED.value)
        doc.setdefault("requirements", [])
        doc.setdefault("links", [])
        return doc


class JobUpdate(JobFields):
    title: Optional[str] = Field(default=None, min_length=1, max_length=TITLE_MAX_LENGTH)
    company: Optional[str] = Field(default=None, min_length=1, max_length=TITLE_MAX_LENGTH)

    check_not_null = field_validator("title", "company", "status", "job_type")(reject_null)

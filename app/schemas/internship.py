"""Internship request schemas."""

from typing import Any, Dict, List, Optional

from pydantic import Field, field_validator

from app.models.internship import InternshipStatus
from app.schemas.common import CamelModel, reject_null
from app.utils.constants import DESCRIPTION_MAX_LENGTH, LOCATION_MAX_LENGTH, TITLE_MAX_LENGTH


class InternshipFields(CamelModel):
    location: Optional[str] = Field(default=None, max_length=LOCATION_MAX_LENGTH)
    description: Optional[str] = Field(default=None, max_length=DESCRIPTION_MAX_LENGTH)
    eligibility: Optional[List[str]] = None
    duration: Optional[str] = Field(default=None, max_length=TITLE_MAX_LENGTH)
    stipend: Optional[float] = Field(default=None, ge=0)
    status: Optional[InternshipStatus] = None


class InternshipCreate(InternshipFields):
    title: str = Field(..., min_length=1, max_length=TITLE_MAX_LENGTH)
    company: str = Field(..., min_length=1, max_length=TITLE_MAX_LENGTH)

    def to_document(self) -> Dict[str, Any]:
        doc = self.model_dump(by_alias=True, exclude_none=True)
        doc.setdefault("status", InternshipStatus.OPEN.value)
        doc.setdefault("eligibility", [])
        return doc


class InternshipUpdate(InternshipFields):
    title: Optional[str] = Field(default=None, min_length=1, max_length=TITLE_MAX_LENGTH)
    company: Optional[str] = Field(default=None, min_length=1, max_length=TITLE_MAX_LENGTH)

    check_not_null = field_validator("title", "company", "status")(reject_null)

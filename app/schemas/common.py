"""Shared schema building blocks."""

from datetime import datetime
from typing import Annotated, Any, Dict, Optional

from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from app.utils.constants import LINK_LABEL_MAX_LENGTH
from app.utils.helpers import to_naive_utc
from app.utils.validators import is_date_only, validate_url


def _expand_date_only(value: Any) -> Any:
    if isinstance(value, str) and is_date_only(value.strip()):
        return f"{value.strip()}T00:00:00"
    return value


# ISO 8601 date or timestamp, stored as naive UTC
IsoDatetime = Annotated[datetime, BeforeValidator(_expand_date_only), AfterValidator(to_naive_utc)]


class CamelModel(BaseModel):
    """Request body model with camelCase wire names.

    Unknown fields are rejected so owner fields and typos fail loudly.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        str_strip_whitespace=True,
        use_enum_values=True,
    )

    def to_document(self) -> Dict[str, Any]:
        """Fields supplied by the client, keyed by their stored names."""
        return self.model_dump(by_alias=True, exclude_unset=True)


class Link(CamelModel):
    label: Optional[str] = Field(default=None, max_length=LINK_LABEL_MAX_LENGTH)
    url: str

    @field_validator("url")
    @classmethod
    def check_url(cls, v: str) -> str:
        if not validate_url(v):
            raise ValueError("each link url must be a valid HTTP/HTTPS URL")
        return v


def check_date_order(deadline: Optional[datetime], interview: Optional[datetime]) -> None:
    """Raise ValueError when the interview is scheduled before the deadline."""
    if deadline is not None and interview is not None and interview < deadline:
        raise ValueError("Interview date cannot be before deadline date")


def reject_null(v: Any) -> Any:
    """Field validator body for required fields in partial updates."""
    if v is None:
        raise ValueError("field cannot be null")
    return v

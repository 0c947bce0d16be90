"""User profile schemas."""

from typing import Optional

from pydantic import EmailStr, Field, field_validator

from app.schemas.common import CamelModel, reject_null
from app.utils.helpers import normalize_email


class UserUpdate(CamelModel):
    """Self-service profile fields. Role changes are not possible here."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=80)
    email: Optional[EmailStr] = None
    profile_picture: Optional[str] = Field(default=None, max_length=2048)

    check_not_null = field_validator("name", "email")(reject_null)

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: Optional[str]) -> Optional[str]:
        return normalize_email(v) if v else v

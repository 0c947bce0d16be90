"""Settings request schema."""

from typing import Optional

from pydantic import StrictBool, field_validator

from app.models.settings import NotificationsFrequency
from app.schemas.common import CamelModel, reject_null


class SettingsUpdate(CamelModel):
    dark_mode: Optional[StrictBool] = None
    email_notifications: Optional[StrictBool] = None
    notifications_frequency: Optional[NotificationsFrequency] = None

    check_not_null = field_validator("dark_mode", "email_notifications", "notifications_frequency")(reject_null)

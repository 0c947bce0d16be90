"""Per-user settings document model."""

from enum import Enum

from pymongo import ASCENDING, IndexModel

SETTINGS = "settings"


class NotificationsFrequency(str, Enum):
    IMMEDIATELY = "immediately"
    DAILY = "daily"
    WEEKLY = "weekly"
    NEVER = "never"


DEFAULT_SETTINGS = {
    "darkMode": False,
    "emailNotifications": True,
    "notificationsFrequency": NotificationsFrequency.DAILY.value,
}

SETTINGS_INDEXES = [
    IndexModel([("username", ASCENDING)], unique=True),
]

"""Validators."""

import re

_URL_PATTERN = re.compile(
    r'^https?://(?:www\.)?[-a-zA-Z0-9@:%._\+~#=]{1,256}\.[a-zA-Z0-9()]{1,6}\b(?:[-a-zA-Z0-9()@:%_\+.~#?&/=]*)$'
)
_LOCAL_URL_PATTERN = re.compile(r'^https?://(?:localhost|\d{1,3}(?:\.\d{1,3}){3})(?::\d+)?(?:/\S*)?$')
_DATE_ONLY_PATTERN = re.compile(r'^\d{4}-\d{2}-\d{2}$')


def validate_url(url: str) -> bool:
    """Validate HTTP/HTTPS URL format."""
    return bool(_URL_PATTERN.match(url) or _LOCAL_URL_PATTERN.match(url))


def is_date_only(value: str) -> bool:
    """True for 'YYYY-MM-DD' strings."""
    return bool(_DATE_ONLY_PATTERN.match(value))

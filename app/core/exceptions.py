"""
Custom Exception Hierarchy
Application-level exceptions mapped to HTTP responses by app.core.errors
"""

from typing import Any, Optional


class AppException(Exception):
    """Base exception for all application errors"""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None, details: Any = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class ValidationException(AppException):
    """Request data failed validation"""

    status_code = 400
    default_message = "Validation failed"

    def __init__(self, message: Optional[str] = None, field: Optional[str] = None, details: Any = None):
        self.field = field
        if details is None and field:
            details = {"fieldErrors": {field: [message or self.default_message]}, "errorCount": 1}
        super().__init__(message, details)


class AuthenticationException(AppException):
    """Missing, invalid or expired credentials"""

    status_code = 401
    default_message = "Not authorized"


class AuthorizationException(AppException):
    """Authenticated user not entitled to the target resource"""

    status_code = 403
    default_message = "Forbidden"


class ResourceNotFoundException(AppException):
    """Requested resource not found"""

    status_code = 404
    default_message = "Resource not found"

    def __init__(self, resource_type: str, message: Optional[str] = None):
        self.resource_type = resource_type
        super().__init__(message or f"{resource_type} not found")


class ConflictException(AppException):
    """Resource already exists"""

    status_code = 409
    default_message = "Conflict"

    def __init__(self, message: Optional[str] = None, field: Optional[str] = None, value: Any = None):
        self.field = field
        self.value = value
        details = {"field": field, "value": value} if field else None
        super().__init__(message, details)


class ServiceUnavailableException(AppException):
    """Upstream dependency unavailable"""

    status_code = 503
    default_message = "Service unavailable"

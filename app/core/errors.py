"""
Terminal exception handlers.

Every failure leaves the API as ``{"success": false, "error": str, "details"?: any}``.
"""

import logging
import traceback
from typing import Any, Dict, List, Optional, Sequence

from bson.errors import InvalidId
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from pymongo.errors import DuplicateKeyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import settings
from app.core.exceptions import AppException

logger = logging.getLogger(__name__)

_VALUE_ERROR_PREFIX = "Value error, "


def error_response(status_code: int, error: str, details: Any = None, **extra: Any) -> JSONResponse:
    content: Dict[str, Any] = {"success": False, "error": error}
    if details is not None:
        content["details"] = details
    content.update(extra)
    return JSONResponse(status_code=status_code, content=content)


def format_validation_errors(errors: Sequence[Dict[str, Any]]) -> Dict[str, Any]:
    """Group pydantic errors by dotted field path."""
    field_errors: Dict[str, List[str]] = {}
    general_errors: List[str] = []

    for err in errors:
        loc = [str(part) for part in err.get("loc", ())]
        if loc and loc[0] in ("body", "query", "path", "header", "cookie"):
            loc = loc[1:]
        message = err.get("msg", "Invalid value")
        if message.startswith(_VALUE_ERROR_PREFIX):
            message = message[len(_VALUE_ERROR_PREFIX):]

        if loc:
            field_errors.setdefault(".".join(loc), []).append(message)
        else:
            general_errors.append(message)

    details: Dict[str, Any] = {"fieldErrors": field_errors}
    if general_errors:
        details["generalErrors"] = general_errors
    details["errorCount"] = len(errors)
    return details


def _log(request: Request, status_code: int, message: str, exc: Optional[BaseException] = None) -> None:
    if status_code >= 500:
        logger.error("%s %s -> %s: %s", request.method, request.url.path, status_code, message, exc_info=exc)
    else:
        logger.warning("%s %s -> %s: %s", request.method, request.url.path, status_code, message)


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    _log(request, exc.status_code, exc.message)
    return error_response(exc.status_code, exc.message, exc.details)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = format_validation_errors(exc.errors())
    _log(request, status.HTTP_400_BAD_REQUEST, f"validation failed ({details['errorCount']} errors)")
    return error_response(status.HTTP_400_BAD_REQUEST, "Validation failed", details)


async def pydantic_validation_handler(request: Request, exc: ValidationError) -> JSONResponse:
    details = format_validation_errors(exc.errors())
    _log(request, status.HTTP_400_BAD_REQUEST, f"validation failed ({details['errorCount']} errors)")
    return error_response(status.HTTP_400_BAD_REQUEST, "Validation failed", details)


async def invalid_id_handler(request: Request, exc: InvalidId) -> JSONResponse:
    _log(request, status.HTTP_400_BAD_REQUEST, str(exc))
    return error_response(status.HTTP_400_BAD_REQUEST, "Invalid ID format")


async def duplicate_key_handler(request: Request, exc: DuplicateKeyError) -> JSONResponse:
    info = exc.details or {}
    key_pattern = info.get("keyPattern") or {}
    key_value = info.get("keyValue") or {}

    field = next(iter(key_pattern or key_value), None)
    if field:
        message = f"Duplicate value entered for {field}: {key_value.get(field)}"
    else:
        message = "Duplicate value entered"

    _log(request, status.HTTP_409_CONFLICT, message)
    return error_response(
        status.HTTP_409_CONFLICT,
        message,
        {"keyPattern": key_pattern, "keyValue": {k: str(v) for k, v in key_value.items()}},
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        _log(request, exc.status_code, "route not found")
        return error_response(
            exc.status_code,
            "Route not found",
            method=request.method,
            path=request.url.path,
        )

    _log(request, exc.status_code, str(exc.detail))
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    _log(request, status.HTTP_500_INTERNAL_SERVER_ERROR, repr(exc), exc)
    extra = {}
    if not settings.is_production:
        extra["stack"] = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error", **extra)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(ValidationError, pydantic_validation_handler)
    app.add_exception_handler(InvalidId, invalid_id_handler)
    app.add_exception_handler(DuplicateKeyError, duplicate_key_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

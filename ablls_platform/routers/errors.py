"""
Error Helpers - ABLLS Assessment Platform
ablls_platform/routers/errors.py

Every error leaves the API in the same envelope:
    {"error_code", "message", "details", "timestamp"}

Mapping:
    request body / query invalid    -> 422 VALIDATION_ERROR
    body is not JSON                -> 400 INVALID_REQUEST
    session / template missing      -> 404
    session in the wrong state      -> 409 INVALID_SESSION_STATE
    warehouse unreachable           -> 503 DATABASE_UNAVAILABLE
    any other repository failure    -> 500 DATABASE_ERROR
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import Request, status
from fastapi.exceptions import HTTPException, RequestValidationError
from fastapi.responses import JSONResponse

from ablls_platform.core.exceptions import (
    DatabaseConnectionException,
    InvalidSessionStateException,
    RepositoryException,
    SessionNotFoundException,
    TemplateNotFoundException,
)
from ablls_platform.models.session import ErrorResponse

logger = logging.getLogger(__name__)

# Per-field overrides, keyed by pydantic error type fragment
FIELD_MESSAGES = {
    "assessment_type": {
        "missing": "Assessment type is required",
        "enum": "Assessment type must be one of: ABLLS-R, AFLLS, DAYC-2, Behavior-Therapy",
    },
    "child_id": {"missing": "Child ID is required"},
    "respondent_id": {"missing": "Respondent ID is required"},
    "question_id": {"missing": "Question ID is required"},
    "answer": {
        "missing": "Answer is required",
        "string_too_long": "Answer must be at most 1000 characters",
    },
}

DEFAULT_MESSAGES = {
    "missing": "Field '{field}' is required",
    "string_too_short": "Field '{field}' is too short",
    "string_too_long": "Field '{field}' is too long",
    "string_type": "Field '{field}' must be a string",
    "enum": "Field '{field}' has an invalid value",
    "extra_forbidden": "Unknown field '{field}' is not allowed",
}


def error_body(error_code: str, message: str, details: Optional[dict] = None) -> dict:
    return ErrorResponse(
        error_code=error_code,
        message=message,
        details=details,
        timestamp=datetime.now(timezone.utc),
    ).model_dump(mode="json")


def get_validation_message(field: str, error_type: str) -> str:
    for fragment, message in FIELD_MESSAGES.get(field, {}).items():
        if fragment in error_type:
            return message
    for fragment, template in DEFAULT_MESSAGES.items():
        if fragment in error_type:
            return template.format(field=field)
    return f"Invalid value for field '{field}'"


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report the first validation error only."""
    errors = exc.errors()
    if not errors:
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content=error_body("VALIDATION_ERROR", "Request validation failed"),
        )

    error_type = errors[0].get("type", "")
    if "json_invalid" in error_type:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=error_body("INVALID_REQUEST", "Malformed JSON request body"),
        )

    loc = errors[0].get("loc", [])
    field = ".".join(str(part) for part in loc if part not in ("body", "query", "path"))
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=error_body(
            "VALIDATION_ERROR",
            get_validation_message(field, error_type),
            {"field": field, "type": error_type} if field else None,
        ),
    )


async def repository_exception_handler(request: Request, exc: RepositoryException):
    logger.error(f"{request.method} {request.url.path} failed in the warehouse: {exc}")
    if isinstance(exc, DatabaseConnectionException):
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=error_body("DATABASE_UNAVAILABLE", "Assessment storage is unavailable"),
        )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body("DATABASE_ERROR", "Assessment storage request failed"),
    )


#  Route helpers: raise HTTPException carrying the envelope as detail

def raise_error(status_code: int, error_code: str, message: str, details: dict = None):
    raise HTTPException(status_code=status_code, detail=error_body(error_code, message, details))


def raise_session_not_found(exc: SessionNotFoundException):
    raise_error(status.HTTP_404_NOT_FOUND, "SESSION_NOT_FOUND", str(exc))


def raise_template_not_found(exc: TemplateNotFoundException):
    raise_error(status.HTTP_404_NOT_FOUND, "TEMPLATE_NOT_FOUND", str(exc))


def raise_invalid_session_state(exc: InvalidSessionStateException):
    raise_error(
        status.HTTP_409_CONFLICT,
        "INVALID_SESSION_STATE",
        exc.message,
        {"session_id": exc.session_id, "status": exc.status},
    )

"""
Session Router - ABLLS Assessment Platform
ablls_platform/routers/sessions.py

Questionnaire session lifecycle: start, answer, complete.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status

from ablls_platform.core.dependencies import get_session_service
from ablls_platform.core.exceptions import (
    InvalidSessionStateException,
    SessionNotFoundException,
)
from ablls_platform.models.enumerations import AssessmentType
from ablls_platform.models.session import (
    Answer,
    AnswerUpsert,
    ErrorResponse,
    SessionCreate,
    SessionListItem,
    SessionResponse,
)
from ablls_platform.routers.errors import raise_invalid_session_state, raise_session_not_found
from ablls_platform.services.session_service import SessionService

router = APIRouter(prefix="/sessions", tags=["Sessions"])


SESSION_NOT_FOUND_RESPONSE = {
    "model": ErrorResponse,
    "description": "Session not found",
    "content": {
        "application/json": {
            "example": {
                "error_code": "SESSION_NOT_FOUND",
                "message": "Session with ID 9b2f0c0e-0000-4000-8000-000000000000 not found",
                "details": None,
                "timestamp": "2026-01-28T12:00:00Z"
            }
        }
    }
}

VALIDATION_ERROR_RESPONSE = {
    "model": ErrorResponse,
    "description": "Validation error",
    "content": {
        "application/json": {
            "example": {
                "error_code": "VALIDATION_ERROR",
                "message": "Assessment type must be one of: ABLLS-R, AFLLS, DAYC-2, Behavior-Therapy",
                "details": {"field": "assessment_type", "type": "enum"},
                "timestamp": "2026-01-28T12:00:00Z"
            }
        }
    }
}


#  Routes 

@router.post(
    "",
    response_model=SessionResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        200: {"model": SessionResponse, "description": "Existing in-progress session returned"},
        400: {
            "model": ErrorResponse,
            "description": "Invalid request",
            "content": {
                "application/json": {
                    "example": {
                        "error_code": "INVALID_REQUEST",
                        "message": "Malformed JSON request body",
                        "details": None,
                        "timestamp": "2026-01-28T12:00:00Z"
                    }
                }
            }
        },
        422: VALIDATION_ERROR_RESPONSE,
    },
    summary="Start a questionnaire session",
    description=(
        "Starts a session for a child and assessment type. If an in-progress session "
        "already exists for the same pair it is returned with status 200 instead."
    ),
)
async def start_session(
    payload: SessionCreate,
    response: Response,
    session_service: SessionService = Depends(get_session_service),
) -> SessionResponse:
    session, created = session_service.start_session(
        assessment_type=payload.assessment_type.value,
        child_id=payload.child_id,
        respondent_id=payload.respondent_id,
        child_name=payload.child_name,
    )
    if not created:
        response.status_code = status.HTTP_200_OK
    return session


@router.get(
    "",
    response_model=List[SessionListItem],
    responses={422: VALIDATION_ERROR_RESPONSE},
    summary="List sessions",
    description="Lists sessions, newest first, optionally filtered by child and assessment type.",
)
async def list_sessions(
    child_id: Optional[str] = Query(default=None),
    assessment_type: Optional[AssessmentType] = Query(default=None),
    session_service: SessionService = Depends(get_session_service),
) -> List[SessionListItem]:
    return session_service.list_sessions(
        child_id=child_id,
        assessment_type=assessment_type.value if assessment_type else None,
    )


@router.get(
    "/{session_id}",
    response_model=SessionResponse,
    responses={404: SESSION_NOT_FOUND_RESPONSE},
    summary="Get a session with its answers",
)
async def get_session(
    session_id: str,
    session_service: SessionService = Depends(get_session_service),
) -> SessionResponse:
    try:
        return session_service.get_session(session_id)
    except SessionNotFoundException as e:
        raise_session_not_found(e)


@router.put(
    "/{session_id}/responses",
    response_model=Answer,
    responses={
        404: SESSION_NOT_FOUND_RESPONSE,
        409: {
            "model": ErrorResponse,
            "description": "Session already completed",
            "content": {
                "application/json": {
                    "example": {
                        "error_code": "INVALID_SESSION_STATE",
                        "message": "Session is completed; answers can no longer be changed",
                        "details": {"session_id": "9b2f0c0e-0000-4000-8000-000000000000", "status": "completed"},
                        "timestamp": "2026-01-28T12:00:00Z"
                    }
                }
            }
        },
        422: VALIDATION_ERROR_RESPONSE,
    },
    summary="Save an answer",
    description="Saves or replaces the answer to one question of an in-progress session.",
)
async def save_response(
    session_id: str,
    payload: AnswerUpsert,
    session_service: SessionService = Depends(get_session_service),
) -> Answer:
    try:
        return session_service.save_response(session_id, payload.question_id, payload.answer)
    except SessionNotFoundException as e:
        raise_session_not_found(e)
    except InvalidSessionStateException as e:
        raise_invalid_session_state(e)


@router.patch(
    "/{session_id}/complete",
    response_model=SessionResponse,
    responses={404: SESSION_NOT_FOUND_RESPONSE},
    summary="Complete a session",
    description="Marks the session completed. Completing an already completed session is a no-op.",
)
async def complete_session(
    session_id: str,
    session_service: SessionService = Depends(get_session_service),
) -> SessionResponse:
    try:
        return session_service.complete_session(session_id)
    except SessionNotFoundException as e:
        raise_session_not_found(e)

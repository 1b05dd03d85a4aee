from pydantic import BaseModel, Field
from datetime import datetime, timezone
from typing import Optional, List

from ablls_platform.models.enumerations import AssessmentType, SessionStatus


class Answer(BaseModel):
    """
    One stored answer; unique per (session_id, question_id).
    """

    question_id: str
    answer: str
    updated_at: Optional[datetime] = None


class SessionCreate(BaseModel):
    """
    Model for starting a questionnaire session.
    """

    assessment_type: AssessmentType = Field(
        ...,
        description="Assessment type (ABLLS-R, AFLLS, DAYC-2, Behavior-Therapy)"
    )
    child_id: str = Field(..., min_length=1, max_length=255)
    respondent_id: str = Field(..., min_length=1, max_length=255)
    child_name: Optional[str] = Field(default=None, max_length=255)


class SessionResponse(BaseModel):
    """
    Session record with its stored answers.
    """

    id: str
    assessment_type: str
    child_id: str
    respondent_id: Optional[str] = None
    child_name: Optional[str] = None
    status: SessionStatus = SessionStatus.IN_PROGRESS
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    completed_at: Optional[datetime] = None
    responses: List[Answer] = Field(default_factory=list)

    class Config:
        from_attributes = True


class SessionListItem(BaseModel):
    id: str
    assessment_type: str
    child_id: str
    respondent_id: Optional[str] = None
    status: SessionStatus
    created_at: datetime
    completed_at: Optional[datetime] = None
    response_count: int = 0


class AnswerUpsert(BaseModel):
    """
    Model for saving (or replacing) the answer to one question.
    """

    question_id: str = Field(..., min_length=1)
    answer: str = Field(
        ..., max_length=1000, description="Free-text answer, e.g. '3 - Inconsistent / Partial'"
    )


class ErrorResponse(BaseModel):
    """
    Standard error response model.
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: Optional[dict] = Field(default=None, description="Additional error details")
    timestamp: datetime = Field(..., description="Error occurrence timestamp")

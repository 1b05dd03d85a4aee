"""
Session Service - Questionnaire Session Lifecycle
ablls_platform/services/session_service.py

    start     → in-progress   (reuses an existing in-progress session for the
                               same assessment type and child)
    answer    → upsert one answer per (session, question)
    complete  → completed     (terminal; completed_at stamped once)

A completed session is an immutable answer snapshot: saving an answer to it
raises InvalidSessionStateException.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from ablls_platform.core.exceptions import (
    InvalidSessionStateException,
    RepositoryException,
    SessionNotFoundException,
)
from ablls_platform.models.enumerations import SessionStatus
from ablls_platform.models.session import Answer, SessionListItem, SessionResponse
from ablls_platform.repositories.session_repository import SessionRepository

logger = logging.getLogger(__name__)


class SessionService:
    """Session lifecycle rules on top of SessionRepository."""

    def __init__(self, session_repo: SessionRepository):
        self.session_repo = session_repo

    def start_session(
        self,
        assessment_type: str,
        child_id: str,
        respondent_id: str,
        child_name: Optional[str] = None,
    ) -> Tuple[SessionResponse, bool]:
        """
        Start a session, or return the in-progress one for the same pair.

        A start that loses a race to a concurrent one gets that session
        back instead of inserting a second one. See SessionRepository.create
        for the remaining window.

        Returns:
            (session, created) where created is False for an existing session
        """
        # Two attempts: the second covers a session that was created and
        # completed between our check and our insert.
        for _ in range(2):
            existing = self.session_repo.find_in_progress(assessment_type, child_id)
            if existing is not None:
                logger.info(
                    f"Reusing in-progress session {existing.id} for child {child_id} ({assessment_type})"
                )
                return existing, False

            session = self.session_repo.create(
                assessment_type=assessment_type,
                child_id=child_id,
                respondent_id=respondent_id,
                child_name=child_name,
            )
            if session is not None:
                break
            logger.info(f"Concurrent start for child {child_id} ({assessment_type}), re-reading")
        else:
            raise RepositoryException(
                f"Session start for child {child_id} ({assessment_type}) kept racing"
            )

        logger.info(f"Started session {session.id} for child {child_id} ({assessment_type})")
        return session, True

    def get_session(self, session_id: str) -> SessionResponse:
        session = self.session_repo.get_by_id(session_id)
        if session is None:
            raise SessionNotFoundException(session_id)
        return session

    def list_sessions(
        self,
        child_id: Optional[str] = None,
        assessment_type: Optional[str] = None,
    ) -> List[SessionListItem]:
        return self.session_repo.list_sessions(child_id=child_id, assessment_type=assessment_type)

    def save_response(self, session_id: str, question_id: str, answer: str) -> Answer:
        """
        Save or replace one answer.

        Raises:
            SessionNotFoundException: session does not exist
            InvalidSessionStateException: session is already completed
        """
        session = self.get_session(session_id)
        if session.status == SessionStatus.COMPLETED:
            raise InvalidSessionStateException(
                session_id,
                session.status.value,
                "Session is completed; answers can no longer be changed",
            )
        return self.session_repo.upsert_response(session_id, question_id, answer)

    def complete_session(self, session_id: str) -> SessionResponse:
        """Mark a session completed. Completing twice keeps the first timestamp."""
        session = self.get_session(session_id)
        if session.status == SessionStatus.COMPLETED:
            return session

        completed = self.session_repo.mark_completed(session_id, datetime.now(timezone.utc))
        logger.info(f"Completed session {session_id} with {len(session.responses)} answers")
        return completed

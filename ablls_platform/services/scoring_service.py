"""
Scoring Service - VB Grading Orchestrator
ablls_platform/services/scoring_service.py

Loads a completed session and its template, then runs the GradingCalculator:

  1. Read the session (with answers) from QUESTIONNAIRE_SESSIONS / SESSION_RESPONSES
  2. Refuse anything that is not completed
  3. Read the template for the session's assessment type (Redis read-through)
  4. GradingCalculator → VBGradingResult

The grading result itself is never cached or written back; every call
recomputes it from the stored answers.
"""

import logging
from typing import List, Optional

from ablls_platform.core.exceptions import (
    InvalidSessionStateException,
    SessionNotFoundException,
    TemplateNotFoundException,
)
from ablls_platform.models.enumerations import SessionStatus
from ablls_platform.models.grading import VBGradingResult
from ablls_platform.models.template import Template
from ablls_platform.repositories.session_repository import SessionRepository
from ablls_platform.repositories.template_repository import TemplateRepository
from ablls_platform.scoring.grading_calculator import GradingCalculator
from ablls_platform.scoring.vb_mapping import VBExportRow
from ablls_platform.services.cache import TTL_TEMPLATE, get_cache, template_cache_key

logger = logging.getLogger(__name__)


class ScoringService:
    """
    Orchestrates VB grading for a single session.

    Reads from:
      - QUESTIONNAIRE_SESSIONS + SESSION_RESPONSES (session and answers)
      - QUESTIONNAIRE_TEMPLATES + TEMPLATE_DOMAINS + TEMPLATE_QUESTIONS
    """

    def __init__(
        self,
        session_repo: SessionRepository,
        template_repo: TemplateRepository,
        calculator: Optional[GradingCalculator] = None,
    ):
        self.session_repo = session_repo
        self.template_repo = template_repo
        self.calculator = calculator or GradingCalculator()

    def calculate_scoring(self, session_id: str) -> VBGradingResult:
        """
        Grade a completed session.

        Raises:
            SessionNotFoundException: session does not exist
            InvalidSessionStateException: session is not completed
            TemplateNotFoundException: no template for the session's assessment type
        """
        session = self.session_repo.get_by_id(session_id)
        if session is None:
            raise SessionNotFoundException(session_id)

        if session.status != SessionStatus.COMPLETED:
            raise InvalidSessionStateException(
                session_id,
                session.status.value,
                f"Session is not completed: {session.status.value}",
            )

        template = self.get_template(session.assessment_type)

        logger.info(
            f"Scoring session {session_id} ({session.assessment_type}, "
            f"{len(session.responses)} answers)"
        )
        return self.calculator.calculate(session, template)

    def get_vb_export(self, session_id: str) -> List[VBExportRow]:
        """Flat VB export rows for a completed session, without the full report."""
        return self.calculate_scoring(session_id).vb_export

    def get_template(self, assessment_type: str) -> Template:
        """
        Template for an assessment type, via the Redis cache when available.

        Raises:
            TemplateNotFoundException: template is not seeded
        """
        cache_key = template_cache_key(assessment_type)
        cache = get_cache()

        if cache:
            try:
                cached = cache.get(cache_key, Template)
                if cached:
                    return cached
            except Exception as e:
                logger.warning(f"Template cache read failed for {cache_key}: {e}")

        template = self.template_repo.get_by_assessment_type(assessment_type)
        if template is None:
            logger.error(f"No template seeded for assessment type {assessment_type}")
            raise TemplateNotFoundException(assessment_type)

        if cache:
            try:
                cache.set(cache_key, template, TTL_TEMPLATE)
            except Exception as e:
                logger.warning(f"Template cache write failed for {cache_key}: {e}")

        return template

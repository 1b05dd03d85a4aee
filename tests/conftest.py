# tests/conftest.py

"""
Pytest Fixtures - Shared test configurations and data for scoring, services and APIs

FIXTURE ID REFERENCE:
- Template questions: q-a1, q-a2 (domain A), q-b1, q-b2 (domain B)
- Sessions: created through InMemorySessionRepository (uuid4 ids)
"""

import pytest
from copy import deepcopy
from datetime import datetime, timezone
from typing import Dict, List, Optional
from unittest.mock import patch
from uuid import uuid4

from fastapi.testclient import TestClient

from ablls_platform.core.dependencies import get_session_repository, get_template_repository
from ablls_platform.main import app
from ablls_platform.models.enumerations import SessionStatus
from ablls_platform.models.session import Answer, SessionListItem, SessionResponse
from ablls_platform.models.template import (
    Domain,
    DomainSummary,
    Question,
    Template,
    TemplateSummary,
)


ABA_OPTIONS = [
    "0 - Not present",
    "1 - Emerging / Prompted",
    "2 - Inconsistent / Partial",
    "3 - Consistent / Independent",
    "4 - Mastered / Generalized",
]

COMPLETED_AT = datetime(2026, 3, 14, 15, 30, tzinfo=timezone.utc)


# =============================================================================
# IN-MEMORY REPOSITORIES
# =============================================================================

class InMemorySessionRepository:
    """Dict-backed stand-in for SessionRepository."""

    def __init__(self):
        self.sessions: Dict[str, SessionResponse] = {}

    def add(self, session: SessionResponse) -> SessionResponse:
        self.sessions[session.id] = deepcopy(session)
        return session

    def create(self, assessment_type, child_id, respondent_id, child_name=None) -> Optional[SessionResponse]:
        if self.find_in_progress(assessment_type, child_id) is not None:
            return None
        session = SessionResponse(
            id=str(uuid4()),
            assessment_type=assessment_type,
            child_id=child_id,
            respondent_id=respondent_id,
            child_name=child_name,
        )
        return deepcopy(self.add(session))

    def get_by_id(self, session_id: str) -> Optional[SessionResponse]:
        session = self.sessions.get(session_id)
        return deepcopy(session) if session else None

    def find_in_progress(self, assessment_type: str, child_id: str) -> Optional[SessionResponse]:
        for session in self.sessions.values():
            if (
                session.assessment_type == assessment_type
                and session.child_id == child_id
                and session.status == SessionStatus.IN_PROGRESS
            ):
                return deepcopy(session)
        return None

    def list_sessions(self, child_id=None, assessment_type=None) -> List[SessionListItem]:
        items = []
        for s in self.sessions.values():
            if child_id and s.child_id != child_id:
                continue
            if assessment_type and s.assessment_type != assessment_type:
                continue
            items.append(SessionListItem(
                id=s.id,
                assessment_type=s.assessment_type,
                child_id=s.child_id,
                respondent_id=s.respondent_id,
                status=s.status,
                created_at=s.created_at,
                completed_at=s.completed_at,
                response_count=len(s.responses),
            ))
        return sorted(items, key=lambda i: i.created_at, reverse=True)

    def get_responses(self, session_id: str) -> List[Answer]:
        return deepcopy(self.sessions[session_id].responses)

    def upsert_response(self, session_id: str, question_id: str, answer: str) -> Answer:
        session = self.sessions[session_id]
        stored = Answer(question_id=question_id, answer=answer, updated_at=datetime.now(timezone.utc))
        session.responses = [r for r in session.responses if r.question_id != question_id]
        session.responses.append(stored)
        return stored

    def mark_completed(self, session_id: str, completed_at: datetime) -> Optional[SessionResponse]:
        session = self.sessions.get(session_id)
        if session is None:
            return None
        session.status = SessionStatus.COMPLETED
        session.completed_at = completed_at
        return deepcopy(session)


class InMemoryTemplateRepository:
    """Dict-backed stand-in for TemplateRepository."""

    def __init__(self, templates: Optional[List[Template]] = None):
        self.templates = {t.assessment_type: t for t in (templates or [])}
        self.lookups = 0

    def list_templates(self) -> List[TemplateSummary]:
        return [
            TemplateSummary(
                id=t.id,
                assessment_type=t.assessment_type,
                title=t.title,
                description=t.description,
                total_questions=t.question_count,
                domains=[
                    DomainSummary(id=d.id, name=d.name, question_count=len(d.questions))
                    for d in t.domains
                ],
            )
            for t in self.templates.values()
        ]

    def get_by_assessment_type(self, assessment_type: str) -> Optional[Template]:
        self.lookups += 1
        template = self.templates.get(assessment_type)
        return deepcopy(template) if template else None


# =============================================================================
# TEMPLATE FIXTURES
# =============================================================================

@pytest.fixture
def sample_template():
    """
    ABLLS-R template with two domains.

    q-a1: 5 options        -> max 4
    q-a2: score type "0-2" -> max 2
    q-b1: score type "0-4" -> max 4
    q-b2: no options       -> max 4 (default)
    """
    return Template(
        id="t-ablls",
        assessment_type="ABLLS-R",
        title="ABLLS-R Assessment Questionnaire",
        domains=[
            Domain(
                id="d-a",
                name="Cooperation & Reinforcer Effectiveness",
                code="A",
                sort_order=0,
                questions=[
                    Question(id="q-a1", skill_code="A1", task_name="Takes reinforcer",
                             question_text="Takes a reinforcer from a familiar adult.",
                             options=ABA_OPTIONS, sort_order=0),
                    Question(id="q-a2", skill_code="A2", task_name="Sits for reinforcer",
                             question_text="Sits in a chair for a brief period.",
                             options=["0 - No", "1 - Partial", "2 - Yes"], score_type="0-2",
                             sort_order=1),
                ],
            ),
            Domain(
                id="d-b",
                name="Visual Performance",
                code="B",
                sort_order=1,
                questions=[
                    Question(id="q-b1", skill_code="B1", question_text="Matches identical objects.",
                             options=ABA_OPTIONS, score_type="0-4", sort_order=0),
                    Question(id="q-b2", skill_code="B2", question_text="Completes an inset puzzle.",
                             sort_order=1),
                ],
            ),
        ],
    )


@pytest.fixture
def sample_answers():
    """Expected: A = 5/6 (83.33, Proficient), B = 4/8 (50.0, Developing), overall 9/14."""
    return [
        Answer(question_id="q-a1", answer="3 - Consistent / Independent"),
        Answer(question_id="q-a2", answer="2 - Yes"),
        Answer(question_id="q-b1", answer="4 - Mastered / Generalized"),
    ]


@pytest.fixture
def completed_session(sample_answers):
    return SessionResponse(
        id="s-completed",
        assessment_type="ABLLS-R",
        child_id="child-001",
        respondent_id="parent-001",
        child_name="Sam Rivera",
        status=SessionStatus.COMPLETED,
        created_at=datetime(2026, 3, 14, 15, 0, tzinfo=timezone.utc),
        completed_at=COMPLETED_AT,
        responses=sample_answers,
    )


@pytest.fixture
def in_progress_session(sample_answers):
    return SessionResponse(
        id="s-open",
        assessment_type="ABLLS-R",
        child_id="child-002",
        respondent_id="parent-002",
        status=SessionStatus.IN_PROGRESS,
        responses=sample_answers[:1],
    )


# =============================================================================
# REPOSITORY FIXTURES
# =============================================================================

@pytest.fixture
def session_repo(completed_session, in_progress_session):
    repo = InMemorySessionRepository()
    repo.add(completed_session)
    repo.add(in_progress_session)
    return repo


@pytest.fixture
def template_repo(sample_template):
    return InMemoryTemplateRepository([sample_template])


@pytest.fixture
def empty_template_repo():
    """Template store with nothing seeded."""
    return InMemoryTemplateRepository()


@pytest.fixture
def no_cache():
    """Redis unavailable for the scoring service."""
    with patch("ablls_platform.services.scoring_service.get_cache", return_value=None) as mock_get:
        yield mock_get


# =============================================================================
# FASTAPI TEST CLIENT FIXTURE
# =============================================================================

@pytest.fixture
def client(session_repo, template_repo, no_cache):
    """TestClient with in-memory repositories and no Redis."""
    app.dependency_overrides[get_session_repository] = lambda: session_repo
    app.dependency_overrides[get_template_repository] = lambda: template_repo
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()

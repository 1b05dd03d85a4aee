"""
Dependencies - ABLLS Assessment Platform
ablls_platform/core/dependencies.py

FastAPI dependency injection for repositories and services.
"""

from functools import lru_cache

from fastapi import Depends

from ablls_platform.repositories.session_repository import SessionRepository
from ablls_platform.repositories.template_repository import TemplateRepository
from ablls_platform.services.scoring_service import ScoringService
from ablls_platform.services.session_service import SessionService


@lru_cache()
def get_session_repository() -> SessionRepository:
    """Get cached SessionRepository instance."""
    return SessionRepository()


@lru_cache()
def get_template_repository() -> TemplateRepository:
    """Get cached TemplateRepository instance."""
    return TemplateRepository()


def get_session_service(
    session_repo: SessionRepository = Depends(get_session_repository),
) -> SessionService:
    return SessionService(session_repo)


def get_scoring_service(
    session_repo: SessionRepository = Depends(get_session_repository),
    template_repo: TemplateRepository = Depends(get_template_repository),
) -> ScoringService:
    return ScoringService(session_repo, template_repo)

"""
Template Router - ABLLS Assessment Platform
ablls_platform/routers/templates.py

Read-only access to seeded questionnaire templates.
"""

from typing import List

from fastapi import APIRouter, Depends

from ablls_platform.core.dependencies import get_scoring_service, get_template_repository
from ablls_platform.core.exceptions import TemplateNotFoundException
from ablls_platform.models.session import ErrorResponse
from ablls_platform.models.template import Template, TemplateSummary
from ablls_platform.repositories.template_repository import TemplateRepository
from ablls_platform.routers.errors import raise_template_not_found
from ablls_platform.services.scoring_service import ScoringService

router = APIRouter(prefix="/templates", tags=["Templates"])


@router.get(
    "",
    response_model=List[TemplateSummary],
    summary="List questionnaire templates",
    description="Lists every seeded template with domain and question counts.",
)
async def list_templates(
    template_repo: TemplateRepository = Depends(get_template_repository),
) -> List[TemplateSummary]:
    return template_repo.list_templates()


@router.get(
    "/{assessment_type}",
    response_model=Template,
    responses={404: {"model": ErrorResponse, "description": "Template not found"}},
    summary="Get a full template",
    description="Returns a template with all domains and questions in sort order.",
)
async def get_template(
    assessment_type: str,
    scoring_service: ScoringService = Depends(get_scoring_service),
) -> Template:
    try:
        return scoring_service.get_template(assessment_type)
    except TemplateNotFoundException as e:
        raise_template_not_found(e)

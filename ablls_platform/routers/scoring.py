"""
Scoring Router - ABLLS Assessment Platform
ablls_platform/routers/scoring.py

Endpoints:
  GET  /api/v1/sessions/{session_id}/scoring    - Full VB grading result
  GET  /api/v1/sessions/{session_id}/report     - Four-sheet .xlsx report
  GET  /api/v1/sessions/{session_id}/vb-export  - Flat VB export rows
  POST /api/v1/vb/map                           - Batch VB mapping of numeric answers
"""

import logging
from typing import List

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from ablls_platform.core.dependencies import get_scoring_service
from ablls_platform.core.exceptions import (
    InvalidSessionStateException,
    SessionNotFoundException,
    TemplateNotFoundException,
)
from ablls_platform.models.grading import VBGradingResult, VBMapRequest
from ablls_platform.models.session import ErrorResponse
from ablls_platform.routers.errors import (
    raise_invalid_session_state,
    raise_session_not_found,
    raise_template_not_found,
)
from ablls_platform.scoring.vb_mapping import VBExportRow, VBMappingResult, map_answers_to_vb
from ablls_platform.services.report_generator import (
    XLSX_MEDIA_TYPE,
    build_report_filename,
    render_report,
)
from ablls_platform.services.scoring_service import ScoringService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Scoring"])


SCORING_ERROR_RESPONSES = {
    404: {"model": ErrorResponse, "description": "Session or template not found"},
    409: {
        "model": ErrorResponse,
        "description": "Session is not completed",
        "content": {
            "application/json": {
                "example": {
                    "error_code": "INVALID_SESSION_STATE",
                    "message": "Session is not completed: in-progress",
                    "details": {"session_id": "9b2f0c0e-0000-4000-8000-000000000000", "status": "in-progress"},
                    "timestamp": "2026-01-28T12:00:00Z"
                }
            }
        }
    },
}


def _run(operation, session_id: str):
    try:
        return operation(session_id)
    except SessionNotFoundException as e:
        raise_session_not_found(e)
    except TemplateNotFoundException as e:
        raise_template_not_found(e)
    except InvalidSessionStateException as e:
        raise_invalid_session_state(e)


@router.get(
    "/sessions/{session_id}/scoring",
    response_model=VBGradingResult,
    responses=SCORING_ERROR_RESPONSES,
    summary="Grade a completed session",
    description=(
        "Per-domain raw score, max possible, percentage and proficiency, the overall "
        "summary, and per-question VB fill patterns. Recomputed on every call."
    ),
)
async def get_scoring(
    session_id: str,
    scoring_service: ScoringService = Depends(get_scoring_service),
) -> VBGradingResult:
    return _run(scoring_service.calculate_scoring, session_id)


@router.get(
    "/sessions/{session_id}/report",
    response_class=Response,
    responses={
        200: {"content": {XLSX_MEDIA_TYPE: {}}, "description": "Excel report"},
        **SCORING_ERROR_RESPONSES,
    },
    summary="Download the Excel report",
    description="Summary, Domain Scores, Detailed Responses and VB Mapping sheets.",
)
async def download_report(
    session_id: str,
    scoring_service: ScoringService = Depends(get_scoring_service),
) -> Response:
    result = _run(scoring_service.calculate_scoring, session_id)
    filename = build_report_filename(result)
    content = render_report(result)
    logger.info(f"Report {filename} ({len(content)} bytes) for session {session_id}")
    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get(
    "/sessions/{session_id}/vb-export",
    response_model=List[VBExportRow],
    responses=SCORING_ERROR_RESPONSES,
    summary="VB export rows",
    description="One {question, score, max, normalized} row per template question.",
)
async def get_vb_export(
    session_id: str,
    scoring_service: ScoringService = Depends(get_scoring_service),
) -> List[VBExportRow]:
    return _run(scoring_service.get_vb_export, session_id)


@router.post(
    "/vb/map",
    response_model=List[VBMappingResult],
    summary="Map numeric answers onto VB bars",
    description=(
        "Maps every question in answers and score_map, sorted naturally. "
        "A score_map value of 2 selects the 2-point scale; anything else is 4."
    ),
)
async def map_vb(payload: VBMapRequest) -> List[VBMappingResult]:
    return map_answers_to_vb(payload.answers, payload.score_map)

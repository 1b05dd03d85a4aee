"""
Health Check Router - ABLLS Assessment Platform
ablls_platform/routers/health.py

Snowflake holds every session and template, so the service is "unhealthy"
(503) without it. Redis only caches templates; losing it is reported as
"degraded" with a 200.
"""
from datetime import datetime, timezone
from typing import Callable, Dict

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from ablls_platform.config import settings
from ablls_platform.services.cache import get_cache
from ablls_platform.services.snowflake import get_snowflake_connection

router = APIRouter(tags=["Health"])

HEALTHY = "healthy"


class HealthResponse(BaseModel):
    status: str = Field(..., description="healthy | degraded | unhealthy")
    timestamp: datetime
    version: str
    dependencies: Dict[str, str] = Field(..., description="Per-dependency check result")


def check_snowflake() -> str:
    if not settings.snowflake_configured:
        return "unhealthy: not configured"
    conn = get_snowflake_connection()
    try:
        cursor = conn.cursor()
        try:
            cursor.execute("SELECT 1")
        finally:
            cursor.close()
    finally:
        conn.close()
    return HEALTHY


def check_redis() -> str:
    cache = get_cache()
    if cache is None:
        return "unhealthy: unavailable, template caching disabled"
    cache.ping()
    return HEALTHY


def _probe(check: Callable[[], str]) -> str:
    try:
        return check()
    except Exception as e:
        return f"unhealthy: {str(e)[:100]}"


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Dependency health check",
    responses={503: {"model": HealthResponse, "description": "Snowflake unavailable"}},
)
async def health_check():
    dependencies = {
        "snowflake": _probe(check_snowflake),
        "redis": _probe(check_redis),
    }
    if dependencies["snowflake"] != HEALTHY:
        overall, code = "unhealthy", status.HTTP_503_SERVICE_UNAVAILABLE
    elif dependencies["redis"] != HEALTHY:
        overall, code = "degraded", status.HTTP_200_OK
    else:
        overall, code = HEALTHY, status.HTTP_200_OK

    body = HealthResponse(
        status=overall,
        timestamp=datetime.now(timezone.utc),
        version=settings.APP_VERSION,
        dependencies=dependencies,
    )
    return JSONResponse(status_code=code, content=body.model_dump(mode="json"))

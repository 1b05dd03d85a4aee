"""
Template Cache - ABLLS Assessment Platform
ablls_platform/services/cache.py

Process-wide Redis handle for template caching. get_cache() returns None
while Redis is unreachable and tries again on the next call, so callers
fall back to Snowflake.

Only seeded questionnaire templates are cached. Sessions, answers and
grading results are always read fresh.
"""
import logging
import redis
from typing import Iterable, Optional
from ablls_platform.services.redis_cache import RedisCache
from ablls_platform.config import settings

logger = logging.getLogger(__name__)

TTL_TEMPLATE = settings.CACHE_TTL_TEMPLATE

_cache: Optional[RedisCache] = None


def template_cache_key(assessment_type: str) -> str:
    return f"template:{assessment_type}"


def get_cache() -> Optional[RedisCache]:
    global _cache
    if _cache is not None:
        return _cache
    try:
        candidate = RedisCache()
        candidate.ping()
    except (redis.RedisError, ConnectionError) as e:
        logger.debug(f"Redis unavailable, template caching disabled: {e}")
        return None
    _cache = candidate
    return _cache


def reset_cache() -> None:
    """Forget the current handle; the next get_cache() reconnects."""
    global _cache
    _cache = None


def invalidate_templates(assessment_types: Iterable[str]) -> int:
    """
    Drop cached templates after a reseed.

    Returns:
        Number of cache entries removed (0 when Redis is unavailable).
    """
    cache = get_cache()
    if cache is None:
        return 0
    return cache.delete(*(template_cache_key(t) for t in assessment_types))

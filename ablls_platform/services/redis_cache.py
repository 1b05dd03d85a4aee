"""
Redis Model Cache
ablls_platform/services/redis_cache.py

Stores pydantic models as JSON under a key namespace, e.g.
"ablls:template:ABLLS-R".
"""
import redis
from typing import Optional, Type, TypeVar
from pydantic import BaseModel
from ablls_platform.config import settings

M = TypeVar("M", bound=BaseModel)


class RedisCache:
    def __init__(self, url: Optional[str] = None, namespace: Optional[str] = None):
        self.namespace = namespace or settings.CACHE_NAMESPACE
        self.client = redis.from_url(
            url or settings.REDIS_URL,
            decode_responses=True,
            socket_connect_timeout=settings.REDIS_CONNECT_TIMEOUT,
        )

    def qualify(self, key: str) -> str:
        return f"{self.namespace}:{key}"

    def ping(self) -> bool:
        return bool(self.client.ping())

    def get(self, key: str, model: Type[M]) -> Optional[M]:
        """Load a cached model, or None on a miss."""
        payload = self.client.get(self.qualify(key))
        if payload is None:
            return None
        return model.model_validate_json(payload)

    def set(self, key: str, value: BaseModel, ttl_seconds: int) -> None:
        self.client.setex(self.qualify(key), ttl_seconds, value.model_dump_json())

    def delete(self, *keys: str) -> int:
        """Remove entries; returns how many existed."""
        if not keys:
            return 0
        return int(self.client.delete(*(self.qualify(key) for key in keys)))

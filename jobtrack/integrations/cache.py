"""AI response cache behind a Protocol, so routes can inject either backend.

RedisCacheService talks to Redis; NullCacheService is the no-op used when
Redis is not configured or unreachable (and in tests).
"""

import hashlib
import json
import logging
from typing import Protocol

import redis

from ..config import settings

logger = logging.getLogger(__name__)

DEFAULT_TTL = 86400  # 24 hours


def cache_key(namespace: str, *parts: str) -> str:
    """Build a short, stable key from arbitrary text parts."""
    digest = hashlib.sha256("\x1f".join(parts).encode()).hexdigest()[:24]
    return f"jobtrack:{namespace}:{digest}"


class CacheService(Protocol):
    """Cache service interface."""

    def get_json(self, key: str) -> dict | None: ...
    def set_json(self, key: str, data: dict, ttl: int = DEFAULT_TTL) -> None: ...


class RedisCacheService:
    """Redis-backed cache implementation. Cache errors never fail a request."""

    def __init__(self, redis_url: str) -> None:
        self._client = redis.from_url(redis_url, decode_responses=True)
        self._client.ping()

    def get_json(self, key: str) -> dict | None:
        try:
            raw = self._client.get(key)
        except redis.RedisError:
            logger.warning("Cache read failed for %s", key, exc_info=True)
            return None
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except (json.JSONDecodeError, TypeError):
            return None

    def set_json(self, key: str, data: dict, ttl: int = DEFAULT_TTL) -> None:
        try:
            self._client.setex(key, ttl, json.dumps(data, ensure_ascii=False))
        except redis.RedisError:
            logger.warning("Cache write failed for %s", key, exc_info=True)


class NullCacheService:
    """No-op cache for when Redis is unavailable."""

    def get_json(self, key: str) -> dict | None:
        return None

    def set_json(self, key: str, data: dict, ttl: int = DEFAULT_TTL) -> None:
        pass


def create_cache_service() -> CacheService:
    """Factory: create the appropriate cache service based on configuration."""
    if not settings.redis_url:
        return NullCacheService()
    try:
        return RedisCacheService(settings.redis_url)
    except redis.RedisError:
        logger.warning("Redis unreachable at startup, AI responses will not be cached")
        return NullCacheService()

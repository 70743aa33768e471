"""Redis cache service for the role snapshot table."""

import json
import logging
from typing import Optional, Any
import redis

from catalog_admin.core.config import settings

logger = logging.getLogger("catalog_admin.cache")


class CacheService:
    """Redis-backed caching service. Every failure degrades to a cache miss."""

    def __init__(self):
        self._client: Optional[redis.Redis] = None

    @property
    def client(self) -> redis.Redis:
        if self._client is None:
            self._client = redis.from_url(
                settings.REDIS_URL,
                decode_responses=True,
                socket_connect_timeout=1,
            )
        return self._client

    def get(self, key: str) -> Optional[str]:
        """Get a cached value by key."""
        if not settings.CACHE_ENABLED:
            return None
        try:
            return self.client.get(key)
        except redis.RedisError as e:
            logger.debug("cache get %s failed: %s", key, e)
            return None

    def set(self, key: str, value: str, ttl_seconds: int = 600) -> None:
        """Set a cached value with TTL."""
        if not settings.CACHE_ENABLED:
            return
        try:
            self.client.setex(key, ttl_seconds, value)
        except redis.RedisError as e:
            logger.debug("cache set %s failed: %s", key, e)

    def get_json(self, key: str) -> Optional[Any]:
        """Get and parse a JSON cached value."""
        raw = self.get(key)
        if raw:
            return json.loads(raw)
        return None

    def set_json(self, key: str, value: Any, ttl_seconds: int = 600) -> None:
        """Serialize and cache a JSON value."""
        self.set(key, json.dumps(value, default=str), ttl_seconds)

    def delete(self, key: str) -> None:
        """Delete a cached key."""
        if not settings.CACHE_ENABLED:
            return
        try:
            self.client.delete(key)
        except redis.RedisError as e:
            # A stale entry expires on its own TTL
            logger.warning("cache delete %s failed: %s", key, e)

    def health_check(self) -> bool:
        """Check if Redis is reachable."""
        try:
            return bool(self.client.ping())
        except redis.RedisError:
            return False


cache_service = CacheService()

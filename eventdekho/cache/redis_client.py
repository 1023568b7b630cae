"""
Redis client used for short-lived response caching and the token revocation list.

Redis is an optimisation here, never a source of truth: every operation logs
and degrades to a cache miss when the server is unreachable.
"""
import json
from typing import Optional, Any
import redis
from redis.connection import ConnectionPool
from eventdekho.core.config import settings
from eventdekho.core.logging import logger

KEY_NAMESPACE = "eventdekho"


class RedisCache:
    """Namespaced JSON cache on top of a pooled redis client."""

    def __init__(self, url: Optional[str] = None, namespace: str = KEY_NAMESPACE):
        self._url = url or settings.REDIS_URL
        self._namespace = namespace
        self._pool: Optional[ConnectionPool] = None
        self._client: Optional[redis.Redis] = None

    def _key(self, key: str) -> str:
        return f"{self._namespace}:{key}"

    def _get_client(self) -> redis.Redis:
        if self._client is None:
            self._pool = redis.ConnectionPool.from_url(
                self._url,
                decode_responses=True,
                max_connections=20,
                socket_connect_timeout=2,
                socket_timeout=2,
            )
            self._client = redis.Redis(connection_pool=self._pool)
            logger.info("Redis connection pool created")
        return self._client

    async def get(self, key: str) -> Optional[Any]:
        try:
            value = self._get_client().get(self._key(key))
            if value:
                return json.loads(value)
            return None
        except redis.RedisError as e:
            logger.error(f"Redis GET error for key {key}: {e}")
            return None

    async def set(self, key: str, value: Any, expire: int = 300) -> bool:
        """Store ``value`` as JSON for ``expire`` seconds."""
        try:
            self._get_client().setex(self._key(key), expire, json.dumps(value, default=str))
            return True
        except redis.RedisError as e:
            logger.error(f"Redis SET error for key {key}: {e}")
            return False

    async def delete_pattern(self, pattern: str) -> int:
        """
        Delete all keys in our namespace matching ``pattern`` (e.g. 'ads:*').

        Returns:
            Number of keys deleted
        """
        try:
            client = self._get_client()
            keys = client.keys(self._key(pattern))
            if keys:
                return client.delete(*keys)
            return 0
        except redis.RedisError as e:
            logger.error(f"Redis DELETE_PATTERN error for pattern {pattern}: {e}")
            return 0

    async def exists(self, key: str) -> bool:
        try:
            return self._get_client().exists(self._key(key)) > 0
        except redis.RedisError as e:
            logger.error(f"Redis EXISTS error for key {key}: {e}")
            return False

    def close(self):
        if self._client:
            self._client.close()
            self._client = None
            logger.info("Redis connection pool closed")


cache = RedisCache()

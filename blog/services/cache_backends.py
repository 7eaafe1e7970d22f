import json
import time
import logging
from typing import Optional, Any

import redis

from .cache import Cache
from .lru_cache import LRUCacheImpl
from blog.config import REDIS_URL, CACHE_KEY_PREFIX

logger = logging.getLogger(__name__)


class InProcessLRUCache(Cache):
    """In-process LRU cache backend."""
    def __init__(self, capacity: int, clock=None):
        self._lru = LRUCacheImpl(capacity=capacity, clock=clock or time.monotonic)

    def __len__(self) -> int:
        return len(self._lru)

    def get(self, key: str) -> Optional[Any]:
        return self._lru.get(key)

    def set(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> None:
        self._lru.set(key, value, ttl_seconds)

    def clear(self) -> None:
        self._lru.clear()


class RedisCache(Cache):
    """
    Shared cache across workers. Values are stored as JSON strings under a key prefix.
    Redis being down only costs cache hits: errors are logged and reads fall through to the store.
    """
    def __init__(self, url: str = REDIS_URL, prefix: str = CACHE_KEY_PREFIX, client: Optional[redis.Redis] = None):
        self._prefix = prefix
        self._client = client if client is not None else redis.Redis.from_url(url, decode_responses=True)

    def _key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    def get(self, key: str) -> Optional[Any]:
        try:
            raw = self._client.get(self._key(key))
        except redis.RedisError as ex:
            logger.exception("redis_cache: get failed for %s: %s", key, ex)
            return None
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError as ex:
            logger.exception("redis_cache: failed to decode %s: %s", key, ex)
            return None

    def set(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> None:
        payload = json.dumps(value, separators=(",", ":"), ensure_ascii=False)
        try:
            self._client.set(self._key(key), payload, ex=ttl_seconds or None)
        except redis.RedisError as ex:
            logger.exception("redis_cache: set failed for %s: %s", key, ex)

    def clear(self) -> None:
        try:
            keys = list(self._client.scan_iter(match=f"{self._prefix}*"))
            if keys:
                self._client.delete(*keys)
        except redis.RedisError as ex:
            logger.exception("redis_cache: clear failed: %s", ex)

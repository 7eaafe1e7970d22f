from typing import Any, Optional
from .cache import Cache
from .cache_backends import InProcessLRUCache, RedisCache
from blog.config import CACHE_BACKEND, CACHE_CAPACITY


def create_cache(backend: str = CACHE_BACKEND, capacity: int = CACHE_CAPACITY) -> Cache:
    """
    Returns a new cache instance based on configuration:
      - "none"   -> no-op backend (always misses)
      - "memory" -> in-process LRU (fastest for single instance)
      - "redis"  -> shared cache across workers

    The app factory owns the instance (app.state), so tests get a fresh cache per app.
    """
    backend = (backend or "").lower()
    if backend == "none":
        return _NoCache()
    if backend == "redis":
        return RedisCache()
    return InProcessLRUCache(capacity=capacity)


class _NoCache(Cache):
    """No-op cache used when caching is disabled."""
    def get(self, key: str): return None
    def set(self, key: str, value: Any, ttl_seconds: Optional[int] = None): pass
    def clear(self): pass

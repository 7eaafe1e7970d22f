# blog/services/content_cache.py

import logging
from typing import Any, Dict, List, Optional

from blog.schemas.content import Post
from blog.services.cache import Cache
from blog.services.store import DataStore
from blog.config import CACHE_TTL_SECONDS

logger = logging.getLogger(__name__)

LIST_PREFIX = "posts:list:"
SLUG_PREFIX = "posts:slug:"


def list_cache_key(params: Dict[str, Any]) -> str:
    # Stable key for list reads: sorted k=v pairs, None spelled "all"
    parts = [f"{k}={'all' if v is None else v}" for k, v in sorted(params.items())]
    return LIST_PREFIX + "&".join(parts)


def slug_cache_key(slug: str) -> str:
    return f"{SLUG_PREFIX}{slug}"


class ContentCache:
    """
    Read-through cache in front of the posts table.

    Entries hold JSON payloads so any Cache backend can store them:
      - list reads:  {"posts": [<post>, ...]}
      - slug reads:  {"post": <post>} or {"post": None} for a known-missing slug

    Only successful reads are cached (absence included). Store errors propagate
    untouched and leave the cache as it was.
    """

    def __init__(self, store: DataStore, cache: Cache, ttl_seconds: int = CACHE_TTL_SECONDS):
        self._store = store
        self._cache = cache
        self._ttl = ttl_seconds

    def get_posts(self, limit: Optional[int] = None) -> List[Post]:
        """Published posts, newest first, at most `limit` of them (all when None)."""
        if limit is not None:
            limit = int(limit)
            if limit < 0:
                raise ValueError("limit must be >= 0")
        key = list_cache_key({"limit": limit})

        cached = self._cache.get(key)
        if cached is not None:
            return [Post.model_validate(p) for p in cached["posts"]]

        rows = self._store.select(
            "posts",
            not_null=["published_at"],
            order_by=[("published_at", True)],
            limit=limit,
        )
        # Hits and misses both hand back models rebuilt from the cached payload
        payload = {"posts": [Post.model_validate(r).model_dump(mode="json") for r in rows]}
        self._cache.set(key, payload, ttl_seconds=self._ttl)
        logger.debug("content_cache: miss %s (%d rows)", key, len(rows))
        return [Post.model_validate(p) for p in payload["posts"]]

    def get_post_by_slug(self, slug: str) -> Optional[Post]:
        """One published post by slug, or None when no published post has it."""
        if not slug:
            raise ValueError("slug must be a non-empty string")
        key = slug_cache_key(slug)

        cached = self._cache.get(key)
        if cached is not None:
            data = cached["post"]
            return Post.model_validate(data) if data is not None else None

        row = self._store.select_one("posts", eq={"slug": slug}, not_null=["published_at"])
        data = Post.model_validate(row).model_dump(mode="json") if row is not None else None
        self._cache.set(key, {"post": data}, ttl_seconds=self._ttl)
        logger.debug("content_cache: miss %s (found=%s)", key, data is not None)
        return Post.model_validate(data) if data is not None else None

    def clear_cache(self) -> None:
        """Drop every entry so the next read of any key goes to the store."""
        self._cache.clear()
        logger.info("content_cache: cleared")

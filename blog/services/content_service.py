# blog/services/content_service.py

import logging
from typing import Any, Dict, List

from blog.schemas.content import Project, Research, RECORD_MODELS
from blog.services.store import DataStore

logger = logging.getLogger(__name__)

FEATURED_PROJECTS_LIMIT = 3


def list_featured_projects(store: DataStore, limit: int = FEATURED_PROJECTS_LIMIT) -> List[Project]:
    rows = store.select("projects", eq={"featured": True}, order_by=[("created_at", True)], limit=limit)
    return [Project.model_validate(r) for r in rows]


def list_projects(store: DataStore) -> List[Project]:
    """Portfolio order: featured first, then newest."""
    rows = store.select("projects", order_by=[("featured", True), ("created_at", True)])
    return [Project.model_validate(r) for r in rows]


def list_researches(store: DataStore) -> List[Research]:
    rows = store.select("researches", order_by=[("created_at", True)])
    return [Research.model_validate(r) for r in rows]


def list_rows(store: DataStore, table: str) -> List[Dict[str, Any]]:
    """
    Admin listing: every row of `table` (drafts included), newest first,
    in the JSON shape the admin API returns.
    """
    model = RECORD_MODELS[table]
    rows = store.select(table, order_by=[("created_at", True)])
    return [model.model_validate(r).model_dump(mode="json") for r in rows]


def increment_view_count(store: DataStore, slug: str) -> None:
    """
    Best-effort view counter, run as a detached background task after the page is sent.
    Errors are logged, never surfaced: a lost increment only skews analytics.
    """
    try:
        store.call("increment_view_count", {"post_slug": slug})
    except Exception as ex:
        logger.exception("view count increment failed for %s: %s", slug, ex)

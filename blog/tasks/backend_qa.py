# blog/tasks/backend_qa.py
"""
Backend QA probe: exercises the live database end to end and records what passed.

Each check is independent; a failing check is recorded and the run moves on.
The throwaway rows it creates are deleted before the check returns.
"""

import asyncio
import json
import logging
import time
from dataclasses import dataclass, field, asdict
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Dict, List

from blog.errors import ConstraintError, StoreError
from blog.services.store import DataStore

logger = logging.getLogger(__name__)

QA_TABLES = ("posts", "projects", "researches")
SLOW_CONNECTION_MS = 1000
SLOW_QUERY_MS = 500
VERY_SLOW_QUERY_MS = 1000
LARGE_QUERY_ROWS = 100


@dataclass
class QAResults:
    passed: List[Dict[str, str]] = field(default_factory=list)
    failed: List[Dict[str, str]] = field(default_factory=list)
    warnings: List[Dict[str, str]] = field(default_factory=list)

    def record(self, name: str, ok: bool, details: str = "") -> None:
        (self.passed if ok else self.failed).append({"name": name, "details": details})
        logger.info("qa: %s %s%s", "PASS" if ok else "FAIL", name, f": {details}" if details else "")

    def warn(self, name: str, details: str) -> None:
        self.warnings.append({"name": name, "details": details})
        logger.warning("qa: %s: %s", name, details)

    def report(self) -> Dict:
        return {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "totalTests": len(self.passed) + len(self.failed),
            "passed": len(self.passed),
            "failed": len(self.failed),
            "warnings": len(self.warnings),
            "details": asdict(self),
        }


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


def _throwaway_post(store: DataStore, label: str) -> Dict:
    return store.insert("posts", {
        "slug": f"test-qa-{label}-{int(time.time() * 1000)}",
        "title": "QA Test Post",
        "content": "This is a test post for QA purposes.",
    })


def check_connection(store: DataStore, results: QAResults) -> None:
    start = time.perf_counter()
    store.select("posts", limit=1)
    duration = _elapsed_ms(start)
    results.record("Connection established", True, f"{duration}ms")
    if duration > SLOW_CONNECTION_MS:
        results.warn("Slow connection", f"Connection took > {SLOW_CONNECTION_MS}ms")


def check_basic_queries(store: DataStore, results: QAResults) -> None:
    for table in QA_TABLES:
        try:
            store.select(table, limit=1)
            results.record(f"Query {table}", True, "Data fetched successfully")
        except StoreError as ex:
            results.record(f"Query {table}", False, str(ex))


def check_missing_post(store: DataStore, results: QAResults) -> None:
    rows = store.select("posts", eq={"slug": "non-existent-post-xyz-123"})
    if not rows:
        results.record("Non-existent post handling", True, "Returns empty result")
    else:
        results.warn("Non-existent post handling", "Expected no rows but got data")


def check_empty_slug_rejected(store: DataStore, results: QAResults) -> None:
    try:
        row = store.insert("posts", {"slug": "", "title": "Test", "content": "Test content"})
    except ConstraintError:
        results.record("Empty slug validation", True, "Correctly rejected")
        return
    store.delete("posts", row["id"])
    results.record("Empty slug validation", False, "Should have rejected empty slug")


def check_published_readable(store: DataStore, results: QAResults) -> None:
    store.select("posts", not_null=["published_at"], limit=5)
    results.record("Read published posts", True, "Published posts are readable")


def check_view_count_increment(store: DataStore, results: QAResults) -> None:
    post = _throwaway_post(store, "views")
    try:
        initial = post.get("view_count") or 0
        store.call("increment_view_count", {"post_slug": post["slug"]})
        updated = store.select_one("posts", eq={"slug": post["slug"]})
        if updated is None:
            results.record("View count increment", False, "Test post disappeared")
        elif updated["view_count"] == initial + 1:
            results.record("View count increment", True, f"Incremented from {initial} to {updated['view_count']}")
        else:
            results.record("View count increment", False, f"Expected {initial + 1}, got {updated['view_count']}")
    finally:
        store.delete("posts", post["id"])


def check_large_query(store: DataStore, results: QAResults) -> None:
    start = time.perf_counter()
    store.select("posts", order_by=[("created_at", True)], limit=LARGE_QUERY_ROWS)
    duration = _elapsed_ms(start)
    per_row = duration / LARGE_QUERY_ROWS
    results.record("Large query performance", True, f"{LARGE_QUERY_ROWS} posts in {duration}ms ({per_row:.2f}ms/post)")
    if duration > VERY_SLOW_QUERY_MS:
        results.warn("Query performance", f"{LARGE_QUERY_ROWS} post query took > {VERY_SLOW_QUERY_MS}ms")
    elif duration > SLOW_QUERY_MS:
        results.warn("Query performance", f"{LARGE_QUERY_ROWS} post query took > {SLOW_QUERY_MS}ms")


def check_duplicate_slug(store: DataStore, results: QAResults) -> None:
    post = _throwaway_post(store, "dup")
    try:
        try:
            dup = store.insert("posts", {"slug": post["slug"], "title": "Test", "content": "Content"})
        except ConstraintError:
            results.record("Duplicate key handling", True, "Correctly enforces UNIQUE constraint")
            return
        store.delete("posts", dup["id"])
        results.record("Duplicate key handling", False, "Duplicate slug was accepted")
    finally:
        store.delete("posts", post["id"])


def check_concurrent_requests(store: DataStore, results: QAResults) -> None:
    async def _gather():
        await asyncio.gather(*(asyncio.to_thread(store.select, t, limit=1) for t in QA_TABLES))

    asyncio.run(_gather())
    results.record("Concurrent requests", True, f"All {len(QA_TABLES)} queries completed")


CHECKS: List[Callable[[DataStore, QAResults], None]] = [
    check_connection,
    check_basic_queries,
    check_missing_post,
    check_empty_slug_rejected,
    check_published_readable,
    check_view_count_increment,
    check_large_query,
    check_duplicate_slug,
    check_concurrent_requests,
]


def run_qa(store: DataStore) -> QAResults:
    results = QAResults()
    for check in CHECKS:
        try:
            check(store, results)
        except StoreError as ex:
            results.record(check.__name__, False, str(ex))
    return results


def write_report(results: QAResults, path: Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(results.report(), f, ensure_ascii=False, indent=2)
    return path

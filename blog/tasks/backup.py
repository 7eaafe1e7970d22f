# blog/tasks/backup.py
"""Dump every content table to timestamped JSON files."""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Optional

from blog.schemas.content import RECORD_MODELS
from blog.services.store import DataStore

logger = logging.getLogger(__name__)

BACKUP_TABLES = ("posts", "projects", "researches")


def backup_timestamp(now: Optional[datetime] = None) -> str:
    now = now or datetime.now()
    return now.strftime("%Y-%m-%d_%H-%M-%S")


def backup_database(store: DataStore, output_dir: Path, now: Optional[datetime] = None) -> Path:
    """
    Write <output_dir>/backup-<timestamp>/<table>.json for every non-empty table,
    plus metadata.json with per-table counts. Returns the backup directory.
    Store errors propagate; a partial backup is worse than none.
    """
    backup_dir = Path(output_dir) / f"backup-{backup_timestamp(now)}"
    backup_dir.mkdir(parents=True, exist_ok=True)
    logger.info("backup: writing to %s", backup_dir)

    counts: Dict[str, int] = {}
    for table in BACKUP_TABLES:
        model = RECORD_MODELS[table]
        rows = [model.model_validate(r).model_dump(mode="json") for r in store.select(table)]
        counts[table] = len(rows)
        logger.info("backup: fetched %d %s", len(rows), table)
        if rows:
            with (backup_dir / f"{table}.json").open("w", encoding="utf-8") as f:
                json.dump(rows, f, ensure_ascii=False, indent=2)

    metadata = {
        "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        "tables": list(BACKUP_TABLES),
        "counts": counts,
    }
    with (backup_dir / "metadata.json").open("w", encoding="utf-8") as f:
        json.dump(metadata, f, ensure_ascii=False, indent=2)
    return backup_dir

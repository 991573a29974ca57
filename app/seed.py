"""Recreate the database tables and seed sample jobs."""

from __future__ import annotations

from collections.abc import Iterable
from collections.abc import Mapping
from collections.abc import Sequence
from pathlib import Path
from typing import Any
import argparse
import json
import logging

from app.core.config import get_settings
from app.core.logging_config import setup_logging
from app.db.base import Database
from app.db.models.job import Job
from app.db.store import EntityStore

logger = logging.getLogger(__name__)

DEFAULT_DATA_PATH = Path(__file__).resolve().parent / "data" / "jobs.json"


def load_records(path: Path) -> list[dict[str, Any]]:
    """Read seed records from a JSON array file."""
    records = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(records, list):
        raise ValueError(f"{path} must contain a JSON array")
    return records


def seed_jobs(database: Database, records: Iterable[Mapping[str, Any]]) -> int:
    """Drop and recreate all tables, then insert ``records`` as jobs."""
    database.connect(recreate=True)
    count = 0
    with database.session() as session:
        store = EntityStore(session, Job)
        for record in records:
            store.create({"isdeleted": False, **record})
            count += 1
    logger.info("Seeded %d jobs", count)
    return count


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--data", type=Path, default=DEFAULT_DATA_PATH, help="JSON array of job records")
    args = parser.parse_args(argv)

    settings = get_settings()
    setup_logging(settings.log_level, settings.json_logs)
    database = Database(settings.database_url, schema=settings.database_schema)
    try:
        seed_jobs(database, load_records(args.data))
    finally:
        database.dispose()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

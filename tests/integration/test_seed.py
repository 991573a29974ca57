"""Integration tests for the seed command."""

from __future__ import annotations

from pathlib import Path
import json

import pytest

from app.db.base import Database
from app.db.models.job import Job
from app.db.store import EntityStore
from app.seed import DEFAULT_DATA_PATH
from app.seed import load_records
from app.seed import seed_jobs
from app.services.crud import get_all


def test_sample_data_seeds_live_jobs(database: Database) -> None:
    with database.session() as session:
        EntityStore(session, Job).create({"job_name__c": "stale", "isdeleted": False})

    count = seed_jobs(database, load_records(DEFAULT_DATA_PATH))

    with database.session() as session:
        jobs = get_all(EntityStore(session, Job))
    assert count == len(jobs) == 3
    assert "stale" not in {job.job_name__c for job in jobs}
    assert all(job.isdeleted is False for job in jobs)


def test_load_records_requires_array(tmp_path: Path) -> None:
    path = tmp_path / "jobs.json"
    path.write_text(json.dumps({"job_name__c": "x"}), encoding="utf-8")

    with pytest.raises(ValueError, match="JSON array"):
        load_records(path)

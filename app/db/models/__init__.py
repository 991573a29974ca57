"""Model module imports for metadata registration."""

from app.db.models.job import Base
from app.db.models.job import Job

__all__ = [
    "Base",
    "Job",
]

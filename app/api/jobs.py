"""Job API handlers. Responses are wrapped as ``{"jobs": [...]}``."""

from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from app.api.wrapper import HandlerKind
from app.api.wrapper import wrap_endpoint
from app.core.request import ApiRequest
from app.db.models.job import Job
from app.db.store import EntityStore
from app.schemas.job import JOB_CREATE_SCHEMA
from app.schemas.job import JOB_UPDATE_SCHEMA
from app.schemas.job import JobRead
from app.services.crud import create_entity
from app.services.crud import get_all
from app.services.crud import get_entity
from app.services.crud import remove_entity
from app.services.crud import update_entity

WRAPPED_PROPERTY_NAME = "jobs"


def _jobs(session: Session) -> EntityStore[Job]:
    return EntityStore(session, Job)


@wrap_endpoint("Job#index", WRAPPED_PROPERTY_NAME, kind=HandlerKind.STORE_ONLY, response_model=JobRead)
def index(session: Session) -> list[Job]:
    """Show all jobs."""
    return get_all(_jobs(session))


@wrap_endpoint("Job#show", WRAPPED_PROPERTY_NAME, response_model=JobRead)
def show(request: ApiRequest, session: Session) -> Job:
    """Show a job."""
    return get_entity(request, _jobs(session))


@wrap_endpoint("Job#create", WRAPPED_PROPERTY_NAME, response_model=JobRead)
def create(request: ApiRequest, session: Session) -> tuple[Job, int]:
    """Create a job."""
    return create_entity(request, WRAPPED_PROPERTY_NAME, _jobs(session), JOB_CREATE_SCHEMA)


@wrap_endpoint("Job#update", WRAPPED_PROPERTY_NAME, response_model=JobRead)
def update(request: ApiRequest, session: Session) -> Job:
    """Update a job."""
    return update_entity(request, WRAPPED_PROPERTY_NAME, _jobs(session), JOB_UPDATE_SCHEMA)


@wrap_endpoint("Job#remove", WRAPPED_PROPERTY_NAME, response_model=JobRead)
def remove(request: ApiRequest, session: Session) -> dict[str, Any]:
    """Remove (soft-delete) a job."""
    return remove_entity(request, _jobs(session))

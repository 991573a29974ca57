"""Validation schemas and response payload for jobs."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel
from pydantic import ConfigDict

from app.core.fields import DateTimeField
from app.core.fields import EnumField
from app.core.fields import FieldSpec
from app.core.fields import IdField
from app.core.fields import StringField

JOB_STATUSES = ("New", "In Progress", "Complete")

JOB_CREATE_SCHEMA: dict[str, FieldSpec] = {
    "job_name__c": StringField(length=100, required=True),
    "job_address__c": StringField(length=200, required=True),
    "info_text__c": StringField(length=255),
    "client_contact__c": StringField(length=18),
    "contact_name__c": StringField(length=1300),
    "client_name__c": StringField(length=1300),
    "client_account__c": StringField(length=18),
    "phone__c": StringField(length=40, required=True),
}

JOB_UPDATE_SCHEMA: dict[str, FieldSpec] = {
    "job_start_time__c": DateTimeField(),
    "job_end_time__c": DateTimeField(),
    "status__c": EnumField(values=JOB_STATUSES),
    "notes__c": StringField(length=32000),
    "info_text__c": StringField(length=255),
    "job_address__c": StringField(length=200, optional_required=True),
    "phone__c": StringField(length=40, optional_required=True),
    "job_name__c": StringField(length=100, optional_required=True),
    "id": IdField(required=True),
}


class JobRead(BaseModel):
    """Job response payload."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    isdeleted: bool | None = None
    job_name__c: str | None = None
    job_address__c: str | None = None
    phone__c: str | None = None
    status__c: str | None = None
    info_text__c: str | None = None
    notes__c: str | None = None
    name: str | None = None
    sfid: str | None = None
    client_contact__c: str | None = None
    contact_name__c: str | None = None
    client_name__c: str | None = None
    client_account__c: str | None = None
    picture_s3_url__c: str | None = None
    longitude__c: float | None = None
    latitude__c: float | None = None
    job_start_time__c: datetime | None = None
    job_end_time__c: datetime | None = None
    createddate: datetime | None = None
    lastmodifieddate: datetime | None = None

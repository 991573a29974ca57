"""SQLAlchemy model for jobs (table ``svc_job__c``)."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean
from sqlalchemy import DateTime
from sqlalchemy import Float
from sqlalchemy import Index
from sqlalchemy import Integer
from sqlalchemy import String
from sqlalchemy import Text
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.orm import Mapped
from sqlalchemy.orm import mapped_column


class Base(DeclarativeBase):
    """Declarative base for ORM models."""


class Job(Base):
    """Field service job. Rows are soft-deleted through ``isdeleted``."""

    __tablename__ = "svc_job__c"
    __table_args__ = (Index("ix_svc_job__c_isdeleted", "isdeleted"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    isdeleted: Mapped[bool | None] = mapped_column(Boolean, nullable=True)

    job_name__c: Mapped[str | None] = mapped_column(String(100))
    job_address__c: Mapped[str | None] = mapped_column(String(200))
    phone__c: Mapped[str | None] = mapped_column(String(40))
    status__c: Mapped[str | None] = mapped_column(String(255))
    info_text__c: Mapped[str | None] = mapped_column(String(255))
    notes__c: Mapped[str | None] = mapped_column(Text)
    name: Mapped[str | None] = mapped_column(String(80))
    sfid: Mapped[str | None] = mapped_column(String(18))

    client_contact__c: Mapped[str | None] = mapped_column(String(18))
    contact_name__c: Mapped[str | None] = mapped_column(String(1300))
    client_name__c: Mapped[str | None] = mapped_column(String(1300))
    client_account__c: Mapped[str | None] = mapped_column(String(18))
    picture_s3_url__c: Mapped[str | None] = mapped_column(String(255))

    longitude__c: Mapped[float | None] = mapped_column(Float)
    latitude__c: Mapped[float | None] = mapped_column(Float)

    job_start_time__c: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    job_end_time__c: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    createddate: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    lastmodifieddate: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

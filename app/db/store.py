"""Entity store adapter: the persistence boundary used by the CRUD helpers."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any
from typing import Generic
from typing import Protocol
from typing import TypeVar

from sqlalchemy import exists
from sqlalchemy import select
from sqlalchemy.orm import Session
from sqlalchemy.sql.elements import ColumnElement

from app.db.models.job import Base

ModelT = TypeVar("ModelT", bound=Base)


@dataclass(frozen=True)
class NotEqual:
    """Criteria value matching rows where the column differs from ``value``."""

    value: Any


def ne(value: Any) -> NotEqual:
    return NotEqual(value)


class EntityStoreAdapter(Protocol):
    """Capabilities the CRUD helpers need from persistence."""

    name: str

    def find_one(self, **criteria: Any) -> Any | None: ...

    def find_many(self, **criteria: Any) -> list[Any]: ...

    def exists(self, **criteria: Any) -> bool: ...

    def create(self, values: Mapping[str, Any]) -> Any: ...

    def save(self, entity: Any, changes: Mapping[str, Any] | None = None) -> Any: ...


def _clause(column: Any, value: Any) -> ColumnElement[bool]:
    # booleans and NULL compare with IS / IS NOT so NULL flags are not lost
    if isinstance(value, NotEqual):
        if value.value is None or isinstance(value.value, bool):
            return column.is_not(value.value)
        return column != value.value
    if value is None or isinstance(value, bool):
        return column.is_(value)
    return column == value


class EntityStore(Generic[ModelT]):
    """SQLAlchemy implementation of :class:`EntityStoreAdapter` for one model."""

    def __init__(self, session: Session, model: type[ModelT], *, name: str | None = None) -> None:
        self._session = session
        self._model = model
        self.name = name or model.__name__

    def _where(self, criteria: Mapping[str, Any]) -> list[ColumnElement[bool]]:
        return [_clause(getattr(self._model, column), value) for column, value in criteria.items()]

    def find_one(self, **criteria: Any) -> ModelT | None:
        """Return the first row matching every criterion, or None."""
        stmt = select(self._model).where(*self._where(criteria)).limit(1)
        return self._session.scalars(stmt).first()

    def find_many(self, **criteria: Any) -> list[ModelT]:
        """Return all rows matching every criterion, ordered by primary key."""
        stmt = select(self._model).where(*self._where(criteria)).order_by(*self._model.__mapper__.primary_key)
        return list(self._session.scalars(stmt))

    def exists(self, **criteria: Any) -> bool:
        stmt = select(exists().where(*self._where(criteria)))
        return bool(self._session.scalar(stmt))

    def create(self, values: Mapping[str, Any]) -> ModelT:
        """Insert a row and return it with generated columns loaded."""
        entity = self._model(**values)
        self._session.add(entity)
        self._session.commit()
        self._session.refresh(entity)
        return entity

    def save(self, entity: ModelT, changes: Mapping[str, Any] | None = None) -> ModelT:
        """Apply ``changes`` to ``entity`` and persist it."""
        for column, value in (changes or {}).items():
            setattr(entity, column, value)
        self._session.add(entity)
        self._session.commit()
        self._session.refresh(entity)
        return entity

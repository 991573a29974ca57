"""Database engine and session helpers."""

from __future__ import annotations

from collections.abc import Generator
from contextlib import contextmanager
from typing import Any
import logging
import threading

from sqlalchemy import Engine
from sqlalchemy import create_engine
from sqlalchemy.orm import Session
from sqlalchemy.orm import sessionmaker

from app.core.config import redact_database_url
from app.db.models import Base

logger = logging.getLogger(__name__)


class Database:
    """Process-wide store handle.

    The engine is created and the schema synced on the first ``connect()``.
    Later calls return the same engine; concurrent first callers wait on the
    lock for the single in-flight connect instead of connecting twice.
    """

    def __init__(
        self,
        url: str,
        *,
        schema: str | None = None,
        engine_options: dict[str, Any] | None = None,
    ) -> None:
        self.url = url
        self.schema = schema
        self._engine_options = engine_options or {}
        self._engine: Engine | None = None
        self._sessionmaker: sessionmaker[Session] | None = None
        self._lock = threading.Lock()

    @property
    def is_connected(self) -> bool:
        return self._engine is not None

    def _create_engine(self) -> Engine:
        options: dict[str, Any] = {"pool_pre_ping": True, **self._engine_options}
        if self.schema:
            options["execution_options"] = {"schema_translate_map": {None: self.schema}}
        return create_engine(self.url, **options)

    def connect(self, *, recreate: bool = False) -> Engine:
        """Return the engine, connecting and syncing tables on first use.

        ``recreate`` drops all tables before syncing them.
        """
        with self._lock:
            engine, _ = self._connect(recreate)
            return engine

    def _connect(self, recreate: bool) -> tuple[Engine, sessionmaker[Session]]:
        if self._engine is not None and self._sessionmaker is not None and not recreate:
            return self._engine, self._sessionmaker

        engine = self._engine or self._create_engine()
        if recreate:
            for table in reversed(Base.metadata.sorted_tables):
                logger.info("drop table %s", table.name)
            Base.metadata.drop_all(engine)
        for table in Base.metadata.sorted_tables:
            logger.info("sync table %s", table.name)
        Base.metadata.create_all(engine)

        factory = sessionmaker(
            bind=engine,
            autoflush=False,
            autocommit=False,
            expire_on_commit=False,
            class_=Session,
        )
        self._engine, self._sessionmaker = engine, factory
        logger.info("Connected to database %s", redact_database_url(self.url))
        return engine, factory

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        """Provide a session, rolling back uncommitted work on failure."""
        with self._lock:
            _, factory = self._connect(recreate=False)
        session = factory()
        try:
            yield session
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def dispose(self) -> None:
        with self._lock:
            if self._engine is not None:
                self._engine.dispose()
            self._engine = None
            self._sessionmaker = None

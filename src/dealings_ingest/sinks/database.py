"""Sink that inserts records into the relational store."""
from __future__ import annotations

import logging

from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

from ..db import create_db_engine, ensure_schema, insert_dealing
from ..exceptions import SinkError, SinkTimeoutError
from ..models import DirectorDealing
from .base import RecordSink

LOGGER = logging.getLogger(__name__)

# Driver messages for a connect, lock or statement that ran out of time.
TIMEOUT_MARKERS = ("timeout", "timed out", "database is locked", "canceling statement")


def _is_timeout(exc: OperationalError) -> bool:
    message = str(exc.orig or exc).lower()
    return any(marker in message for marker in TIMEOUT_MARKERS)


class DatabaseSink(RecordSink):
    """Insert every record as a new row of ``directors_dealings``.

    ``timeout`` bounds each connect, lock wait and statement through the
    driver, so a write that runs out of time is rolled back rather than left
    running.
    """

    name = "database"

    def __init__(
        self,
        database_url: str | None = None,
        engine: Engine | None = None,
        timeout: float | None = None,
    ) -> None:
        if database_url is None and engine is None:
            raise ValueError("DatabaseSink needs a database_url or an engine")
        self.database_url = database_url
        self.engine = engine
        self.timeout = timeout
        self._owns_engine = engine is None

    def _wrap(self, exc: SQLAlchemyError) -> SinkError:
        if isinstance(exc, PoolTimeoutError) or (
            isinstance(exc, OperationalError) and _is_timeout(exc)
        ):
            return SinkTimeoutError(self.name, exc)
        return SinkError(self.name, exc)

    def open(self) -> None:
        """Connect and create the schema. Failure here is fatal for the run."""

        try:
            if self.engine is None:
                self.engine = create_db_engine(self.database_url, timeout=self.timeout)
            ensure_schema(self.engine)
        except SQLAlchemyError as exc:
            raise self._wrap(exc) from exc
        LOGGER.info("Connected to dealings store")

    def write(self, record: DirectorDealing) -> None:
        if self.engine is None:
            self.open()
        try:
            insert_dealing(self.engine, record)
        except SQLAlchemyError as exc:
            raise self._wrap(exc) from exc

    def close(self) -> None:
        if self.engine is not None and self._owns_engine:
            self.engine.dispose()
            self.engine = None


__all__ = ["DatabaseSink"]

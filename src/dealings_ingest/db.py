"""Database integration utilities."""
from __future__ import annotations

import logging
import math
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Iterator

from sqlalchemy import (
    BigInteger,
    Column,
    DateTime,
    Float,
    Integer,
    MetaData,
    String,
    Table,
    create_engine,
    insert,
    select,
)
from sqlalchemy.engine import Connection, Engine, make_url

from .models import DirectorDealing


metadata = MetaData()

LOGGER = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# Insert only. There is no natural key for a dealing so re-runs add rows again.
directors_dealings = Table(
    "directors_dealings",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("stock_code", String(32), nullable=False, index=True),
    Column("date", String(64), nullable=True),
    Column("beneficiary", String(255), nullable=False),
    Column("deal_type", String(128), nullable=True),
    Column("value", BigInteger, nullable=True),
    Column("volume", BigInteger, nullable=True),
    Column("price", Float, nullable=False),
    Column("created_at", DateTime(timezone=True), nullable=False, default=_utcnow),
)


def _timeout_options(database_url: str, timeout: float) -> dict[str, Any]:
    """Engine keyword arguments bounding how long a connect or statement may take."""

    backend = make_url(database_url).get_backend_name()
    if backend == "sqlite":
        # The busy timeout; single file databases only block on locks.
        return {"connect_args": {"timeout": timeout}}
    options: dict[str, Any] = {"pool_timeout": timeout}
    if backend == "postgresql":
        options["connect_args"] = {
            "connect_timeout": max(1, math.ceil(timeout)),
            "options": f"-c statement_timeout={int(timeout * 1000)}",
        }
    return options


def create_db_engine(database_url: str, timeout: float | None = None) -> Engine:
    """Create a SQLAlchemy engine, optionally bounding connect and statement time."""

    LOGGER.debug("Creating database engine")
    options = _timeout_options(database_url, timeout) if timeout else {}
    return create_engine(database_url, future=True, pool_pre_ping=True, **options)


@contextmanager
def session(engine: Engine) -> Iterator[Connection]:
    """Provide a transactional scope around a series of operations."""

    with engine.begin() as conn:
        yield conn


def ensure_schema(engine: Engine) -> None:
    """Create tables if they do not exist."""

    LOGGER.debug("Ensuring database schema is present")
    metadata.create_all(engine)


def insert_dealing(engine: Engine, record: DirectorDealing) -> int:
    """Insert a single dealing in its own transaction and return its id."""

    stmt = insert(directors_dealings).values(
        stock_code=record.stock_code,
        date=record.date,
        beneficiary=record.beneficiary,
        deal_type=record.deal_type,
        value=record.value,
        volume=record.volume,
        price=float(record.price),
    )
    with session(engine) as conn:
        result = conn.execute(stmt)
        row_id = result.inserted_primary_key[0]
    LOGGER.debug("Inserted dealing %s for %s", row_id, record.stock_code)
    return row_id


def fetch_dealings(engine: Engine, stock_code: str | None = None) -> list[dict[str, object]]:
    """Return stored dealings in insertion order."""

    stmt = select(directors_dealings).order_by(directors_dealings.c.id)
    if stock_code is not None:
        stmt = stmt.where(directors_dealings.c.stock_code == stock_code)
    with engine.connect() as conn:
        rows = conn.execute(stmt).all()
    return [dict(row._mapping) for row in rows]


__all__ = [
    "create_db_engine",
    "ensure_schema",
    "insert_dealing",
    "fetch_dealings",
    "metadata",
    "directors_dealings",
]

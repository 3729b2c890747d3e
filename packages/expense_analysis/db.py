"""SQLAlchemy engine/session helpers and the key/value table of the local store.

Usage
-----
from expense_analysis.db import session_scope

with session_scope(database_url="sqlite:///data.db") as s:
    s.get(KvEntry, "expense-analyzer-data")
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import UTC, datetime
from pathlib import Path

from sqlalchemy import DateTime, String, Text, create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column, sessionmaker

ENV_DB_URL = "EXPENSE_ANALYSIS_DB_URL"
_DEFAULT_DB_FILE = ".expense_analysis.db"

_ENGINES: dict[str, tuple[Engine, sessionmaker[Session]]] = {}


class Base(DeclarativeBase):
    pass


class KvEntry(Base):
    """One keyed value of the local store (JSON text or a plain flag)."""

    __tablename__ = "ea_kv_store"

    key: Mapped[str] = mapped_column(String(128), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(UTC)
    )


def resolve_database_url(override: str | None = None) -> str:
    """Resolve the store URL: explicit override, env var, then a SQLite file in CWD."""

    url = override or os.getenv(ENV_DB_URL)
    if url:
        return url
    return f"sqlite:///{Path.cwd() / _DEFAULT_DB_FILE}"


def get_engine(*, database_url: str | None = None) -> Engine:
    """Return the engine for ``database_url``, creating it (and the table) on first use."""

    url = resolve_database_url(database_url)
    cached = _ENGINES.get(url)
    if cached is None:
        engine = create_engine(url)
        Base.metadata.create_all(engine)
        cached = (engine, sessionmaker(bind=engine, expire_on_commit=False, class_=Session))
        _ENGINES[url] = cached
    return cached[0]


def get_session(*, database_url: str | None = None) -> Session:
    """Return a new session bound to the engine for ``database_url``."""

    url = resolve_database_url(database_url)
    get_engine(database_url=url)
    return _ENGINES[url][1]()


@contextmanager
def session_scope(*, database_url: str | None = None) -> Iterator[Session]:
    """Provide a transactional scope around a series of operations."""

    session = get_session(database_url=database_url)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def dispose_engines() -> None:
    """Dispose every cached engine (tests and short-lived CLI runs)."""

    for engine, _ in _ENGINES.values():
        engine.dispose()
    _ENGINES.clear()


__all__ = [
    "Base",
    "ENV_DB_URL",
    "KvEntry",
    "dispose_engines",
    "get_engine",
    "get_session",
    "resolve_database_url",
    "session_scope",
]

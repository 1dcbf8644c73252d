"""Engine and session management.

The engine is created lazily on first use so importing the application never
requires a reachable database.
"""

from __future__ import annotations

import logging
from typing import Iterator

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from areca.core.config import settings
from areca.db.base import Base

logger = logging.getLogger(__name__)

_engine: Engine | None = None
_SessionLocal: sessionmaker[Session] | None = None


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(database_url: str, *, echo: bool = False, **kwargs) -> Engine:
    """Create an engine, applying SQLite-specific connection options."""
    if database_url.startswith("sqlite"):
        connect_args = kwargs.pop("connect_args", {})
        connect_args.setdefault("check_same_thread", False)
        engine = create_engine(database_url, echo=echo, connect_args=connect_args, **kwargs)
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        return engine

    return create_engine(database_url, echo=echo, pool_pre_ping=True, **kwargs)


def get_engine() -> Engine:
    global _engine
    if _engine is None:
        _engine = build_engine(settings.database.url, echo=settings.database.echo)
    return _engine


def get_session_maker(engine: Engine | None = None) -> sessionmaker[Session]:
    global _SessionLocal
    if engine is not None:
        return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(bind=get_engine(), autoflush=False, expire_on_commit=False)
    return _SessionLocal


def get_db() -> Iterator[Session]:
    """FastAPI dependency providing a request-scoped session.

    Commits when the handler returns, rolls back when it raises.
    """
    session = get_session_maker()()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def init_db(engine: Engine | None = None) -> None:
    """Create all tables that do not exist yet."""
    from areca.db import models  # noqa: F401  (registers mappers on Base.metadata)

    engine = engine or get_engine()
    Base.metadata.create_all(bind=engine)
    logger.info("database.initialized", extra={"tables": sorted(Base.metadata.tables)})


def ping(session: Session) -> bool:
    """Return True when the database answers a trivial query."""
    session.execute(text("SELECT 1"))
    return True

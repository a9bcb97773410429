# swaprelay/database.py
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from swaprelay.core.config import settings
from swaprelay.models import Base

logger = logging.getLogger(__name__)

_engine: Engine | None = None
_SessionLocal: sessionmaker | None = None


def normalize_database_url(url: str) -> str:
    # Railway/Heroku hand out postgres://; SQLAlchemy expects postgresql://
    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql://", 1)
    return url


def build_engine(url: str) -> Engine:
    url = normalize_database_url(url)
    if not url:
        raise RuntimeError("DATABASE_URL is not set")
    kwargs = {"pool_pre_ping": True, "future": True}
    if url.startswith("sqlite"):
        # uvicorn serves sync endpoints and background tasks from worker threads
        kwargs["connect_args"] = {"check_same_thread": False}
    return create_engine(url, **kwargs)


def get_sessionmaker() -> sessionmaker:
    """Process-wide session factory bound to DATABASE_URL, built on first use."""
    global _engine, _SessionLocal
    if _SessionLocal is None:
        _engine = build_engine(settings.DATABASE_URL)
        _SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=_engine, future=True)
    return _SessionLocal


def get_engine() -> Engine:
    get_sessionmaker()
    return _engine


@contextmanager
def db_session(factory: sessionmaker | None = None) -> Generator[Session, None, None]:
    """Unit of work: commit on success, roll back and re-raise on any error."""
    db = (factory or get_sessionmaker())()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


SUBSCRIPTIONS_DDL = (
    """
    CREATE TABLE IF NOT EXISTS subscriptions (
        id SERIAL PRIMARY KEY,
        wallet_address VARCHAR(64) NOT NULL,
        destination_id VARCHAR(64) NOT NULL,
        created_at TIMESTAMPTZ DEFAULT NOW(),
        CONSTRAINT uq_subscriptions_wallet_destination UNIQUE (wallet_address, destination_id)
    );
    """,
    """CREATE INDEX IF NOT EXISTS ix_subscriptions_wallet_address ON subscriptions (wallet_address);""",
    """CREATE INDEX IF NOT EXISTS ix_subscriptions_destination_id ON subscriptions (destination_id);""",
)


def _ensure_schema(engine: Engine) -> None:
    """Create the subscriptions table and its indexes if missing (idempotent).

    Only used on Postgres, where `CREATE ... IF NOT EXISTS` is available for
    both tables and indexes. Other dialects go through `create_all`.
    """
    with engine.begin() as conn:
        for stmt in SUBSCRIPTIONS_DDL:
            conn.execute(text(stmt))


def init_db(engine: Engine | None = None) -> None:
    engine = engine or get_engine()

    if engine.dialect.name == "postgresql":
        _ensure_schema(engine)

    try:
        Base.metadata.create_all(bind=engine, checkfirst=True)
    except Exception as e:
        logger.warning("Base.metadata.create_all skipped/failed (non-fatal): %s", e)

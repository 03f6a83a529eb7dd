"""Database engine, sessions and the global write lock."""
from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from .config import settings
from .domain_errors import DomainError

logger = logging.getLogger(__name__)


def engine_kwargs(url: str) -> dict:
    """Connection options per backend (in-memory SQLite needs a single shared connection)."""
    if url.startswith("sqlite"):
        kwargs: dict = {"connect_args": {"check_same_thread": False}}
        if url in {"sqlite://", "sqlite:///:memory:"}:
            kwargs["poolclass"] = StaticPool
        return kwargs
    return {"pool_pre_ping": True}


engine = create_engine(settings.DATABASE_URL, **engine_kwargs(settings.DATABASE_URL))

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def init_db() -> None:
    # Import models so every table is registered on Base.metadata.
    from . import models  # noqa: F401

    Base.metadata.create_all(bind=engine)


def get_db() -> Iterator[Session]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# One lock for every table: writes are serialized, reads never take it.
_write_lock = threading.Lock()


@contextmanager
def locked_write(db: Session, *, timeout: float | None = None) -> Iterator[Session]:
    """Hold the global write lock for one write operation and commit it on exit."""
    wait = settings.WRITE_LOCK_TIMEOUT_SECONDS if timeout is None else timeout
    if not _write_lock.acquire(timeout=wait):
        logger.warning("Write lock not acquired within %.1fs", wait)
        raise DomainError(
            code="LOCK_TIMEOUT",
            http_status=503,
            message="Storage is busy, try again",
        )
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        _write_lock.release()

"""Engine and session factory configuration."""

from collections.abc import Generator
import logging

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import QueuePool, StaticPool

from fakeshop.core.config import get_settings
from fakeshop.db.base import Base
from fakeshop.db import models  # noqa: F401  (registers tables on Base.metadata)

logger = logging.getLogger(__name__)

settings = get_settings()


def build_engine(database_url: str) -> Engine:
    """Create an engine tuned for the target database.

    SQLite (local runs and tests) gets a single shared connection so that
    in-memory databases survive across sessions and threads. Everything else
    gets the pooled, keepalive-enabled configuration used in production.
    """
    if database_url.startswith("sqlite"):
        return create_engine(
            database_url,
            echo=False,
            future=True,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )

    # pool_pre_ping: Test connections before using (handles stale connections)
    # pool_recycle: Recycle connections after 30 minutes (prevents timeout)
    return create_engine(
        database_url,
        echo=False,
        future=True,
        poolclass=QueuePool,
        pool_pre_ping=True,
        pool_recycle=1800,
        pool_size=5,
        max_overflow=10,
        connect_args={
            "connect_timeout": 10,
            "keepalives": 1,
            "keepalives_idle": 30,
            "keepalives_interval": 10,
            "keepalives_count": 5,
        },
    )


engine = build_engine(settings.database_url)

SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)


def init_db(bind: Engine | None = None) -> None:
    """Create missing tables (development convenience, skipped in production)."""
    target = bind or engine
    Base.metadata.create_all(bind=target)
    logger.info("Database schema ensured")


def get_db() -> Generator[Session, None, None]:
    """Yield a transactional session for request lifecycles."""
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()

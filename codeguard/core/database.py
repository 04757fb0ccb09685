"""PostgreSQL engine, request-scoped sessions, and the schema readiness check used by /health."""

import logging
from collections.abc import Generator
from typing import Literal

from sqlalchemy import create_engine, inspect
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from codeguard.core.config import settings

logger = logging.getLogger(__name__)

DatabaseStatus = Literal["connected", "disconnected", "unmigrated"]

# Tables every scan touches; their absence means `alembic upgrade head` has not run.
REQUIRED_TABLES = ("api_keys", "usage_tracking", "scan_history")

engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,
    echo=settings.DEBUG,
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Yield a session for one request; the route decides when to commit."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def database_status(db: Session) -> DatabaseStatus:
    """Report whether the database is reachable and carries the CodeGuard schema."""
    try:
        inspector = inspect(db.connection())
        missing = [t for t in REQUIRED_TABLES if not inspector.has_table(t)]
    except SQLAlchemyError as e:
        logger.warning("Database unreachable", extra={"error": str(e)})
        return "disconnected"
    if missing:
        logger.warning("Database schema incomplete", extra={"missing_tables": missing})
        return "unmigrated"
    return "connected"

"""Engine, session factory and request-scoped session helpers."""

import logging
import time
from collections.abc import Generator, Iterator
from contextlib import contextmanager
from typing import Optional

from sqlalchemy import create_engine, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from storefront.core.config import settings

logger = logging.getLogger(__name__)

engine = create_engine(settings.database_url, future=True, pool_pre_ping=True)
SessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
    expire_on_commit=False,
    future=True,
)


def get_db() -> Generator[Session, None, None]:
    """Yield one session per request; FastAPI closes it after the response."""

    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def session_scope() -> Iterator[Session]:
    """Session for code running outside a request, such as the CLI."""

    db = SessionLocal()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def verify_connection(
    max_attempts: Optional[int] = None,
    delay_seconds: Optional[float] = None,
) -> None:
    """Block until ``SELECT 1`` succeeds, retrying with linear backoff.

    Defaults come from ``DB_CONNECT_ATTEMPTS`` and ``DB_CONNECT_DELAY_SECONDS``.
    The last SQLAlchemy error is re-raised once attempts run out.
    """

    attempts = max_attempts if max_attempts is not None else settings.db_connect_attempts
    delay = delay_seconds if delay_seconds is not None else settings.db_connect_delay_seconds

    last_exc: Optional[SQLAlchemyError] = None
    for attempt in range(1, attempts + 1):
        try:
            with engine.connect() as connection:
                connection.execute(text("SELECT 1"))
        except SQLAlchemyError as exc:
            last_exc = exc
            logger.warning(
                "Database not ready (attempt %d/%d): %s",
                attempt,
                attempts,
                type(exc).__name__,
            )
            if attempt < attempts:
                time.sleep(delay * attempt)
            continue

        if attempt > 1:
            logger.info("Database reachable after %d attempt(s)", attempt)
        return

    logger.error("Database unreachable after %d attempts", attempts, exc_info=last_exc)
    if last_exc is not None:
        raise last_exc
    raise RuntimeError("Database connection verification failed")


__all__ = ["engine", "SessionLocal", "get_db", "session_scope", "verify_connection"]

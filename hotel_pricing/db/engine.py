"""
SQLAlchemy engine singleton with connection pooling.

The engine is created on first use so that the in-memory pricing core can be
imported and tested without a database configured. Pricing jobs are short
batch runs, so the pool is sized smaller than a web service would need.
"""

from typing import Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine

from hotel_pricing.config import DATABASE_URL

_engine: Optional[Engine] = None


def get_engine() -> Engine:
    """
    Return the process-wide engine, creating it on first call.

    Returns:
        Engine: SQLAlchemy engine bound to DATABASE_URL

    Raises:
        RuntimeError: If DATABASE_URL is not set
    """
    global _engine

    if _engine is None:
        if not DATABASE_URL:
            raise RuntimeError("DATABASE_URL is not set.")
        _engine = create_engine(
            DATABASE_URL,
            future=True,
            pool_size=5,
            max_overflow=5,
            pool_pre_ping=True,  # Verify connections before using (detect stale connections)
            pool_recycle=3600,
            echo=False,
        )
    return _engine


def check_engine_health(engine: Optional[Engine] = None) -> bool:
    """
    Check if the database is reachable.

    Args:
        engine: Engine to check (default: the process-wide engine)

    Returns:
        bool: True if a trivial query succeeds, False otherwise
    """
    try:
        with (engine or get_engine()).connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception:
        return False

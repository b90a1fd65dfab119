"""Database session management for the registration audit trail"""

from functools import lru_cache
from typing import Iterator
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from prestamos_gateway.config import settings


@lru_cache(maxsize=None)
def get_engine(database_url: str | None = None) -> Engine:
    """Engine for the audit database, created on first use"""
    url = database_url or settings.database_url
    if url.startswith("sqlite"):
        return create_engine(url, connect_args={"check_same_thread": False})

    # Small pool: one audit row per submission
    return create_engine(
        url,
        pool_pre_ping=True,
        pool_size=5,
        max_overflow=5,
        pool_recycle=3600,
    )


def get_db() -> Iterator[Session]:
    """Dependency injection for database sessions"""
    db = sessionmaker(autocommit=False, autoflush=False, bind=get_engine())()
    try:
        yield db
    finally:
        db.close()

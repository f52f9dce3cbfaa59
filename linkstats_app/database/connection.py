"""
Database connection for links and analytics events.

Both tables live in the same relational store; the event table is a flat,
append-only log with indexed columns for grouped-count queries.
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from linkstats_app.config import settings


def _connect_args(database_url: str) -> dict:
    # SQLite connections are shared with the threadpool FastAPI runs sync deps in
    if database_url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


engine = create_engine(
    settings.database_url,
    connect_args=_connect_args(settings.database_url),
)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """FastAPI dependency that yields a session and always closes it."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

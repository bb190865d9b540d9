"""
Database schema and connection management.

Uses SQLite with SQLAlchemy to share the run cache between processes.
"""

from datetime import datetime
from pathlib import Path

from sqlalchemy import create_engine, Column, String, DateTime, Text
from sqlalchemy.orm import declarative_base, sessionmaker

Base = declarative_base()


class CachedRun(Base):
    """One completed scrape run, stored as JSON."""

    __tablename__ = "cached_runs"

    run_id = Column(String, primary_key=True)
    payload = Column(Text, nullable=False)  # ScrapeResult.to_dict() as JSON
    created_at = Column(DateTime, nullable=False, default=datetime.now, index=True)


def get_engine(db_path: Path):
    db_path.parent.mkdir(parents=True, exist_ok=True)
    return create_engine(f"sqlite:///{db_path}")


def init_database(db_path: Path):
    """
    Initialize database and create tables.

    Args:
        db_path: Path to SQLite database file

    Returns:
        SQLAlchemy engine bound to the database
    """
    engine = get_engine(db_path)
    Base.metadata.create_all(engine)
    return engine


def get_session_factory(engine):
    """
    Get a session factory for an engine.

    Args:
        engine: SQLAlchemy engine from init_database()

    Returns:
        sessionmaker bound to the engine
    """
    return sessionmaker(bind=engine)

"""
Database connection and setup
SQLite database with SQLAlchemy, holding the recent-search list
"""
import logging

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from config.settings import settings
from dexsearch.models import Base

logger = logging.getLogger("db")


def make_engine(database_url: str):
    """Create an engine; SQLite connections are shared across worker threads."""
    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    return create_engine(database_url, connect_args=connect_args, echo=False)


def make_session_factory(database_url: str):
    """Create a session factory bound to `database_url`, creating tables."""
    bound_engine = make_engine(database_url)
    Base.metadata.create_all(bind=bound_engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=bound_engine)


engine = make_engine(settings.database_url)

# Session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db():
    """
    Initialize database - create all tables
    Safe to call multiple times (won't recreate existing tables)
    """
    Base.metadata.create_all(bind=engine)
    logger.info(f"Database initialized at: {settings.database_url}")

"""
Database configuration and initialization for Request Ledger.

Uses SQLite as the default data storage backend with SQLAlchemy ORM.
Engines and session factories are built once at application startup and
handed to the components that need them.
"""

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass


def create_db_engine(database_url: str, echo: bool = False) -> Engine:
    """
    Create a SQLAlchemy engine for the given database URL.

    SQLite connections are shared across FastAPI's worker threads, so
    same-thread checking is disabled for them.
    """
    is_sqlite = database_url.startswith("sqlite")
    connect_args = {"check_same_thread": False} if is_sqlite else {}

    return create_engine(database_url, connect_args=connect_args, echo=echo)


def create_session_factory(engine: Engine) -> sessionmaker:
    """Create the session factory bound to an engine."""
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


def init_db(engine: Engine) -> None:
    """
    Initialize the database by creating all tables.

    This function should be called at application startup to ensure
    the database schema exists. It will create tables if they don't exist.
    """
    # Register models on the metadata before creating tables
    from . import models  # noqa: F401

    Base.metadata.create_all(bind=engine)

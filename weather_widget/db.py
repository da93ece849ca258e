"""
Database configuration for SQLAlchemy + SQLite.

The key-value slots behind the persistent lists live in one SQLite file.
Engines are built from a path so tests and hosts can point at their own file.
"""

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase


class Base(DeclarativeBase):
    """Base class for ORM models."""
    pass


def make_engine(sqlite_path: str) -> Engine:
    # Store calls may run on any worker thread of the host, not only the one that opened the file.
    return create_engine(
        f"sqlite:///{sqlite_path}",
        connect_args={"check_same_thread": False},
    )


def make_session_factory(engine: Engine) -> sessionmaker:
    """Create tables if needed and return the session factory bound to `engine`."""
    Base.metadata.create_all(bind=engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)

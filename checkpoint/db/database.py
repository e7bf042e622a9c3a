"""
Database engine and session management.

Provides a synchronous SQLAlchemy engine and session factory over a
SQLite file. Connections are not pooled: every store operation opens its
own short-lived connection and transaction.
"""

from pathlib import Path

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import NullPool, StaticPool

from checkpoint.config import settings
from checkpoint.models.db import Base

MEMORY_DATABASE = ":memory:"


def database_url(database_path: str | Path) -> str:
    """Build the SQLAlchemy URL for a SQLite file path."""
    if str(database_path) == MEMORY_DATABASE:
        return "sqlite://"
    return f"sqlite:///{Path(database_path)}"


def create_store_engine(database_path: str | Path, echo: bool | None = None) -> Engine:
    """
    Create an engine for the given SQLite location.

    An in-memory database only lives as long as its connection, so it
    gets a single shared connection instead of a fresh one per operation.
    """
    if echo is None:
        echo = settings.debug

    if str(database_path) == MEMORY_DATABASE:
        return create_engine(
            database_url(database_path),
            echo=echo,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )

    return create_engine(database_url(database_path), echo=echo, poolclass=NullPool)


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Session factory whose objects stay readable after commit."""
    return sessionmaker(engine, expire_on_commit=False)


def init_db(engine: Engine) -> None:
    """
    Initialize database tables.

    Creates the games table if it does not exist. An existing table is
    left as it is, constraints included.
    """
    Base.metadata.create_all(engine)


def drop_db(engine: Engine) -> None:
    """
    Drop all database tables.

    WARNING: Destroys all data. Use only for testing.
    """
    Base.metadata.drop_all(engine)

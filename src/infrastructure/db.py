"""Database infrastructure for the finance tracker.

This module exposes concrete helpers to create and reuse the SQLAlchemy
engine connected to the finance database. It belongs to the infrastructure
layer because it deals with external systems (SQLite or PostgreSQL).
"""

import os
from pathlib import Path
from typing import Optional

import dotenv
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.pool import QueuePool, StaticPool

from src.application.ports.database import DatabaseEnginePort
from src.infrastructure.settings import FinanceSettings


def _get_env_var(name: str) -> str:
    """Read an environment variable or raise a descriptive error.

    Args:
        name: Name of the environment variable to read.

    Returns:
        str: The raw value of the environment variable.

    Raises:
        RuntimeError: If the environment variable is missing or empty.
    """
    dotenv.load_dotenv()
    value = os.getenv(name)
    if not value:
        raise RuntimeError(f"Missing environment variable: {name}")
    return value


def _create_engine(db_url: str) -> Engine:
    """Create a configured SQLAlchemy engine.

    SQLite URLs get their parent directory created; in-memory SQLite uses a
    single shared connection so every session sees the same tables.

    Args:
        db_url: Fully qualified database URL (including driver and credentials)

    Returns:
        Engine: A SQLAlchemy engine instance with a small connection pool and
        health checks enabled.
    """
    url = make_url(db_url)
    if url.get_backend_name() == "sqlite":
        database = url.database
        if not database or database == ":memory:":
            return create_engine(
                db_url,
                poolclass=StaticPool,
                connect_args={"check_same_thread": False},
                future=True,
            )
        Path(database).expanduser().parent.mkdir(parents=True, exist_ok=True)
        return create_engine(
            db_url,
            connect_args={"check_same_thread": False},
            pool_pre_ping=True,
            future=True,
        )
    return create_engine(
        db_url,
        poolclass=QueuePool,
        pool_size=5,
        max_overflow=5,
        pool_pre_ping=True,
        future=True,
    )


_finance_engine: Optional[Engine] = None


def get_finance_engine() -> Engine:
    """Get a singleton SQLAlchemy engine for the finance database.

    ``FINANCE_DB_URL`` takes precedence; otherwise the settings default
    (a SQLite file under data/) is used.

    Returns:
        Engine: Lazily initialized engine connected to the finance backend.
    """
    global _finance_engine
    if _finance_engine is None:
        try:
            db_url = _get_env_var("FINANCE_DB_URL")
        except RuntimeError:
            db_url = FinanceSettings.from_env().database_url
        _finance_engine = _create_engine(db_url)
    return _finance_engine


class SqlAlchemyDatabaseEngineAdapter(DatabaseEnginePort):
    """DatabaseEnginePort implementation backed by SQLAlchemy engines.

    The adapter hides configuration details (environment variables, pooling)
    behind the port so stores can depend only on the protocol. An explicit
    engine can be injected, which tests use with in-memory SQLite.
    """

    def __init__(self, engine: Engine | None = None) -> None:
        self._engine = engine

    def get_finance_engine(self) -> Engine:
        """Get the engine for the finance database.

        Returns:
            Engine: SQLAlchemy engine connected to the finance database.
        """
        if self._engine is not None:
            return self._engine
        return get_finance_engine()


__all__ = [
    "get_finance_engine",
    "SqlAlchemyDatabaseEngineAdapter",
]

"""Factory helpers to select the transaction store backend."""

import os

from src.application.ports.database import DatabaseEnginePort
from src.application.ports.transaction_store import TransactionStorePort
from src.infrastructure.logging.logger import get_app_logger
from src.infrastructure.memory_transaction_store import (
    InMemoryTransactionStore,
)
from src.infrastructure.settings import FinanceSettings
from src.infrastructure.sql_transaction_store import (
    SqlAlchemyTransactionStore,
)


def create_transaction_store(
    db_port: DatabaseEnginePort,
    logger=None,
    backend: str | None = None,
    settings: FinanceSettings | None = None,
) -> TransactionStorePort:
    """Return a transaction store implementation based on configuration.

    Args:
        db_port: Port providing access to the finance engine (SQL backend).
        logger: Optional logger compatible with logging.Logger-like API.
        backend: Optional backend override (sqlalchemy or memory).
        settings: Optional settings; the environment is read otherwise.

    Returns:
        TransactionStorePort: Concrete store implementation.
    """
    resolved_logger = logger or get_app_logger()
    if backend is None and settings is not None:
        backend = settings.store_backend
    selected_backend = (
        backend or os.getenv("FINANCE_STORE_BACKEND", "sqlalchemy")
    ).strip().lower()

    if selected_backend == "sqlalchemy":
        return SqlAlchemyTransactionStore(db_port, logger=resolved_logger)

    if selected_backend == "memory":
        resolved_logger.warning(
            "Using the in-memory transaction store; data is not persisted"
        )
        return InMemoryTransactionStore(logger=resolved_logger)

    raise ValueError(
        "Unsupported transaction store backend: "
        f"{selected_backend}. Expected sqlalchemy or memory."
    )


__all__ = ["create_transaction_store"]

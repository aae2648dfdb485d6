"""Tests for the transaction store factory."""

from unittest.mock import MagicMock

import pytest

from src.infrastructure.memory_transaction_store import (
    InMemoryTransactionStore,
)
from src.infrastructure.settings import FinanceSettings
from src.infrastructure.sql_transaction_store import (
    SqlAlchemyTransactionStore,
)
from src.infrastructure.transaction_store_factory import (
    create_transaction_store,
)


def test_defaults_to_sqlalchemy(monkeypatch) -> None:
    monkeypatch.delenv("FINANCE_STORE_BACKEND", raising=False)

    store = create_transaction_store(MagicMock(), logger=MagicMock())

    assert isinstance(store, SqlAlchemyTransactionStore)


def test_settings_select_memory_backend() -> None:
    logger = MagicMock()

    store = create_transaction_store(
        MagicMock(),
        logger=logger,
        settings=FinanceSettings(store_backend="memory"),
    )

    assert isinstance(store, InMemoryTransactionStore)
    logger.warning.assert_called_once()


def test_explicit_backend_overrides_environment(monkeypatch) -> None:
    monkeypatch.setenv("FINANCE_STORE_BACKEND", "memory")

    store = create_transaction_store(
        MagicMock(),
        logger=MagicMock(),
        backend="sqlalchemy",
    )

    assert isinstance(store, SqlAlchemyTransactionStore)


def test_unknown_backend_raises() -> None:
    with pytest.raises(ValueError):
        create_transaction_store(
            MagicMock(),
            logger=MagicMock(),
            backend="firestore",
        )

"""Tests for the CSV export use case."""

from datetime import datetime
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from src.application.errors import StoreUnavailableError
from src.application.streams import Observable
from src.application.use_cases.export_transactions import (
    ExportTransactionsUseCase,
    export_transactions_csv_file,
)
from src.domain.models.transactions import Transaction, TransactionKind
from src.infrastructure.memory_transaction_store import (
    InMemoryTransactionStore,
)


NOW = datetime(2024, 5, 6, 7, 8, 9)


def _tx(description: str, occurred_at: str, owner_id: str = "u1"):
    return Transaction(
        id=None,
        amount=Decimal("5.50"),
        description=description,
        category="Food",
        kind=TransactionKind.EXPENSE,
        occurred_at=occurred_at,
        owner_id=owner_id,
    )


def test_export_transactions_csv_file_uses_timestamped_name(tmp_path) -> None:
    path = export_transactions_csv_file([], tmp_path / "out", now=NOW)

    assert path.name == "transactions_2024-05-06_07-08-09.csv"
    assert path.read_text(encoding="utf-8") == (
        "Date,Description,Category,Type,Amount"
    )


def test_execute_writes_owner_rows_most_recent_first(tmp_path) -> None:
    store = InMemoryTransactionStore(logger=MagicMock())
    store.insert(_tx("Old", "2024-01-01"))
    store.insert(_tx("New", "2024-02-01"))
    store.insert(_tx("Someone else", "2024-03-01", owner_id="u2"))
    use_case = ExportTransactionsUseCase(
        store,
        tmp_path,
        logger=MagicMock(),
        clock=lambda: NOW,
    )

    result = use_case.execute("u1")

    assert result.row_count == 2
    lines = result.path.read_text(encoding="utf-8").split("\n")
    assert lines[1] == '2024-02-01,"New","Food",expense,5.5'
    assert lines[2] == '2024-01-01,"Old","Food",expense,5.5'


def test_execute_without_transactions_writes_nothing(tmp_path) -> None:
    store = InMemoryTransactionStore(logger=MagicMock())
    use_case = ExportTransactionsUseCase(store, tmp_path, logger=MagicMock())

    result = use_case.execute("u1")

    assert result.path is None
    assert result.row_count == 0
    assert list(tmp_path.iterdir()) == []


def test_execute_propagates_store_failures(tmp_path) -> None:
    store = MagicMock()
    store.observe_all.return_value = Observable(
        lambda _emit, fail: fail(StoreUnavailableError("offline"))
    )
    use_case = ExportTransactionsUseCase(store, tmp_path, logger=MagicMock())

    with pytest.raises(StoreUnavailableError):
        use_case.execute("u1")

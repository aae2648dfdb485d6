"""Tests for CSV formatting of transactions."""

from decimal import Decimal

from src.domain.constants import CSV_HEADER
from src.domain.models.transactions import Transaction, TransactionKind
from src.domain.services.export import (
    format_transaction_row,
    format_transactions_csv,
)


def _tx(description: str, amount: str = "5.50") -> Transaction:
    return Transaction(
        id="tx-1",
        amount=Decimal(amount),
        description=description,
        category="Food",
        kind=TransactionKind.EXPENSE,
        occurred_at="2024-01-01",
        owner_id="owner-1",
    )


def test_format_transaction_row_quotes_text_fields() -> None:
    row = format_transaction_row(_tx("Coffee, Tea"))

    assert row == '2024-01-01,"Coffee, Tea","Food",expense,5.5'


def test_format_transaction_row_doubles_embedded_quotes() -> None:
    row = format_transaction_row(_tx('The "good" beans', amount="100"))

    assert row == '2024-01-01,"The ""good"" beans","Food",expense,100'


def test_format_transactions_csv_starts_with_header() -> None:
    csv_text = format_transactions_csv([_tx("A"), _tx("B")])

    lines = csv_text.split("\n")
    assert lines[0] == CSV_HEADER == "Date,Description,Category,Type,Amount"
    assert len(lines) == 3


def test_format_transactions_csv_of_empty_list_is_header_only() -> None:
    assert format_transactions_csv([]) == CSV_HEADER

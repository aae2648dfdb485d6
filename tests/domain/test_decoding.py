"""Tests for stored record decoding."""

from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from src.domain.models.transactions import Transaction, TransactionKind
from src.domain.services.decoding import (
    decode_records,
    decode_transaction,
    encode_transaction,
)


def _record(**overrides) -> dict:
    record = {
        "id": "tx-1",
        "amount": "12.50",
        "description": "Lunch",
        "category": "Food",
        "kind": "expense",
        "occurred_at": "2024-03-01 12:00:00",
        "owner_id": "owner-1",
    }
    record.update(overrides)
    return record


def test_decode_transaction_returns_complete_transaction() -> None:
    transaction = decode_transaction(_record())

    assert transaction == Transaction(
        id="tx-1",
        amount=Decimal("12.50"),
        description="Lunch",
        category="Food",
        kind=TransactionKind.EXPENSE,
        occurred_at="2024-03-01 12:00:00",
        owner_id="owner-1",
    )


def test_decode_transaction_accepts_kind_in_any_case() -> None:
    transaction = decode_transaction(_record(kind="INCOME"))

    assert transaction is not None
    assert transaction.kind is TransactionKind.INCOME


@pytest.mark.parametrize(
    "overrides",
    [
        {"id": None},
        {"owner_id": ""},
        {"kind": "transfer"},
        {"amount": "abc"},
        {"amount": "-3"},
        {"amount": True},
        {"amount": "NaN"},
    ],
)
def test_decode_transaction_rejects_malformed_records(overrides) -> None:
    assert decode_transaction(_record(**overrides)) is None


def test_decode_transaction_defaults_missing_text_fields() -> None:
    record = _record()
    del record["description"]
    record["category"] = None

    transaction = decode_transaction(record)

    assert transaction is not None
    assert transaction.description == ""
    assert transaction.category == ""


def test_decode_records_drops_failures_and_logs() -> None:
    logger = MagicMock()
    records = [_record(), _record(id="tx-2", amount="oops"), _record(id="tx-3")]

    transactions = decode_records(records, logger=logger)

    assert [t.id for t in transactions] == ["tx-1", "tx-3"]
    logger.warning.assert_called_once()


def test_encode_transaction_stores_amount_as_text() -> None:
    transaction = decode_transaction(_record())

    encoded = encode_transaction(transaction)

    assert encoded["amount"] == "12.50"
    assert encoded["kind"] == "expense"
    assert decode_transaction(encoded) == transaction

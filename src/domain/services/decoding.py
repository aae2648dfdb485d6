"""Decoding of stored transaction records.

Stored records are plain mappings (SQL rows, in-memory dicts). Reading them
goes through a single decode step that either returns a complete
``Transaction`` or ``None``; callers apply the drop-on-failure policy with
``decode_records`` so a malformed record never fails a whole read.
"""

from collections.abc import Iterable, Mapping
from logging import Logger
from typing import Any

from src.domain.models.transactions import Transaction, TransactionKind
from src.utils.decimal_utils import parse_decimal


REQUIRED_FIELDS = ("id", "amount", "kind", "owner_id")


def _optional_text(record: Mapping[str, Any], key: str) -> str:
    value = record.get(key)
    return value if isinstance(value, str) else ""


def decode_transaction(record: Mapping[str, Any]) -> Transaction | None:
    """Decode a stored record into a Transaction.

    Args:
        record: Raw stored fields.

    Returns:
        Transaction | None: The decoded transaction, or None when a required
        field is missing, the kind is unrecognized, or the amount is not a
        non-negative number.
    """
    for key in REQUIRED_FIELDS:
        if record.get(key) in (None, ""):
            return None

    logical_id = record["id"]
    owner_id = record["owner_id"]
    if not isinstance(logical_id, str) or not isinstance(owner_id, str):
        return None

    kind = TransactionKind.parse(record["kind"])
    if kind is None:
        return None

    amount = parse_decimal(record["amount"])
    if amount is None or amount < 0:
        return None

    return Transaction(
        id=logical_id,
        amount=amount,
        description=_optional_text(record, "description"),
        category=_optional_text(record, "category"),
        kind=kind,
        occurred_at=_optional_text(record, "occurred_at"),
        owner_id=owner_id,
    )


def decode_records(
    records: Iterable[Mapping[str, Any]],
    logger: Logger | None = None,
) -> list[Transaction]:
    """Decode records, silently dropping those that cannot be decoded.

    Args:
        records: Raw stored records.
        logger: Optional logger used to report dropped records.

    Returns:
        list[Transaction]: Successfully decoded transactions, in input order.
    """
    decoded: list[Transaction] = []
    dropped = 0
    for record in records:
        transaction = decode_transaction(record)
        if transaction is None:
            dropped += 1
            continue
        decoded.append(transaction)
    if dropped and logger is not None:
        logger.warning(f"Dropped {dropped} undecodable transaction records")
    return decoded


def encode_transaction(transaction: Transaction) -> dict[str, Any]:
    """Return the stored representation of a transaction.

    Amounts are stored as strings to keep Decimal precision across backends.
    """
    return {
        "id": transaction.id,
        "amount": str(transaction.amount),
        "description": transaction.description,
        "category": transaction.category,
        "kind": transaction.kind.value,
        "occurred_at": transaction.occurred_at,
        "owner_id": transaction.owner_id,
    }


__all__ = [
    "REQUIRED_FIELDS",
    "decode_transaction",
    "decode_records",
    "encode_transaction",
]

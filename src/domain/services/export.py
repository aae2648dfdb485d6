"""CSV formatting of transaction snapshots."""

from collections.abc import Iterable

from src.domain.constants import CSV_HEADER
from src.domain.models.transactions import Transaction
from src.utils.decimal_utils import format_plain_decimal


def _quote(value: str) -> str:
    """Quote a free-text field, doubling embedded quote characters."""
    return '"' + value.replace('"', '""') + '"'


def format_transaction_row(transaction: Transaction) -> str:
    """Return one CSV row for a transaction.

    Description and category are always quoted so embedded commas survive.
    """
    return ",".join(
        [
            transaction.occurred_at,
            _quote(transaction.description),
            _quote(transaction.category),
            transaction.kind.value,
            format_plain_decimal(transaction.amount),
        ]
    )


def format_transactions_csv(transactions: Iterable[Transaction]) -> str:
    """Render transactions as CSV text.

    Args:
        transactions: Transactions in display order.

    Returns:
        str: Header row followed by one row per transaction, newline-joined.
    """
    rows = [format_transaction_row(t) for t in transactions]
    return "\n".join([CSV_HEADER, *rows])


__all__ = ["format_transaction_row", "format_transactions_csv"]

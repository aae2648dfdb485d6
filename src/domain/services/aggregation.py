"""Aggregation helpers computed over transaction snapshots."""

from collections.abc import Iterable
from decimal import Decimal

from src.domain.constants import OTHER_CATEGORY
from src.domain.models.transactions import (
    CategoryAmount,
    Transaction,
    TransactionKind,
    TransactionTotals,
)


def compute_totals(transactions: Iterable[Transaction]) -> TransactionTotals:
    """Sum income and expense amounts over a snapshot.

    Args:
        transactions: Snapshot of transactions to aggregate.

    Returns:
        TransactionTotals: Income and expense totals; balance is derived.
    """
    total_income = Decimal("0")
    total_expenses = Decimal("0")
    for transaction in transactions:
        if transaction.kind is TransactionKind.INCOME:
            total_income += transaction.amount
        elif transaction.kind is TransactionKind.EXPENSE:
            total_expenses += transaction.amount
    return TransactionTotals(
        total_income=total_income,
        total_expenses=total_expenses,
    )


def sum_by_kind(
    transactions: Iterable[Transaction],
    kind: TransactionKind,
) -> Decimal:
    """Return the sum of amounts for transactions of a single kind."""
    return sum(
        (t.amount for t in transactions if t.kind is kind),
        Decimal("0"),
    )


def sort_by_recency(
    transactions: Iterable[Transaction],
) -> list[Transaction]:
    """Order transactions most recent first.

    Timestamps are sortable strings; ties keep a stable order by logical id
    so repeated snapshots render identically.

    Args:
        transactions: Transactions in any order.

    Returns:
        list[Transaction]: Transactions sorted by occurred_at descending.
    """
    return sorted(
        transactions,
        key=lambda t: (t.occurred_at, t.id or ""),
        reverse=True,
    )


def compute_category_totals(
    transactions: Iterable[Transaction],
    kind: TransactionKind,
) -> list[CategoryAmount]:
    """Aggregate amounts per category for one kind.

    Args:
        transactions: Snapshot of transactions.
        kind: Kind to aggregate.

    Returns:
        list[CategoryAmount]: Totals sorted by amount descending, then name.
    """
    totals: dict[str, Decimal] = {}
    for transaction in transactions:
        if transaction.kind is not kind:
            continue
        category = transaction.category.strip() or OTHER_CATEGORY
        totals[category] = (
            totals.get(category, Decimal("0")) + transaction.amount
        )
    return [
        CategoryAmount(category=category, amount=amount)
        for category, amount in sorted(
            totals.items(),
            key=lambda item: (-item[1], item[0]),
        )
    ]


__all__ = [
    "compute_totals",
    "sum_by_kind",
    "sort_by_recency",
    "compute_category_totals",
]

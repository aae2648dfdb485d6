"""Tests for the aggregation domain services."""

from decimal import Decimal

from src.domain.models.transactions import Transaction, TransactionKind
from src.domain.services.aggregation import (
    compute_category_totals,
    compute_totals,
    sort_by_recency,
    sum_by_kind,
)


def _tx(
    tx_id: str,
    amount: str,
    kind: TransactionKind,
    category: str = "Food",
    occurred_at: str = "2024-01-01 10:00:00",
) -> Transaction:
    return Transaction(
        id=tx_id,
        amount=Decimal(amount),
        description=f"tx {tx_id}",
        category=category,
        kind=kind,
        occurred_at=occurred_at,
        owner_id="owner-1",
    )


def test_compute_totals_balances_income_and_expenses() -> None:
    transactions = [
        _tx("a", "100", TransactionKind.INCOME),
        _tx("b", "40", TransactionKind.EXPENSE),
    ]

    totals = compute_totals(transactions)

    assert totals.total_income == Decimal("100")
    assert totals.total_expenses == Decimal("40")
    assert totals.balance == Decimal("60")


def test_compute_totals_of_empty_snapshot_is_zero() -> None:
    totals = compute_totals([])

    assert totals.total_income == Decimal("0")
    assert totals.total_expenses == Decimal("0")
    assert totals.balance == Decimal("0")


def test_sum_by_kind_ignores_other_kind() -> None:
    transactions = [
        _tx("a", "10.25", TransactionKind.EXPENSE),
        _tx("b", "5", TransactionKind.INCOME),
        _tx("c", "0.75", TransactionKind.EXPENSE),
    ]

    assert sum_by_kind(transactions, TransactionKind.EXPENSE) == Decimal("11")


def test_sort_by_recency_orders_latest_first() -> None:
    older = _tx("a", "1", TransactionKind.INCOME, occurred_at="2024-01-01")
    newer = _tx("b", "1", TransactionKind.INCOME, occurred_at="2024-02-01")

    assert sort_by_recency([older, newer]) == [newer, older]


def test_compute_category_totals_groups_blank_categories_as_other() -> None:
    transactions = [
        _tx("a", "20", TransactionKind.EXPENSE, category="Food"),
        _tx("b", "30", TransactionKind.EXPENSE, category="Housing"),
        _tx("c", "15", TransactionKind.EXPENSE, category="Food"),
        _tx("d", "5", TransactionKind.EXPENSE, category="  "),
        _tx("e", "999", TransactionKind.INCOME, category="Salary"),
    ]

    totals = compute_category_totals(transactions, TransactionKind.EXPENSE)

    assert [(item.category, item.amount) for item in totals] == [
        ("Food", Decimal("35")),
        ("Housing", Decimal("30")),
        ("Other", Decimal("5")),
    ]

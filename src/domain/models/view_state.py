"""Derived view-state models published to presentation layers."""

from dataclasses import dataclass, field
from decimal import Decimal

from .owner import Owner
from .transactions import Transaction


@dataclass(frozen=True)
class ViewState:
    """Aggregate finance state for the signed-in owner.

    Every instance is built from a single snapshot, so the transaction list
    and the totals always agree with each other.

    Attributes:
        transactions: Snapshot ordered most recent first.
        balance: total_income minus total_expenses.
        total_income: Sum of income amounts.
        total_expenses: Sum of expense amounts.
        is_loading: True while waiting for the first snapshot.
        error: Human-readable error, if any.
        transaction_being_edited: Transaction selected for editing.
    """

    transactions: tuple[Transaction, ...] = field(default_factory=tuple)
    balance: Decimal = Decimal("0")
    total_income: Decimal = Decimal("0")
    total_expenses: Decimal = Decimal("0")
    is_loading: bool = False
    error: str | None = None
    transaction_being_edited: Transaction | None = None


@dataclass(frozen=True)
class AuthViewState:
    """Authentication state for presentation layers."""

    user: Owner | None = None
    is_loading: bool = False
    error: str | None = None
    is_logged_in: bool = False


__all__ = ["ViewState", "AuthViewState"]

"""Domain models for owner-scoped transactions."""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum


class TransactionKind(str, Enum):
    """Direction of a transaction; determines the aggregate sign."""

    INCOME = "income"
    EXPENSE = "expense"

    @classmethod
    def parse(cls, raw: str | None) -> "TransactionKind | None":
        """Return the kind matching a stored value, ignoring case.

        Args:
            raw: Raw kind value from storage or user input.

        Returns:
            TransactionKind | None: Matching kind, or None when unrecognized.
        """
        if not isinstance(raw, str):
            return None
        cleaned = raw.strip().lower()
        for kind in cls:
            if kind.value == cleaned:
                return kind
        return None


@dataclass(frozen=True)
class Transaction:
    """A single financial event owned by one user.

    Attributes:
        id: Logical identifier, None until the store assigns one.
        amount: Non-negative magnitude; the sign comes from ``kind``.
        description: Free-form text.
        category: Category name.
        kind: Income or expense.
        occurred_at: Sortable timestamp string (YYYY-MM-DD HH:MM:SS).
        owner_id: Identity of the owning user.
    """

    id: str | None
    amount: Decimal
    description: str
    category: str
    kind: TransactionKind
    occurred_at: str
    owner_id: str

    @property
    def signed_amount(self) -> Decimal:
        """Return the amount with the sign implied by the kind."""
        if self.kind is TransactionKind.EXPENSE:
            return -self.amount
        return self.amount


@dataclass(frozen=True)
class TransactionTotals:
    """Income, expense and balance computed over a set of transactions."""

    total_income: Decimal
    total_expenses: Decimal

    @property
    def balance(self) -> Decimal:
        """Return total_income minus total_expenses."""
        return self.total_income - self.total_expenses


@dataclass(frozen=True)
class CategoryAmount:
    """Amount aggregated for a given transaction category."""

    category: str
    amount: Decimal


__all__ = [
    "TransactionKind",
    "Transaction",
    "TransactionTotals",
    "CategoryAmount",
]

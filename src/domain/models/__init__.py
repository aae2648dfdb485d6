"""Domain models package."""

from .owner import Owner
from .preferences import Category, Preferences
from .transactions import (
    CategoryAmount,
    Transaction,
    TransactionKind,
    TransactionTotals,
)
from .view_state import AuthViewState, ViewState

__all__ = [
    "Owner",
    "Category",
    "Preferences",
    "CategoryAmount",
    "Transaction",
    "TransactionKind",
    "TransactionTotals",
    "AuthViewState",
    "ViewState",
]

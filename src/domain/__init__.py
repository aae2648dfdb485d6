"""Domain package for business rules and core models."""

from .constants import (
    CURRENCY_SYMBOLS,
    DEFAULT_CATEGORIES,
    DEFAULT_CURRENCY_CODE,
)
from .models import (
    AuthViewState,
    Category,
    CategoryAmount,
    Owner,
    Preferences,
    Transaction,
    TransactionKind,
    TransactionTotals,
    ViewState,
)
from .services import (
    compute_category_totals,
    compute_totals,
    currency_symbol,
    decode_records,
    decode_transaction,
    find_matching_records,
    format_transactions_csv,
    sort_by_recency,
)

__all__ = [
    "CURRENCY_SYMBOLS",
    "DEFAULT_CATEGORIES",
    "DEFAULT_CURRENCY_CODE",
    "AuthViewState",
    "Category",
    "CategoryAmount",
    "Owner",
    "Preferences",
    "Transaction",
    "TransactionKind",
    "TransactionTotals",
    "ViewState",
    "compute_category_totals",
    "compute_totals",
    "currency_symbol",
    "decode_records",
    "decode_transaction",
    "find_matching_records",
    "format_transactions_csv",
    "sort_by_recency",
]

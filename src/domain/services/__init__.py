"""Domain services package."""

from .aggregation import (
    compute_category_totals,
    compute_totals,
    sort_by_recency,
    sum_by_kind,
)
from .decoding import decode_records, decode_transaction, encode_transaction
from .export import format_transaction_row, format_transactions_csv
from .matching import find_first_match, find_matching_records
from .normalization import (
    currency_symbol,
    normalize_currency_code,
    normalize_email,
)
from .validation import validate_amount, validate_credentials

__all__ = [
    "compute_category_totals",
    "compute_totals",
    "sort_by_recency",
    "sum_by_kind",
    "decode_records",
    "decode_transaction",
    "encode_transaction",
    "format_transaction_row",
    "format_transactions_csv",
    "find_first_match",
    "find_matching_records",
    "currency_symbol",
    "normalize_currency_code",
    "normalize_email",
    "validate_amount",
    "validate_credentials",
]

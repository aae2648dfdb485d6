"""Helpers for Decimal normalization."""

from decimal import Decimal, InvalidOperation


def coerce_decimal(value) -> Decimal:
    """Normalize numeric values to Decimal.

    Args:
        value: Raw numeric value from SQL, forms or adapters.

    Returns:
        Decimal: Normalized numeric value.
    """
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def parse_decimal(value) -> Decimal | None:
    """Parse a stored amount, returning None when it is not a finite number.

    Booleans are rejected even though they are ints in Python.

    Args:
        value: Raw amount from a stored record.

    Returns:
        Decimal | None: Parsed value, or None when missing or malformed.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        parsed = coerce_decimal(value)
    except (InvalidOperation, ValueError):
        return None
    if not parsed.is_finite():
        return None
    return parsed


def format_plain_decimal(value: Decimal) -> str:
    """Format a Decimal without trailing zeros or exponent notation.

    Args:
        value: Amount to format.

    Returns:
        str: Plain representation, e.g. ``5.50`` -> ``5.5``, ``100`` -> ``100``.
    """
    normalized = value.normalize()
    if normalized == normalized.to_integral_value():
        return str(normalized.quantize(Decimal("1")))
    return format(normalized, "f")


__all__ = ["coerce_decimal", "parse_decimal", "format_plain_decimal"]

"""Domain normalization helpers."""

from src.domain.constants import CURRENCY_SYMBOLS, DEFAULT_CURRENCY_SYMBOL


def normalize_email(email: str | None) -> str:
    """Normalize an email address for identity lookups.

    Args:
        email: Raw email entered by the user.

    Returns:
        str: Trimmed, lower-cased email, or an empty string.
    """
    if not email:
        return ""
    return email.strip().lower()


def normalize_currency_code(code: str | None) -> str:
    """Normalize a currency code for symbol lookups.

    Args:
        code: Raw currency code.

    Returns:
        str: Trimmed, upper-cased code, or an empty string.
    """
    if not code:
        return ""
    return code.strip().upper()


def currency_symbol(code: str | None) -> str:
    """Return the display symbol for a currency code.

    Unknown codes fall back to the generic dollar symbol.
    """
    return CURRENCY_SYMBOLS.get(
        normalize_currency_code(code),
        DEFAULT_CURRENCY_SYMBOL,
    )


__all__ = ["normalize_email", "normalize_currency_code", "currency_symbol"]

"""Domain validation helpers."""

from decimal import Decimal

from src.utils.decimal_utils import parse_decimal


MIN_PASSWORD_LENGTH = 6


def validate_amount(raw_amount) -> Decimal:
    """Return a validated, non-negative transaction amount.

    Args:
        raw_amount: Amount entered by the user (number or string).

    Returns:
        Decimal: Parsed amount.

    Raises:
        ValueError: If the amount is not a finite, non-negative number.
    """
    amount = parse_decimal(raw_amount)
    if amount is None:
        raise ValueError(f"Invalid amount: {raw_amount!r}")
    if amount < 0:
        raise ValueError(f"Amount must be non-negative, got {amount}")
    return amount


def validate_credentials(email: str, password: str) -> None:
    """Reject credentials that cannot create an identity.

    Raises:
        ValueError: If the email is empty or the password is too short.
    """
    if not email or "@" not in email:
        raise ValueError("A valid email address is required")
    if len(password or "") < MIN_PASSWORD_LENGTH:
        raise ValueError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
        )


__all__ = ["MIN_PASSWORD_LENGTH", "validate_amount", "validate_credentials"]

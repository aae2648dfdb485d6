"""Application-level exceptions."""


class FinanceTrackerError(Exception):
    """Base class for errors raised by the finance tracker."""


class TransactionNotFoundError(FinanceTrackerError):
    """Raised when an update targets a logical id the owner does not have."""

    def __init__(self, transaction_id: str | None, owner_id: str) -> None:
        super().__init__(
            f"Transaction not found for update: id={transaction_id}, "
            f"owner={owner_id}"
        )
        self.transaction_id = transaction_id
        self.owner_id = owner_id


class AuthenticationError(FinanceTrackerError):
    """Raised by identity backends when credentials are rejected."""


class ProfileUpdateError(FinanceTrackerError):
    """Raised when an identity exists but its profile could not be updated."""


class StoreUnavailableError(FinanceTrackerError):
    """Raised when a backing store cannot be reached."""


__all__ = [
    "FinanceTrackerError",
    "TransactionNotFoundError",
    "AuthenticationError",
    "ProfileUpdateError",
    "StoreUnavailableError",
]

"""Application port for owner-scoped transaction storage."""

from decimal import Decimal
from typing import Protocol

from src.application.streams import Observable
from src.domain.models.transactions import Transaction, TransactionKind


class TransactionStorePort(Protocol):
    """Port exposing live and one-shot access to an owner's transactions.

    Every operation is scoped by ``owner_id``; records of other owners are
    never returned, matched or modified.
    """

    def observe_all(self, owner_id: str) -> Observable[list[Transaction]]:
        """Return a live stream of snapshots for the owner.

        The first snapshot is delivered on subscribe and a new one after
        every insert, delete or update for that owner. Ordering is not
        guaranteed; consumers sort by recency.
        """

    def observe_by_kind(
        self,
        owner_id: str,
        kind: TransactionKind,
    ) -> Observable[list[Transaction]]:
        """Return a live stream of snapshots filtered by kind."""

    def sum_income(self, owner_id: str) -> Decimal:
        """Return the sum of income amounts currently stored."""

    def sum_expenses(self, owner_id: str) -> Decimal:
        """Return the sum of expense amounts currently stored."""

    def balance(self, owner_id: str) -> Decimal:
        """Return sum_income minus sum_expenses."""

    def insert(self, transaction: Transaction) -> Transaction:
        """Persist a transaction, assigning a logical id when absent."""

    def delete(self, transaction: Transaction) -> int:
        """Remove records matching the logical id and owner.

        Returns:
            int: Number of removed records; zero is not an error.
        """

    def update(self, transaction: Transaction) -> None:
        """Overwrite the record matching the logical id and owner.

        Raises:
            TransactionNotFoundError: If no record matches.
        """


__all__ = ["TransactionStorePort"]

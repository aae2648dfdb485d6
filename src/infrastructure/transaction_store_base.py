"""Shared behavior of the transaction store adapters.

Concrete stores only move raw records in and out of their backend; the
owner scoping, decoding, logical-id matching and change notification live
here so every backend behaves the same way.
"""

from abc import ABC, abstractmethod
from dataclasses import replace
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any
from uuid import uuid4

from src.application.errors import TransactionNotFoundError
from src.application.ports.transaction_store import TransactionStorePort
from src.application.streams import Observable
from src.domain.models.transactions import Transaction, TransactionKind
from src.domain.services.aggregation import sum_by_kind
from src.domain.services.decoding import decode_records, encode_transaction
from src.domain.services.matching import (
    find_first_match,
    find_matching_records,
)
from src.infrastructure.change_feed import OwnerChangeFeed
from src.infrastructure.logging.logger import get_app_logger


StoredRecord = dict[str, Any]


def new_logical_id() -> str:
    """Return a fresh logical transaction id."""
    return uuid4().hex


class BaseTransactionStore(TransactionStorePort, ABC):
    """Template for owner-scoped stores over raw records.

    Each stored record carries a backend ``record_key`` in addition to the
    encoded transaction fields. Mutations locate records by scanning the
    owner's records for the logical id (see ``find_matching_records``).
    """

    def __init__(
        self,
        logger=None,
        change_feed: OwnerChangeFeed | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            logger: Optional logger compatible with logging.Logger-like API.
            change_feed: Optional feed shared with other store instances.
        """
        self._logger = logger or get_app_logger()
        self._feed = change_feed or OwnerChangeFeed(logger=self._logger)

    @abstractmethod
    def _fetch_records(self, owner_id: str) -> list[StoredRecord]:
        """Return the owner's raw records."""

    @abstractmethod
    def _insert_record(self, record: StoredRecord) -> None:
        """Persist a new raw record."""

    @abstractmethod
    def _delete_records(self, record_keys: list[str]) -> None:
        """Remove raw records by backend key."""

    @abstractmethod
    def _replace_record(self, record_key: str, record: StoredRecord) -> None:
        """Overwrite every field of the raw record with the given key."""

    def load_snapshot(
        self,
        owner_id: str,
        kind: TransactionKind | None = None,
    ) -> list[Transaction]:
        """Return the decoded transactions of an owner.

        Undecodable records are dropped rather than failing the read. The
        kind filter applies to decoded values, so it accepts every spelling
        ``TransactionKind.parse`` accepts.
        """
        records = self._fetch_records(owner_id)
        transactions = decode_records(records, logger=self._logger)
        return [
            t
            for t in transactions
            if t.owner_id == owner_id and (kind is None or t.kind is kind)
        ]

    def observe_all(self, owner_id: str) -> Observable[list[Transaction]]:
        return self._feed.live_snapshots(
            owner_id,
            lambda: self.load_snapshot(owner_id),
        )

    def observe_by_kind(
        self,
        owner_id: str,
        kind: TransactionKind,
    ) -> Observable[list[Transaction]]:
        return self._feed.live_snapshots(
            owner_id,
            lambda: self.load_snapshot(owner_id, kind),
        )

    def sum_income(self, owner_id: str) -> Decimal:
        kind = TransactionKind.INCOME
        return sum_by_kind(self.load_snapshot(owner_id, kind), kind)

    def sum_expenses(self, owner_id: str) -> Decimal:
        kind = TransactionKind.EXPENSE
        return sum_by_kind(self.load_snapshot(owner_id, kind), kind)

    def balance(self, owner_id: str) -> Decimal:
        return self.sum_income(owner_id) - self.sum_expenses(owner_id)

    def insert(self, transaction: Transaction) -> Transaction:
        """Persist a transaction and notify the owner's observers.

        Args:
            transaction: Transaction to store; a logical id is assigned when
                ``transaction.id`` is None or empty.

        Returns:
            Transaction: The stored transaction, with its logical id.
        """
        stored = transaction
        if not transaction.id:
            stored = replace(transaction, id=new_logical_id())
        record = self._build_record(stored, record_key=uuid4().hex)
        self._insert_record(record)
        self._logger.info(
            f"Inserted transaction {stored.id} for owner {stored.owner_id}"
        )
        self._feed.notify(stored.owner_id)
        return stored

    def delete(self, transaction: Transaction) -> int:
        """Remove every record matching the logical id and owner.

        A missing record is a no-op: nothing is raised and zero is returned.
        """
        if not transaction.id:
            self._logger.warning("Delete requested without a transaction id")
            return 0
        records = self._fetch_records(transaction.owner_id)
        matches = find_matching_records(
            records,
            transaction.id,
            transaction.owner_id,
        )
        if not matches:
            self._logger.warning(
                f"No transaction {transaction.id} found to delete "
                f"for owner {transaction.owner_id}"
            )
            return 0
        self._delete_records([record["record_key"] for record in matches])
        self._logger.info(
            f"Deleted {len(matches)} record(s) for transaction "
            f"{transaction.id}"
        )
        self._feed.notify(transaction.owner_id)
        return len(matches)

    def update(self, transaction: Transaction) -> None:
        """Overwrite the first record matching the logical id and owner.

        Raises:
            TransactionNotFoundError: If the owner has no such transaction.
        """
        records = (
            self._fetch_records(transaction.owner_id) if transaction.id else []
        )
        match = find_first_match(
            records,
            transaction.id or "",
            transaction.owner_id,
        )
        if match is None:
            raise TransactionNotFoundError(
                transaction.id,
                transaction.owner_id,
            )
        record_key = match["record_key"]
        self._replace_record(
            record_key,
            self._build_record(transaction, record_key=record_key),
        )
        self._logger.info(f"Updated transaction {transaction.id}")
        self._feed.notify(transaction.owner_id)

    @staticmethod
    def _build_record(
        transaction: Transaction,
        record_key: str,
    ) -> StoredRecord:
        record = encode_transaction(transaction)
        record["record_key"] = record_key
        record["created_at"] = datetime.now(timezone.utc).isoformat()
        return record


__all__ = ["BaseTransactionStore", "StoredRecord", "new_logical_id"]

"""In-memory transaction store for demos and tests."""

import threading
from typing import Any
from uuid import uuid4

from src.infrastructure.change_feed import OwnerChangeFeed
from src.infrastructure.transaction_store_base import (
    BaseTransactionStore,
    StoredRecord,
)


class InMemoryTransactionStore(BaseTransactionStore):
    """Transaction store keeping raw records in a process-local list."""

    def __init__(
        self,
        logger=None,
        change_feed: OwnerChangeFeed | None = None,
    ) -> None:
        super().__init__(logger=logger, change_feed=change_feed)
        self._records: list[StoredRecord] = []
        self._lock = threading.Lock()

    def seed_raw_record(self, record: dict[str, Any]) -> str:
        """Store a raw record as-is, bypassing encoding.

        Args:
            record: Raw fields; ``owner_id`` decides which observers re-emit.

        Returns:
            str: Backend key assigned to the record.
        """
        stored = dict(record)
        stored.setdefault("record_key", uuid4().hex)
        with self._lock:
            self._records.append(stored)
        owner_id = stored.get("owner_id")
        if isinstance(owner_id, str):
            self._feed.notify(owner_id)
        return stored["record_key"]

    def _fetch_records(self, owner_id: str) -> list[StoredRecord]:
        with self._lock:
            return [
                dict(record)
                for record in self._records
                if record.get("owner_id") == owner_id
            ]

    def _insert_record(self, record: StoredRecord) -> None:
        with self._lock:
            self._records.append(dict(record))

    def _delete_records(self, record_keys: list[str]) -> None:
        keys = set(record_keys)
        with self._lock:
            self._records = [
                record
                for record in self._records
                if record.get("record_key") not in keys
            ]

    def _replace_record(self, record_key: str, record: StoredRecord) -> None:
        with self._lock:
            for index, existing in enumerate(self._records):
                if existing.get("record_key") == record_key:
                    self._records[index] = {**record, "record_key": record_key}
                    return


__all__ = ["InMemoryTransactionStore"]

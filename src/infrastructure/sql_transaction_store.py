"""SQLAlchemy-backed transaction store."""

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from src.application.errors import StoreUnavailableError
from src.application.ports.database import DatabaseEnginePort
from src.infrastructure.change_feed import OwnerChangeFeed
from src.infrastructure.transaction_store_base import (
    BaseTransactionStore,
    StoredRecord,
)


CREATE_TRANSACTIONS_SQL = """
CREATE TABLE IF NOT EXISTS transactions (
    record_key TEXT PRIMARY KEY,
    id TEXT,
    amount TEXT,
    description TEXT,
    category TEXT,
    kind TEXT,
    occurred_at TEXT,
    owner_id TEXT NOT NULL,
    created_at TEXT
)
"""

CREATE_OWNER_INDEX_SQL = """
CREATE INDEX IF NOT EXISTS ix_transactions_owner_id
ON transactions (owner_id)
"""

SELECT_OWNER_RECORDS_SQL = text(
    """
    SELECT record_key, id, amount, description, category, kind,
           occurred_at, owner_id
    FROM transactions
    WHERE owner_id = :owner_id
    ORDER BY created_at DESC
    """
)

INSERT_TRANSACTION_SQL = text(
    """
    INSERT INTO transactions (
        record_key,
        id,
        amount,
        description,
        category,
        kind,
        occurred_at,
        owner_id,
        created_at
    )
    VALUES (
        :record_key,
        :id,
        :amount,
        :description,
        :category,
        :kind,
        :occurred_at,
        :owner_id,
        :created_at
    )
    """
)

UPDATE_TRANSACTION_SQL = text(
    """
    UPDATE transactions
    SET id = :id,
        amount = :amount,
        description = :description,
        category = :category,
        kind = :kind,
        occurred_at = :occurred_at,
        owner_id = :owner_id,
        created_at = :created_at
    WHERE record_key = :record_key
    """
)

DELETE_TRANSACTION_SQL = text(
    "DELETE FROM transactions WHERE record_key = :record_key"
)


class SqlAlchemyTransactionStore(BaseTransactionStore):
    """Transaction store backed by a SQL table.

    ``record_key`` is the physical key; the logical ``id`` is an ordinary
    column, so mutations scan the owner's rows to find it.
    """

    def __init__(
        self,
        db_port: DatabaseEnginePort,
        logger=None,
        change_feed: OwnerChangeFeed | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            db_port: Port providing access to the finance engine.
            logger: Optional logger compatible with logging.Logger-like API.
            change_feed: Optional feed shared with other store instances.
        """
        super().__init__(logger=logger, change_feed=change_feed)
        self._db_port = db_port
        self._schema_ready = False

    def prepare_schema(self) -> None:
        """Create the transactions table and its owner index if needed."""
        engine = self._db_port.get_finance_engine()
        try:
            with engine.begin() as conn:
                conn.exec_driver_sql(CREATE_TRANSACTIONS_SQL)
                conn.exec_driver_sql(CREATE_OWNER_INDEX_SQL)
        except SQLAlchemyError as exc:
            raise StoreUnavailableError(
                f"Could not prepare transactions table: {exc}"
            ) from exc
        self._schema_ready = True

    def _ensure_schema(self) -> None:
        if not self._schema_ready:
            self.prepare_schema()

    def _fetch_records(self, owner_id: str) -> list[StoredRecord]:
        self._ensure_schema()
        engine = self._db_port.get_finance_engine()
        try:
            with engine.connect() as conn:
                rows = conn.execute(
                    SELECT_OWNER_RECORDS_SQL,
                    {"owner_id": owner_id},
                ).all()
        except SQLAlchemyError as exc:
            raise StoreUnavailableError(
                f"Could not read transactions: {exc}"
            ) from exc
        return [dict(row._mapping) for row in rows]

    def _insert_record(self, record: StoredRecord) -> None:
        self._ensure_schema()
        self._execute_write(INSERT_TRANSACTION_SQL, [record])

    def _delete_records(self, record_keys: list[str]) -> None:
        self._execute_write(
            DELETE_TRANSACTION_SQL,
            [{"record_key": key} for key in record_keys],
        )

    def _replace_record(self, record_key: str, record: StoredRecord) -> None:
        self._execute_write(
            UPDATE_TRANSACTION_SQL,
            [{**record, "record_key": record_key}],
        )

    def _execute_write(self, statement, payload: list[StoredRecord]) -> None:
        engine = self._db_port.get_finance_engine()
        try:
            with engine.begin() as conn:
                conn.execute(statement, payload)
        except SQLAlchemyError as exc:
            raise StoreUnavailableError(
                f"Could not write transactions: {exc}"
            ) from exc


__all__ = [
    "SqlAlchemyTransactionStore",
    "CREATE_TRANSACTIONS_SQL",
    "SELECT_OWNER_RECORDS_SQL",
    "INSERT_TRANSACTION_SQL",
    "UPDATE_TRANSACTION_SQL",
    "DELETE_TRANSACTION_SQL",
]

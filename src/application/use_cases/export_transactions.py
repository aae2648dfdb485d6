"""Use case writing an owner's transactions to a CSV file."""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable

from src.application.ports.transaction_store import TransactionStorePort
from src.domain.models.transactions import Transaction
from src.domain.services.aggregation import sort_by_recency
from src.domain.services.export import format_transactions_csv
from src.infrastructure.logging.logger import get_app_logger

EXPORT_FILENAME_FORMAT = "transactions_%Y-%m-%d_%H-%M-%S.csv"


@dataclass(frozen=True)
class ExportResult:
    """Outcome of a CSV export."""

    path: Path | None
    row_count: int


def export_transactions_csv_file(
    transactions: Sequence[Transaction],
    output_dir: Path,
    now: datetime | None = None,
) -> Path:
    """Write transactions to a timestamped CSV file.

    Args:
        transactions: Transactions in display order.
        output_dir: Directory receiving the file; created when missing.
        now: Timestamp used in the file name.

    Returns:
        Path: Location of the written file.
    """
    stamp = (now or datetime.now()).strftime(EXPORT_FILENAME_FORMAT)
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / stamp
    path.write_text(format_transactions_csv(transactions), encoding="utf-8")
    return path


class ExportTransactionsUseCase:
    """Export the current snapshot of an owner's transactions."""

    def __init__(
        self,
        transaction_store: TransactionStorePort,
        output_dir: Path,
        logger=None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the use case.

        Args:
            transaction_store: Store providing owner snapshots.
            output_dir: Directory receiving exported files.
            logger: Optional logger compatible with logging.Logger-like API.
            clock: Optional clock used for the file name.
        """
        self._store = transaction_store
        self._output_dir = Path(output_dir)
        self._logger = logger or get_app_logger()
        self._clock = clock or datetime.now

    def execute(self, owner_id: str) -> ExportResult:
        """Write the owner's transactions, most recent first.

        Returns:
            ExportResult: Written path and row count; ``path`` is None when
            the owner has no transactions.
        """
        snapshot = self._first_snapshot(owner_id)
        if not snapshot:
            self._logger.info(f"No transactions to export for {owner_id}")
            return ExportResult(path=None, row_count=0)
        ordered = sort_by_recency(snapshot)
        path = export_transactions_csv_file(
            ordered,
            self._output_dir,
            now=self._clock(),
        )
        self._logger.info(f"Exported {len(ordered)} transactions to {path}")
        return ExportResult(path=path, row_count=len(ordered))

    def _first_snapshot(self, owner_id: str) -> list[Transaction]:
        received: list[list[Transaction]] = []
        failures: list[Exception] = []
        subscription = self._store.observe_all(owner_id).subscribe(
            received.append,
            failures.append,
        )
        subscription.cancel()
        if failures:
            raise failures[0]
        return received[0] if received else []


__all__ = [
    "ExportResult",
    "ExportTransactionsUseCase",
    "export_transactions_csv_file",
    "EXPORT_FILENAME_FORMAT",
]

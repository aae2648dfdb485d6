"""Controller keeping the finance view-state in sync with the store.

The controller follows the signed-in owner:

* no owner: the view-state is reset and nothing is subscribed;
* new owner: the previous subscription is cancelled, the view-state is
  reset, and ``observe_all(owner_id)`` is subscribed with ``is_loading``;
* every snapshot: totals are recomputed from the snapshot itself and a new
  ``ViewState`` replaces the old one;
* stream failure: the error is published, previous data is kept, and no
  more snapshots arrive until ``refresh()`` or an owner change.

Each subscription is tagged with a generation number; snapshots or
failures carrying an old generation are discarded, so a stale owner's
stream can never write into the current view-state.
"""

import threading
from dataclasses import replace
from datetime import datetime
from typing import Callable

from src.application.ports.auth_provider import AuthProviderPort
from src.application.ports.transaction_store import TransactionStorePort
from src.application.streams import LiveValue, Subscription
from src.domain.constants import TIMESTAMP_FORMAT
from src.domain.models.owner import Owner
from src.domain.models.transactions import Transaction, TransactionKind
from src.domain.models.view_state import ViewState
from src.domain.services.aggregation import compute_totals, sort_by_recency
from src.domain.services.export import format_transactions_csv
from src.domain.services.validation import validate_amount
from src.infrastructure.logging.logger import get_app_logger


def _coerce_kind(kind: TransactionKind | str) -> TransactionKind:
    if isinstance(kind, TransactionKind):
        return kind
    parsed = TransactionKind.parse(kind)
    if parsed is None:
        raise ValueError(f"Unknown transaction kind: {kind!r}")
    return parsed


class FinanceSyncController:
    """Publish a ``ViewState`` derived from the current owner's snapshots."""

    def __init__(
        self,
        transaction_store: TransactionStorePort,
        auth_provider: AuthProviderPort,
        logger=None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the controller and start following the owner.

        Args:
            transaction_store: Store providing live owner snapshots.
            auth_provider: Provider of the signed-in owner.
            logger: Optional logger compatible with logging.Logger-like API.
            clock: Optional clock used to timestamp new transactions.
        """
        self._store = transaction_store
        self._auth = auth_provider
        self._logger = logger or get_app_logger()
        self._clock = clock or datetime.now
        self._state: LiveValue[ViewState] = LiveValue(ViewState())
        self._lock = threading.RLock()
        self._owner: Owner | None = None
        self._subscription: Subscription | None = None
        self._generation = 0
        self._closed = False
        self._owner_subscription = auth_provider.current_owner.subscribe(
            self._on_owner_changed
        )

    @property
    def state(self) -> LiveValue[ViewState]:
        """Live view-state; subscribers get every replacement."""
        return self._state

    @property
    def view_state(self) -> ViewState:
        """Return the current view-state."""
        return self._state.value

    @property
    def current_owner(self) -> Owner | None:
        return self._owner

    @property
    def has_active_subscription(self) -> bool:
        """Return True while a store subscription is delivering snapshots."""
        subscription = self._subscription
        return subscription is not None and subscription.active

    def refresh(self) -> None:
        """Resubscribe to the current owner's transactions.

        Keeps the data on screen while loading; used for manual retries and
        after every mutation.
        """
        with self._lock:
            if self._closed:
                return
            if self._owner is None:
                self._logger.warning("Refresh requested with no owner")
                self._publish_error("No user logged in")
                return
            self._subscribe(self._owner.id)

    def add_transaction(
        self,
        amount,
        description: str,
        category: str,
        kind: TransactionKind | str,
    ) -> Transaction | None:
        """Record a new transaction for the signed-in owner.

        Args:
            amount: Non-negative amount (number or numeric string).
            description: Free-form text.
            category: Category name.
            kind: Income or expense.

        Returns:
            Transaction | None: The stored transaction, or None on failure
            (the reason is published in ``ViewState.error``).
        """
        owner = self._owner
        if owner is None:
            self._publish_error("Please log in to add transactions")
            return None
        try:
            transaction = Transaction(
                id=None,
                amount=validate_amount(amount),
                description=description,
                category=category,
                kind=_coerce_kind(kind),
                occurred_at=self._clock().strftime(TIMESTAMP_FORMAT),
                owner_id=owner.id,
            )
            stored = self._store.insert(transaction)
        except Exception as exc:
            self._logger.error(f"Failed to add transaction: {exc}")
            self._publish_error(f"Failed to add transaction: {exc}")
            return None
        self._logger.info(f"Added transaction {stored.id} for {owner.id}")
        self.refresh()
        return stored

    def delete_transaction(self, transaction: Transaction) -> int:
        """Delete a transaction of the signed-in owner.

        A transaction that no longer exists is not an error; the returned
        count is then zero.

        Returns:
            int: Number of removed records.
        """
        if self._owner is None:
            self._publish_error("Please log in to delete transactions")
            return 0
        try:
            removed = self._store.delete(transaction)
        except Exception as exc:
            self._logger.error(f"Failed to delete transaction: {exc}")
            self._publish_error(f"Failed to delete transaction: {exc}")
            return 0
        self.refresh()
        return removed

    def edit_transaction(
        self,
        original: Transaction,
        amount,
        description: str,
        category: str,
        kind: TransactionKind | str,
    ) -> bool:
        """Replace the editable fields of an existing transaction.

        ``id``, ``owner_id`` and ``occurred_at`` are always taken from
        ``original``.

        Returns:
            bool: True when the store accepted the update.
        """
        if self._owner is None:
            self._publish_error("Please log in to edit transactions")
            return False
        try:
            updated = replace(
                original,
                amount=validate_amount(amount),
                description=description,
                category=category,
                kind=_coerce_kind(kind),
            )
            self._store.update(updated)
        except Exception as exc:
            self._logger.error(f"Failed to edit transaction: {exc}")
            self._publish_error(f"Failed to edit transaction: {exc}")
            return False
        self.set_transaction_to_edit(None)
        self.refresh()
        return True

    def set_transaction_to_edit(self, transaction: Transaction | None) -> None:
        """Select a transaction for editing, or clear the selection."""
        with self._lock:
            self._state.update(
                lambda state: replace(
                    state,
                    transaction_being_edited=transaction,
                )
            )

    def clear_error(self) -> None:
        with self._lock:
            self._state.update(lambda state: replace(state, error=None))

    def current_transactions(self) -> tuple[Transaction, ...]:
        """Return the transactions of the current view-state."""
        return self._state.value.transactions

    def export_csv(self) -> str:
        """Return the current transactions rendered as CSV."""
        return format_transactions_csv(self.current_transactions())

    def close(self) -> None:
        """Stop following the owner and cancel the store subscription."""
        with self._lock:
            self._closed = True
            self._generation += 1
            subscription = self._subscription
            self._subscription = None
        if subscription is not None:
            subscription.cancel()
        self._owner_subscription.cancel()

    def _on_owner_changed(self, owner: Owner | None) -> None:
        with self._lock:
            if self._closed:
                return
            previous = self._owner
            self._owner = owner
            if (
                owner is not None
                and previous is not None
                and owner.id == previous.id
            ):
                return
            self._cancel_subscription()
            self._state.set(ViewState())
            if owner is None:
                self._logger.info("No owner signed in, view state cleared")
                return
            self._logger.info(f"Owner changed to {owner.id}, subscribing")
            self._subscribe(owner.id)

    def _subscribe(self, owner_id: str) -> None:
        self._cancel_subscription()
        generation = self._generation
        self._state.update(
            lambda state: replace(state, is_loading=True, error=None)
        )
        try:
            stream = self._store.observe_all(owner_id)
            subscription = stream.subscribe(
                lambda snapshot: self._apply_snapshot(
                    generation,
                    owner_id,
                    snapshot,
                ),
                lambda exc: self._apply_failure(generation, exc),
            )
        except Exception as exc:
            self._logger.error(f"Could not subscribe to transactions: {exc}")
            self._state.update(
                lambda state: replace(
                    state,
                    is_loading=False,
                    error=f"Failed to load transactions: {exc}",
                )
            )
            return
        if generation == self._generation:
            self._subscription = subscription
        else:
            subscription.cancel()

    def _cancel_subscription(self) -> None:
        self._generation += 1
        subscription = self._subscription
        self._subscription = None
        if subscription is not None:
            subscription.cancel()

    def _apply_snapshot(
        self,
        generation: int,
        owner_id: str,
        snapshot: list[Transaction],
    ) -> None:
        with self._lock:
            if generation != self._generation:
                self._logger.debug(
                    f"Discarding stale snapshot for owner {owner_id}"
                )
                return
            owned = [t for t in snapshot if t.owner_id == owner_id]
            if len(owned) != len(snapshot):
                self._logger.warning(
                    f"Ignored {len(snapshot) - len(owned)} transactions "
                    f"not owned by {owner_id}"
                )
            ordered = sort_by_recency(owned)
            totals = compute_totals(ordered)
            self._state.set(
                ViewState(
                    transactions=tuple(ordered),
                    balance=totals.balance,
                    total_income=totals.total_income,
                    total_expenses=totals.total_expenses,
                    is_loading=False,
                    error=None,
                    transaction_being_edited=self._carry_edit_target(ordered),
                )
            )

    def _apply_failure(self, generation: int, exc: Exception) -> None:
        with self._lock:
            if generation != self._generation:
                return
            self._subscription = None
            self._logger.error(f"Transaction stream failed: {exc}")
            self._state.update(
                lambda state: replace(
                    state,
                    is_loading=False,
                    error=f"Failed to load transactions: {exc}",
                )
            )

    def _carry_edit_target(
        self,
        ordered: list[Transaction],
    ) -> Transaction | None:
        editing = self._state.value.transaction_being_edited
        if editing is None:
            return None
        for transaction in ordered:
            if transaction.id == editing.id:
                return transaction
        return None

    def _publish_error(self, message: str) -> None:
        with self._lock:
            self._state.update(
                lambda state: replace(state, is_loading=False, error=message)
            )


__all__ = ["FinanceSyncController"]

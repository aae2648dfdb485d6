"""Tests for the finance sync controller."""

from dataclasses import replace
from datetime import datetime, timedelta
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import MagicMock

from src.application.errors import StoreUnavailableError
from src.application.streams import LiveValue, Observable
from src.application.use_cases.finance_sync import FinanceSyncController
from src.domain.models.owner import Owner
from src.domain.models.transactions import Transaction, TransactionKind
from src.domain.models.view_state import ViewState
from src.infrastructure.memory_transaction_store import (
    InMemoryTransactionStore,
)


U1 = Owner(id="u1", email="u1@example.com", display_name="One")
U2 = Owner(id="u2", email="u2@example.com", display_name="Two")


def _clock(start: datetime = datetime(2024, 1, 1, 9, 0, 0)):
    ticks = {"now": start}

    def _now() -> datetime:
        current = ticks["now"]
        ticks["now"] = current + timedelta(minutes=1)
        return current

    return _now


def _auth(owner: Owner | None = None) -> SimpleNamespace:
    return SimpleNamespace(current_owner=LiveValue(owner))


def _controller(store=None, owner: Owner | None = U1):
    store = store or InMemoryTransactionStore(logger=MagicMock())
    auth = _auth(owner)
    controller = FinanceSyncController(
        store,
        auth,
        logger=MagicMock(),
        clock=_clock(),
    )
    return controller, store, auth


def _tx(tx_id: str, owner_id: str, amount: str = "10") -> Transaction:
    return Transaction(
        id=tx_id,
        amount=Decimal(amount),
        description="",
        category="Food",
        kind=TransactionKind.EXPENSE,
        occurred_at="2024-01-01 10:00:00",
        owner_id=owner_id,
    )


class _ManualStore:
    """Store whose snapshots are pushed by the test."""

    def __init__(self) -> None:
        self.emitters: dict[str, list] = {}

    def observe_all(self, owner_id: str) -> Observable:
        def _producer(emit, fail):
            self.emitters.setdefault(owner_id, []).append((emit, fail))
            return None

        return Observable(_producer)

    def push(self, owner_id: str, snapshot) -> None:
        emit, _fail = self.emitters[owner_id][-1]
        emit(snapshot)

    def fail(self, owner_id: str, exc: Exception) -> None:
        _emit, fail = self.emitters[owner_id][-1]
        fail(exc)


def test_income_and_expense_produce_totals() -> None:
    controller, _store, _auth_provider = _controller()

    controller.add_transaction("100", "Pay", "Salary", TransactionKind.INCOME)
    controller.add_transaction("40", "Food", "Food", "expense")

    state = controller.view_state
    assert state.total_income == Decimal("100")
    assert state.total_expenses == Decimal("40")
    assert state.balance == Decimal("60")
    assert state.is_loading is False
    assert state.error is None
    assert [t.description for t in state.transactions] == ["Food", "Pay"]
    assert all(t.id for t in state.transactions)


def test_edit_preserves_identity_and_recomputes_balance() -> None:
    controller, _store, _auth_provider = _controller()
    controller.add_transaction("100", "Pay", "Salary", "income")
    expense = controller.add_transaction("40", "Food", "Food", "expense")

    assert controller.edit_transaction(
        expense,
        "55",
        "Dinner",
        "Food",
        TransactionKind.EXPENSE,
    )

    state = controller.view_state
    assert state.balance == Decimal("45")
    edited = next(t for t in state.transactions if t.id == expense.id)
    assert edited.owner_id == "u1"
    assert edited.occurred_at == expense.occurred_at
    assert edited.description == "Dinner"
    assert len(state.transactions) == 2


def test_sign_out_resets_state_and_stops_updates() -> None:
    controller, store, auth = _controller()
    controller.add_transaction("100", "Pay", "Salary", "income")

    auth.current_owner.set(None)
    store.insert(_tx("late", "u1"))

    assert controller.view_state == ViewState()
    assert controller.has_active_subscription is False


def test_owner_switch_discards_previous_owner_snapshots() -> None:
    store = _ManualStore()
    controller, _store, auth = _controller(store=store)
    store.push("u1", [_tx("a", "u1")])
    u1_emitter = store.emitters["u1"][-1][0]

    auth.current_owner.set(U2)
    u1_emitter([_tx("stale", "u1"), _tx("b", "u1")])
    store.push("u2", [_tx("c", "u2", amount="7")])

    state = controller.view_state
    assert [t.id for t in state.transactions] == ["c"]
    assert state.total_expenses == Decimal("7")
    assert all(t.owner_id == "u2" for t in state.transactions)


def test_records_of_other_owners_are_ignored() -> None:
    store = _ManualStore()
    controller, _store, _auth_provider = _controller(store=store)

    store.push("u1", [_tx("a", "u1"), _tx("x", "u2", amount="500")])

    state = controller.view_state
    assert [t.id for t in state.transactions] == ["a"]
    assert state.total_expenses == Decimal("10")


def test_stream_failure_keeps_data_and_sets_error() -> None:
    store = _ManualStore()
    controller, _store, _auth_provider = _controller(store=store)
    store.push("u1", [_tx("a", "u1")])

    store.fail("u1", StoreUnavailableError("backend down"))

    state = controller.view_state
    assert state.error == "Failed to load transactions: backend down"
    assert [t.id for t in state.transactions] == ["a"]
    assert state.is_loading is False
    assert controller.has_active_subscription is False

    controller.refresh()
    store.push("u1", [_tx("a", "u1"), _tx("b", "u1")])

    assert controller.view_state.error is None
    assert len(controller.view_state.transactions) == 2


def test_new_owner_starts_loading_until_first_snapshot() -> None:
    store = _ManualStore()
    controller, _store, _auth_provider = _controller(store=store)

    assert controller.view_state.is_loading is True

    store.push("u1", [])

    assert controller.view_state.is_loading is False


def test_add_without_owner_sets_error() -> None:
    controller, store, _auth_provider = _controller(owner=None)

    result = controller.add_transaction("5", "x", "Food", "expense")

    assert result is None
    assert controller.view_state.error == "Please log in to add transactions"


def test_add_with_invalid_amount_sets_error() -> None:
    controller, _store, _auth_provider = _controller()

    result = controller.add_transaction("abc", "x", "Food", "expense")

    assert result is None
    assert controller.view_state.error.startswith("Failed to add transaction")
    assert controller.view_state.transactions == ()


def test_refresh_without_owner_reports_error() -> None:
    controller, _store, _auth_provider = _controller(owner=None)

    controller.refresh()

    assert controller.view_state.error == "No user logged in"


def test_delete_unknown_transaction_is_not_an_error() -> None:
    controller, _store, _auth_provider = _controller()
    controller.add_transaction("10", "x", "Food", "expense")

    removed = controller.delete_transaction(_tx("missing", "u1"))

    assert removed == 0
    assert controller.view_state.error is None
    assert len(controller.view_state.transactions) == 1


def test_delete_removes_transaction() -> None:
    controller, _store, _auth_provider = _controller()
    stored = controller.add_transaction("10", "x", "Food", "expense")

    assert controller.delete_transaction(stored) == 1
    assert controller.view_state.transactions == ()
    assert controller.view_state.balance == Decimal("0")


def test_edit_unknown_transaction_sets_error() -> None:
    controller, _store, _auth_provider = _controller()

    ok = controller.edit_transaction(
        _tx("missing", "u1"),
        "1",
        "x",
        "Food",
        "expense",
    )

    assert ok is False
    assert controller.view_state.error.startswith(
        "Failed to edit transaction"
    )


def test_edit_target_follows_snapshot_and_clears_after_edit() -> None:
    controller, store, _auth_provider = _controller()
    stored = controller.add_transaction("10", "x", "Food", "expense")
    controller.set_transaction_to_edit(stored)

    store.update(replace(stored, description="changed elsewhere"))

    editing = controller.view_state.transaction_being_edited
    assert editing is not None
    assert editing.description == "changed elsewhere"

    controller.edit_transaction(editing, "12", "mine", "Food", "expense")

    assert controller.view_state.transaction_being_edited is None


def test_edit_target_dropped_when_transaction_deleted() -> None:
    controller, store, _auth_provider = _controller()
    stored = controller.add_transaction("10", "x", "Food", "expense")
    controller.set_transaction_to_edit(stored)

    store.delete(stored)

    assert controller.view_state.transaction_being_edited is None


def test_clear_error_and_export_csv() -> None:
    controller, _store, _auth_provider = _controller()
    controller.add_transaction("5.50", "Coffee, Tea", "Food", "expense")
    controller.add_transaction("abc", "bad", "Food", "expense")

    controller.clear_error()

    assert controller.view_state.error is None
    assert controller.export_csv() == (
        "Date,Description,Category,Type,Amount\n"
        '2024-01-01 09:00:00,"Coffee, Tea","Food",expense,5.5'
    )


def test_close_stops_following_owner() -> None:
    controller, _store, auth = _controller()

    controller.close()
    auth.current_owner.set(U2)

    assert controller.current_owner == U1
    assert controller.has_active_subscription is False
    assert auth.current_owner.subscriber_count == 0

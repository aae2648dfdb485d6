"""Tests for the expense donut's chart dependency guard."""

import sys
import types
from decimal import Decimal
from unittest.mock import MagicMock

from src.adapters.interface.streamlit import app
from src.domain.models.transactions import Transaction, TransactionKind


class _Notices:
    def __init__(self) -> None:
        self.info_messages: list[str] = []
        self.warnings: list[str] = []

    def info(self, message: str) -> None:
        self.info_messages.append(message)

    def warning(self, message: str) -> None:
        self.warnings.append(message)


def _expense(amount: str, category: str) -> Transaction:
    return Transaction(
        id=f"tx-{category}",
        amount=Decimal(amount),
        description="Groceries",
        category=category,
        kind=TransactionKind.EXPENSE,
        occurred_at="2024-03-05 08:30:00",
        owner_id="u1",
    )


def _install_chart_libs(monkeypatch, numpy, pandas) -> None:
    monkeypatch.setitem(sys.modules, "numpy", numpy)
    monkeypatch.setitem(sys.modules, "pandas", pandas)


def test_donut_dependencies_ok_when_numpy_and_pandas_usable(
    monkeypatch,
) -> None:
    _install_chart_libs(
        monkeypatch,
        types.SimpleNamespace(ndarray=object),
        types.SimpleNamespace(Timestamp=object),
    )

    assert app._check_altair_dependencies() == (True, None)


def test_donut_is_replaced_by_warning_when_numpy_is_broken(
    monkeypatch,
) -> None:
    """A half-imported numpy must not reach Altair."""
    _install_chart_libs(
        monkeypatch,
        types.SimpleNamespace(),
        types.SimpleNamespace(Timestamp=object),
    )
    notices = _Notices()
    altair = MagicMock()
    monkeypatch.setattr(app, "st", notices)
    monkeypatch.setattr(app, "alt", altair)

    app._render_expense_chart([_expense("12.5", "Food")], "$")

    assert len(notices.warnings) == 1
    assert "numpy" in notices.warnings[0]
    altair.Chart.assert_not_called()


def test_donut_warning_names_pandas_when_timestamp_missing(
    monkeypatch,
) -> None:
    _install_chart_libs(
        monkeypatch,
        types.SimpleNamespace(ndarray=object),
        types.SimpleNamespace(),
    )

    ok, message = app._check_altair_dependencies()

    assert ok is False
    assert "pandas" in message


def test_donut_without_expenses_skips_dependency_check(monkeypatch) -> None:
    notices = _Notices()
    check = MagicMock()
    monkeypatch.setattr(app, "st", notices)
    monkeypatch.setattr(app, "_check_altair_dependencies", check)

    app._render_expense_chart([], "€")

    assert notices.info_messages == ["No expenses to chart yet."]
    check.assert_not_called()

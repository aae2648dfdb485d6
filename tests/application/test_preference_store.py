"""Tests for the preference store."""

from unittest.mock import MagicMock

import pytest

from src.application.use_cases.preferences import (
    CURRENCY_KEY,
    DARK_THEME_KEY,
    PreferenceStore,
)
from src.domain.models.preferences import Preferences
from src.infrastructure.preference_storage import (
    InMemoryKeyValueStorage,
    JsonFileKeyValueStorage,
)


def test_defaults_when_storage_is_empty() -> None:
    store = PreferenceStore(InMemoryKeyValueStorage(), logger=MagicMock())

    assert store.snapshot() == Preferences(
        dark_theme=False,
        currency_code="USD",
    )
    assert store.currency_symbol() == "$"


def test_setters_persist_then_publish() -> None:
    storage = InMemoryKeyValueStorage()
    store = PreferenceStore(storage, logger=MagicMock())
    observed: list[str] = []
    store.currency_code.subscribe(observed.append)

    store.set_dark_theme(True)
    store.set_currency_code("BRL")

    assert storage.get_bool(DARK_THEME_KEY, False) is True
    assert storage.get_string(CURRENCY_KEY, "") == "BRL"
    assert observed == ["USD", "BRL"]
    assert store.currency_symbol() == "R$"


def test_unknown_currency_is_accepted_with_default_symbol() -> None:
    store = PreferenceStore(InMemoryKeyValueStorage(), logger=MagicMock())

    store.set_currency_code("XYZ")

    assert store.currency_code.value == "XYZ"
    assert store.currency_symbol() == "$"


def test_failed_write_leaves_live_value_unchanged() -> None:
    storage = MagicMock()
    storage.get_bool.return_value = False
    storage.get_string.return_value = "EUR"
    storage.put_string.side_effect = OSError("disk full")
    store = PreferenceStore(storage, logger=MagicMock())

    with pytest.raises(OSError):
        store.set_currency_code("GBP")

    assert store.currency_code.value == "EUR"


def test_values_survive_restart(tmp_path) -> None:
    path = tmp_path / "prefs.json"
    first = PreferenceStore(
        JsonFileKeyValueStorage(path, logger=MagicMock()),
        logger=MagicMock(),
    )
    first.set_dark_theme(True)
    first.set_currency_code("JPY")

    second = PreferenceStore(
        JsonFileKeyValueStorage(path, logger=MagicMock()),
        logger=MagicMock(),
    )

    assert second.snapshot() == Preferences(
        dark_theme=True,
        currency_code="JPY",
    )

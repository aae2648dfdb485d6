"""Preference store backed by a key-value storage port."""

import threading

from src.application.ports.preferences import KeyValueStoragePort
from src.application.streams import LiveValue
from src.domain.constants import DEFAULT_CURRENCY_CODE
from src.domain.models.preferences import Preferences
from src.domain.services.normalization import currency_symbol
from src.infrastructure.logging.logger import get_app_logger

DARK_THEME_KEY = "dark_theme"
CURRENCY_KEY = "currency"


class PreferenceStore:
    """Expose persisted preferences as live values.

    Writes go to storage first; the live value only changes once the write
    returned, so a failed write leaves the observed value untouched.
    """

    def __init__(self, storage: KeyValueStoragePort, logger=None) -> None:
        """Initialize the store from persisted values.

        Args:
            storage: Synchronous key-value storage.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._storage = storage
        self._logger = logger or get_app_logger()
        self._lock = threading.Lock()
        self._dark_theme: LiveValue[bool] = LiveValue(
            storage.get_bool(DARK_THEME_KEY, False)
        )
        self._currency_code: LiveValue[str] = LiveValue(
            storage.get_string(CURRENCY_KEY, DEFAULT_CURRENCY_CODE)
        )

    @property
    def dark_theme(self) -> LiveValue[bool]:
        return self._dark_theme

    @property
    def currency_code(self) -> LiveValue[str]:
        return self._currency_code

    def set_dark_theme(self, enabled: bool) -> None:
        with self._lock:
            self._storage.put_bool(DARK_THEME_KEY, bool(enabled))
            self._dark_theme.set(bool(enabled))
        self._logger.info(f"Dark theme set to {bool(enabled)}")

    def set_currency_code(self, code: str) -> None:
        """Persist the currency code.

        Any string is accepted; unknown codes render with the default
        symbol.
        """
        with self._lock:
            self._storage.put_string(CURRENCY_KEY, code)
            self._currency_code.set(code)
        self._logger.info(f"Currency set to {code}")

    def currency_symbol(self) -> str:
        """Return the symbol of the selected currency."""
        return currency_symbol(self._currency_code.value)

    def snapshot(self) -> Preferences:
        return Preferences(
            dark_theme=self._dark_theme.value,
            currency_code=self._currency_code.value,
        )


__all__ = ["PreferenceStore", "DARK_THEME_KEY", "CURRENCY_KEY"]

"""Port for flat key-value preference persistence."""

from typing import Protocol


class KeyValueStoragePort(Protocol):
    """Synchronous string/boolean key-value storage."""

    def get_bool(self, key: str, default: bool) -> bool:
        """Return the stored boolean, or ``default`` when absent."""

    def get_string(self, key: str, default: str) -> str:
        """Return the stored string, or ``default`` when absent."""

    def put_bool(self, key: str, value: bool) -> None:
        """Persist a boolean value."""

    def put_string(self, key: str, value: str) -> None:
        """Persist a string value."""


__all__ = ["KeyValueStoragePort"]

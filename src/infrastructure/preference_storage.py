"""Key-value storage adapters for local preferences."""

import json
import threading
from pathlib import Path
from typing import Any

from src.application.ports.preferences import KeyValueStoragePort
from src.infrastructure.logging.logger import get_app_logger


class InMemoryKeyValueStorage(KeyValueStoragePort):
    """Key-value storage living only for the current process."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._values: dict[str, Any] = dict(initial or {})

    def get_bool(self, key: str, default: bool) -> bool:
        value = self._values.get(key)
        return value if isinstance(value, bool) else default

    def get_string(self, key: str, default: str) -> str:
        value = self._values.get(key)
        return value if isinstance(value, str) else default

    def put_bool(self, key: str, value: bool) -> None:
        self._values[key] = bool(value)

    def put_string(self, key: str, value: str) -> None:
        self._values[key] = value


class JsonFileKeyValueStorage(KeyValueStoragePort):
    """Key-value storage persisted to a JSON file.

    Every write rewrites the whole file before returning, so values survive
    restarts as soon as ``put_*`` completes.
    """

    def __init__(self, path: Path, logger=None) -> None:
        """Initialize the storage.

        Args:
            path: JSON file location; created on first write.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._path = Path(path)
        self._logger = logger or get_app_logger()
        self._lock = threading.Lock()
        self._values = self._load()

    @property
    def path(self) -> Path:
        return self._path

    def get_bool(self, key: str, default: bool) -> bool:
        value = self._values.get(key)
        return value if isinstance(value, bool) else default

    def get_string(self, key: str, default: str) -> str:
        value = self._values.get(key)
        return value if isinstance(value, str) else default

    def put_bool(self, key: str, value: bool) -> None:
        self._write(key, bool(value))

    def put_string(self, key: str, value: str) -> None:
        self._write(key, value)

    def _load(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            self._logger.warning(
                f"Ignoring unreadable preferences file {self._path}: {exc}"
            )
            return {}
        if not isinstance(data, dict):
            self._logger.warning(
                f"Ignoring preferences file {self._path}: expected an object"
            )
            return {}
        return data

    def _write(self, key: str, value: Any) -> None:
        with self._lock:
            self._values[key] = value
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
            tmp_path.write_text(
                json.dumps(self._values, indent=2, sort_keys=True),
                encoding="utf-8",
            )
            tmp_path.replace(self._path)


__all__ = ["InMemoryKeyValueStorage", "JsonFileKeyValueStorage"]

"""Settings helpers for infrastructure adapters."""

from dataclasses import dataclass
import os
from pathlib import Path

import dotenv

from src.infrastructure.logging.logger import get_app_logger
from src.utils.utils import get_project_root


SUPPORTED_BACKENDS = ("sqlalchemy", "memory")


@dataclass(frozen=True)
class FinanceSettings:
    """Settings for selecting and configuring the finance backends.

    Attributes:
        store_backend: Transaction store backend (sqlalchemy or memory).
        auth_backend: Identity backend (sqlalchemy or memory).
        database_url: SQLAlchemy URL for the finance database.
        preferences_file: JSON file holding local preferences.
        export_dir: Directory receiving CSV exports.
    """

    store_backend: str = "sqlalchemy"
    auth_backend: str = "sqlalchemy"
    database_url: str | None = None
    preferences_file: Path | None = None
    export_dir: Path | None = None

    @classmethod
    def from_env(cls) -> "FinanceSettings":
        """Build settings from environment variables.

        Returns:
            FinanceSettings: Settings sourced from environment variables.
        """
        dotenv.load_dotenv()
        logger = get_app_logger()
        store_backend = cls._read_backend("FINANCE_STORE_BACKEND", logger)
        auth_backend = cls._read_backend("FINANCE_AUTH_BACKEND", logger)
        database_url = os.getenv("FINANCE_DB_URL") or cls._default_db_url()
        preferences_file = cls._normalize_path(
            os.getenv("FINANCE_PREFERENCES_FILE"),
            default=get_project_root() / "data" / "preferences.json",
        )
        export_dir = cls._normalize_path(
            os.getenv("FINANCE_EXPORT_DIR"),
            default=get_project_root() / "exports",
        )
        return cls(
            store_backend=store_backend,
            auth_backend=auth_backend,
            database_url=database_url,
            preferences_file=preferences_file,
            export_dir=export_dir,
        )

    @staticmethod
    def _read_backend(name: str, logger) -> str:
        """Read a backend selector, falling back to sqlalchemy.

        Args:
            name: Environment variable name.
            logger: Logger used for warnings.

        Returns:
            str: Normalized backend identifier.
        """
        backend = os.getenv(name, "sqlalchemy").strip().lower()
        if backend not in SUPPORTED_BACKENDS:
            logger.warning(
                f"Unsupported {name}={backend}; falling back to sqlalchemy"
            )
            return "sqlalchemy"
        return backend

    @staticmethod
    def _default_db_url() -> str:
        """Return the default SQLite database URL under data/."""
        data_dir = get_project_root() / "data"
        return f"sqlite:///{data_dir / 'finance.db'}"

    @staticmethod
    def _normalize_path(raw_path: str | None, default: Path) -> Path:
        """Resolve a user-provided path or fall back to the default.

        Args:
            raw_path: Raw path string from the environment.
            default: Path used when nothing is configured.

        Returns:
            Path: Absolute path.
        """
        if not raw_path:
            return default
        return Path(raw_path).expanduser().resolve()


__all__ = ["FinanceSettings", "SUPPORTED_BACKENDS"]

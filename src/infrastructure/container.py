"""Composition root for wiring infrastructure adapters."""

from src.application.ports.auth_provider import (
    AuthProviderPort,
    IdentityBackendPort,
)
from src.application.ports.database import DatabaseEnginePort
from src.application.ports.transaction_store import TransactionStorePort
from src.application.use_cases.auth_session_controller import (
    AuthSessionController,
)
from src.application.use_cases.auth_state_provider import SessionAuthProvider
from src.application.use_cases.export_transactions import (
    ExportTransactionsUseCase,
)
from src.application.use_cases.finance_sync import FinanceSyncController
from src.application.use_cases.preferences import PreferenceStore
from src.infrastructure.db import SqlAlchemyDatabaseEngineAdapter
from src.infrastructure.logging.logger import get_app_logger
from src.infrastructure.memory_identity_backend import InMemoryIdentityBackend
from src.infrastructure.preference_storage import JsonFileKeyValueStorage
from src.infrastructure.settings import FinanceSettings
from src.infrastructure.sql_identity_backend import SqlAlchemyIdentityBackend
from src.infrastructure.transaction_store_factory import (
    create_transaction_store,
)


def build_database_adapter() -> DatabaseEnginePort:
    """Return the database adapter instance."""
    return SqlAlchemyDatabaseEngineAdapter()


def build_transaction_store(
    db_port: DatabaseEnginePort | None = None,
    settings: FinanceSettings | None = None,
) -> TransactionStorePort:
    """Return the configured transaction store."""
    resolved_db = db_port or build_database_adapter()
    resolved_settings = settings or FinanceSettings.from_env()
    return create_transaction_store(
        resolved_db,
        logger=get_app_logger(),
        settings=resolved_settings,
    )


def build_identity_backend(
    db_port: DatabaseEnginePort | None = None,
    settings: FinanceSettings | None = None,
) -> IdentityBackendPort:
    """Return the configured identity backend."""
    resolved_settings = settings or FinanceSettings.from_env()
    if resolved_settings.auth_backend == "memory":
        get_app_logger().warning(
            "Using the in-memory identity backend; accounts are not persisted"
        )
        return InMemoryIdentityBackend()
    resolved_db = db_port or build_database_adapter()
    return SqlAlchemyIdentityBackend(resolved_db, logger=get_app_logger())


def build_auth_provider(
    identity_backend: IdentityBackendPort | None = None,
) -> AuthProviderPort:
    """Return the auth state provider over the identity backend."""
    return SessionAuthProvider(identity_backend or build_identity_backend())


def build_preference_store(
    settings: FinanceSettings | None = None,
) -> PreferenceStore:
    """Return the preference store persisted to the configured JSON file."""
    resolved_settings = settings or FinanceSettings.from_env()
    if resolved_settings.preferences_file is None:
        raise RuntimeError("Preferences require a FINANCE_PREFERENCES_FILE.")
    storage = JsonFileKeyValueStorage(
        resolved_settings.preferences_file,
        logger=get_app_logger(),
    )
    return PreferenceStore(storage)


def build_finance_controller(
    transaction_store: TransactionStorePort,
    auth_provider: AuthProviderPort,
) -> FinanceSyncController:
    """Return a controller following the provider's owner."""
    return FinanceSyncController(
        transaction_store,
        auth_provider,
        logger=get_app_logger(),
    )


def build_auth_controller(
    auth_provider: AuthProviderPort,
) -> AuthSessionController:
    """Return the auth session controller for the provider."""
    return AuthSessionController(auth_provider, logger=get_app_logger())


def build_export_use_case(
    transaction_store: TransactionStorePort,
    settings: FinanceSettings | None = None,
) -> ExportTransactionsUseCase:
    """Return the CSV export use case writing to the export directory."""
    resolved_settings = settings or FinanceSettings.from_env()
    if resolved_settings.export_dir is None:
        raise RuntimeError("Export requires a FINANCE_EXPORT_DIR value.")
    return ExportTransactionsUseCase(
        transaction_store,
        resolved_settings.export_dir,
        logger=get_app_logger(),
    )


__all__ = [
    "build_database_adapter",
    "build_transaction_store",
    "build_identity_backend",
    "build_auth_provider",
    "build_preference_store",
    "build_finance_controller",
    "build_auth_controller",
    "build_export_use_case",
]

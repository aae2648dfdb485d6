"""Application use cases package."""

from .auth_session_controller import AuthSessionController
from .auth_state_provider import SessionAuthProvider
from .export_transactions import (
    ExportResult,
    ExportTransactionsUseCase,
    export_transactions_csv_file,
)
from .finance_sync import FinanceSyncController
from .preferences import PreferenceStore

__all__ = [
    "AuthSessionController",
    "SessionAuthProvider",
    "ExportResult",
    "ExportTransactionsUseCase",
    "export_transactions_csv_file",
    "FinanceSyncController",
    "PreferenceStore",
]

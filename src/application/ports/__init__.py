"""Application ports package."""

from .auth_provider import AuthProviderPort, AuthResult, IdentityBackendPort
from .database import DatabaseEnginePort
from .preferences import KeyValueStoragePort
from .transaction_store import TransactionStorePort

__all__ = [
    "AuthProviderPort",
    "AuthResult",
    "IdentityBackendPort",
    "DatabaseEnginePort",
    "KeyValueStoragePort",
    "TransactionStorePort",
]

"""In-memory identity backend for demos and tests."""

import threading
from dataclasses import dataclass, replace
from uuid import uuid4

from src.application.errors import AuthenticationError, ProfileUpdateError
from src.application.ports.auth_provider import IdentityBackendPort
from src.application.streams import LiveValue
from src.domain.models.owner import Owner
from src.domain.services.normalization import normalize_email
from src.domain.services.validation import validate_credentials
from src.infrastructure.passwords import hash_password, verify_password


@dataclass
class _Account:
    owner: Owner
    password_hash: str
    salt: str


class InMemoryIdentityBackend(IdentityBackendPort):
    """Identity backend keeping accounts in a process-local dict."""

    def __init__(self) -> None:
        self._accounts: dict[str, _Account] = {}
        self._session: LiveValue[Owner | None] = LiveValue(None)
        self._lock = threading.Lock()

    @property
    def session(self) -> LiveValue[Owner | None]:
        return self._session

    def authenticate(self, email: str, password: str) -> Owner:
        key = normalize_email(email)
        with self._lock:
            account = self._accounts.get(key)
        if account is None or not verify_password(
            password or "",
            account.password_hash,
            account.salt,
        ):
            raise AuthenticationError("Invalid email or password")
        self._session.set(account.owner)
        return account.owner

    def create_identity(self, email: str, password: str) -> Owner:
        key = normalize_email(email)
        try:
            validate_credentials(key, password)
        except ValueError as exc:
            raise AuthenticationError(str(exc)) from exc
        password_hash, salt = hash_password(password)
        owner = Owner(id=uuid4().hex, email=key)
        with self._lock:
            if key in self._accounts:
                raise AuthenticationError(
                    "An account already exists for this email"
                )
            self._accounts[key] = _Account(owner, password_hash, salt)
        self._session.set(owner)
        return owner

    def update_display_name(self, owner_id: str, display_name: str) -> Owner:
        with self._lock:
            account = next(
                (a for a in self._accounts.values() if a.owner.id == owner_id),
                None,
            )
            if account is None:
                raise ProfileUpdateError(f"Unknown identity: {owner_id}")
            account.owner = replace(account.owner, display_name=display_name)
            updated = account.owner
        current = self._session.value
        if current is not None and current.id == owner_id:
            self._session.set(updated)
        return updated

    def end_session(self) -> None:
        self._session.set(None)

    def revoke_session(self) -> None:
        """Drop the session as if it expired or was revoked remotely."""
        self._session.set(None)


__all__ = ["InMemoryIdentityBackend"]

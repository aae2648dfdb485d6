"""Application ports for authentication and identity management."""

from dataclasses import dataclass
from typing import Protocol

from src.application.streams import LiveValue, Observable
from src.domain.models.owner import Owner


@dataclass(frozen=True)
class AuthResult:
    """Outcome of a sign-in or sign-up attempt.

    Attributes:
        owner: Authenticated owner on success. On a partial sign-up failure
            it holds the identity that was created but not fully set up.
        error: Human-readable failure reason, None on success.
        partial: True when the identity exists but a later step failed.
    """

    owner: Owner | None = None
    error: str | None = None
    partial: bool = False

    @property
    def ok(self) -> bool:
        """Return True when the attempt succeeded."""
        return self.error is None and self.owner is not None

    @classmethod
    def success(cls, owner: Owner) -> "AuthResult":
        return cls(owner=owner)

    @classmethod
    def failure(
        cls,
        reason: str,
        owner: Owner | None = None,
        partial: bool = False,
    ) -> "AuthResult":
        return cls(owner=owner, error=reason, partial=partial)


class IdentityBackendPort(Protocol):
    """Port for the identity service that owns credentials and sessions."""

    @property
    def session(self) -> Observable[Owner | None]:
        """Live stream of the backend session owner, pushed on every change."""

    def authenticate(self, email: str, password: str) -> Owner:
        """Verify credentials and open a session.

        Raises:
            AuthenticationError: If the credentials are rejected.
            StoreUnavailableError: If the backend cannot be reached.
        """

    def create_identity(self, email: str, password: str) -> Owner:
        """Create an identity and open a session for it.

        Raises:
            AuthenticationError: If the identity cannot be created.
        """

    def update_display_name(self, owner_id: str, display_name: str) -> Owner:
        """Set the display name of an existing identity.

        Raises:
            ProfileUpdateError: If the profile cannot be updated.
        """

    def end_session(self) -> None:
        """Close the current session."""


class AuthProviderPort(Protocol):
    """Port exposing the signed-in owner and credential operations."""

    @property
    def current_owner(self) -> LiveValue[Owner | None]:
        """Live value of the signed-in owner, None when signed out."""

    def sign_in(self, email: str, password: str) -> AuthResult:
        """Sign in with email and password; never raises."""

    def sign_up(
        self,
        email: str,
        password: str,
        display_name: str,
    ) -> AuthResult:
        """Create an identity and set its display name; never raises."""

    def sign_out(self) -> None:
        """End the session; current_owner becomes None."""

    def current_owner_id(self) -> str | None:
        """Return the signed-in owner id, if any."""

    def close(self) -> None:
        """Stop mirroring the backend session."""


__all__ = ["AuthResult", "IdentityBackendPort", "AuthProviderPort"]

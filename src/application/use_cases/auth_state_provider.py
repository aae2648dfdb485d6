"""Auth state provider exposing the signed-in owner as a live value."""

from src.application.ports.auth_provider import (
    AuthProviderPort,
    AuthResult,
    IdentityBackendPort,
)
from src.application.streams import LiveValue
from src.domain.models.owner import Owner
from src.infrastructure.logging.logger import get_app_logger, get_usage_logger


class SessionAuthProvider(AuthProviderPort):
    """Auth provider mirroring the identity backend's session.

    ``current_owner`` follows the backend's pushed session, so expiry or
    revocation on the backend side reaches consumers without polling.
    Credential operations return ``AuthResult`` values and never raise.
    """

    def __init__(
        self,
        identity_backend: IdentityBackendPort,
        logger=None,
        usage_logger=None,
    ) -> None:
        """Initialize the provider.

        Args:
            identity_backend: Backend owning credentials and sessions.
            logger: Optional logger compatible with logging.Logger-like API.
            usage_logger: Optional logger recording user actions.
        """
        self._backend = identity_backend
        self._logger = logger or get_app_logger()
        self._usage_logger = usage_logger or get_usage_logger()
        self._current_owner: LiveValue[Owner | None] = LiveValue(None)
        self._session_subscription = identity_backend.session.subscribe(
            self._on_session_changed,
            self._on_session_failed,
        )

    @property
    def current_owner(self) -> LiveValue[Owner | None]:
        return self._current_owner

    def current_owner_id(self) -> str | None:
        owner = self._current_owner.value
        return owner.id if owner is not None else None

    def is_signed_in(self) -> bool:
        """Return True when an owner is signed in."""
        return self._current_owner.value is not None

    def sign_in(self, email: str, password: str) -> AuthResult:
        """Sign in with email and password.

        Returns:
            AuthResult: Success with the owner, or failure with a reason.
        """
        try:
            owner = self._backend.authenticate(email, password)
        except Exception as exc:
            self._logger.warning(f"Sign in failed for {email}: {exc}")
            return AuthResult.failure(str(exc) or "Login failed")
        self._publish(owner)
        self._usage_logger.info(f"Owner {owner.id} signed in")
        return AuthResult.success(owner)

    def sign_up(
        self,
        email: str,
        password: str,
        display_name: str,
    ) -> AuthResult:
        """Create an identity, then set its display name.

        When the second step fails the identity is kept as created and the
        result is a failure flagged ``partial`` that still carries the owner.

        Returns:
            AuthResult: Outcome of the two-step registration.
        """
        try:
            owner = self._backend.create_identity(email, password)
        except Exception as exc:
            self._logger.warning(f"Sign up failed for {email}: {exc}")
            return AuthResult.failure(str(exc) or "Registration failed")

        try:
            owner = self._backend.update_display_name(owner.id, display_name)
        except Exception as exc:
            self._logger.error(
                f"Identity {owner.id} created but display name update "
                f"failed: {exc}"
            )
            return AuthResult.failure(
                f"Account created but profile update failed: {exc}",
                owner=owner,
                partial=True,
            )

        self._publish(owner)
        self._usage_logger.info(f"Owner {owner.id} signed up")
        return AuthResult.success(owner)

    def sign_out(self) -> None:
        """End the session; ``current_owner`` becomes None."""
        owner_id = self.current_owner_id()
        try:
            self._backend.end_session()
        finally:
            self._publish(None)
        if owner_id is not None:
            self._usage_logger.info(f"Owner {owner_id} signed out")

    def close(self) -> None:
        """Stop mirroring the backend session."""
        self._session_subscription.cancel()

    def _publish(self, owner: Owner | None) -> None:
        if owner != self._current_owner.value:
            self._current_owner.set(owner)

    def _on_session_changed(self, owner: Owner | None) -> None:
        if owner != self._current_owner.value:
            self._logger.info(
                f"Session changed: owner={owner.id if owner else None}"
            )
        self._publish(owner)

    def _on_session_failed(self, exc: Exception) -> None:
        self._logger.error(f"Session stream failed: {exc}")
        self._publish(None)


__all__ = ["SessionAuthProvider"]

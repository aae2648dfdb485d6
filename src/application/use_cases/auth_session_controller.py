"""Controller exposing authentication state to presentation layers."""

import threading
from dataclasses import replace

from src.application.ports.auth_provider import AuthProviderPort, AuthResult
from src.application.streams import LiveValue
from src.domain.models.owner import Owner
from src.domain.models.view_state import AuthViewState
from src.infrastructure.logging.logger import get_app_logger


class AuthSessionController:
    """Publish an ``AuthViewState`` mirroring the provider's owner."""

    def __init__(self, auth_provider: AuthProviderPort, logger=None) -> None:
        """Initialize the controller.

        Args:
            auth_provider: Provider of the signed-in owner.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._auth = auth_provider
        self._logger = logger or get_app_logger()
        self._lock = threading.RLock()
        self._state: LiveValue[AuthViewState] = LiveValue(AuthViewState())
        self._owner_subscription = auth_provider.current_owner.subscribe(
            self._on_owner_changed
        )

    @property
    def state(self) -> LiveValue[AuthViewState]:
        return self._state

    @property
    def view_state(self) -> AuthViewState:
        return self._state.value

    def sign_in(self, email: str, password: str) -> AuthResult:
        """Sign in and publish the outcome."""
        self._start_loading()
        result = self._auth.sign_in(email, password)
        self._finish(result)
        return result

    def sign_up(
        self,
        email: str,
        password: str,
        display_name: str,
    ) -> AuthResult:
        """Register a new owner and publish the outcome.

        A partial registration publishes the error while the created owner,
        already signed in by the backend, stays visible.
        """
        self._start_loading()
        result = self._auth.sign_up(email, password, display_name)
        self._finish(result)
        return result

    def sign_out(self) -> None:
        self._auth.sign_out()
        with self._lock:
            self._state.set(AuthViewState())

    def clear_error(self) -> None:
        with self._lock:
            self._state.update(lambda state: replace(state, error=None))

    def close(self) -> None:
        self._owner_subscription.cancel()

    def _start_loading(self) -> None:
        with self._lock:
            self._state.update(
                lambda state: replace(state, is_loading=True, error=None)
            )

    def _finish(self, result: AuthResult) -> None:
        with self._lock:
            if result.ok:
                self._state.set(
                    AuthViewState(
                        user=result.owner,
                        is_logged_in=True,
                    )
                )
                return
            self._logger.warning(f"Authentication failed: {result.error}")
            self._state.update(
                lambda state: replace(
                    state,
                    is_loading=False,
                    error=result.error,
                )
            )

    def _on_owner_changed(self, owner: Owner | None) -> None:
        with self._lock:
            self._state.update(
                lambda state: replace(
                    state,
                    user=owner,
                    is_logged_in=owner is not None,
                )
            )


__all__ = ["AuthSessionController"]

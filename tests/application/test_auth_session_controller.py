"""Tests for the auth session controller."""

from unittest.mock import MagicMock

from src.application.use_cases.auth_session_controller import (
    AuthSessionController,
)
from src.application.use_cases.auth_state_provider import SessionAuthProvider
from src.domain.models.view_state import AuthViewState
from src.infrastructure.memory_identity_backend import InMemoryIdentityBackend


def _controller():
    backend = InMemoryIdentityBackend()
    provider = SessionAuthProvider(
        backend,
        logger=MagicMock(),
        usage_logger=MagicMock(),
    )
    return AuthSessionController(provider, logger=MagicMock()), backend


def test_sign_up_publishes_logged_in_user() -> None:
    controller, _backend = _controller()
    states: list[AuthViewState] = []
    controller.state.subscribe(states.append)

    result = controller.sign_up("amy@example.com", "secret1", "Amy")

    assert result.ok
    state = controller.view_state
    assert state.is_logged_in is True
    assert state.user.display_name == "Amy"
    assert state.is_loading is False
    assert any(s.is_loading for s in states)


def test_failed_sign_in_publishes_error() -> None:
    controller, _backend = _controller()

    result = controller.sign_in("nobody@example.com", "secret1")

    assert not result.ok
    state = controller.view_state
    assert state.error == "Invalid email or password"
    assert state.is_logged_in is False
    assert state.is_loading is False

    controller.clear_error()

    assert controller.view_state.error is None


def test_sign_out_clears_user_and_error() -> None:
    controller, _backend = _controller()
    controller.sign_up("amy@example.com", "secret1", "Amy")

    controller.sign_out()

    assert controller.view_state == AuthViewState()


def test_backend_revocation_logs_user_out() -> None:
    controller, backend = _controller()
    controller.sign_up("amy@example.com", "secret1", "Amy")

    backend.revoke_session()

    assert controller.view_state.is_logged_in is False
    assert controller.view_state.user is None

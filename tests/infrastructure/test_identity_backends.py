"""Tests for the identity backends."""

from unittest.mock import MagicMock

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from src.application.errors import AuthenticationError, ProfileUpdateError
from src.infrastructure.db import SqlAlchemyDatabaseEngineAdapter
from src.infrastructure.memory_identity_backend import InMemoryIdentityBackend
from src.infrastructure.passwords import hash_password, verify_password
from src.infrastructure.sql_identity_backend import SqlAlchemyIdentityBackend


@pytest.fixture(params=["memory", "sqlalchemy"])
def backend(request):
    if request.param == "memory":
        return InMemoryIdentityBackend()
    engine = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
        future=True,
    )
    return SqlAlchemyIdentityBackend(
        SqlAlchemyDatabaseEngineAdapter(engine),
        logger=MagicMock(),
    )


def test_create_identity_opens_session(backend) -> None:
    sessions: list = []
    backend.session.subscribe(sessions.append)

    owner = backend.create_identity(" New@Example.com ", "secret1")

    assert owner.email == "new@example.com"
    assert sessions == [None, owner]


def test_authenticate_checks_password(backend) -> None:
    owner = backend.create_identity("a@example.com", "secret1")
    backend.end_session()

    assert backend.authenticate("A@example.com", "secret1") == owner
    with pytest.raises(AuthenticationError):
        backend.authenticate("a@example.com", "nope-nope")
    with pytest.raises(AuthenticationError):
        backend.authenticate("missing@example.com", "secret1")


def test_create_identity_validates_and_rejects_duplicates(backend) -> None:
    backend.create_identity("a@example.com", "secret1")

    with pytest.raises(AuthenticationError):
        backend.create_identity("a@example.com", "secret2")
    with pytest.raises(AuthenticationError):
        backend.create_identity("b@example.com", "123")
    with pytest.raises(AuthenticationError):
        backend.create_identity("not-an-email", "secret1")


def test_update_display_name_refreshes_session(backend) -> None:
    owner = backend.create_identity("a@example.com", "secret1")

    updated = backend.update_display_name(owner.id, "Alice")

    assert updated.display_name == "Alice"
    assert backend.session.value == updated


def test_update_display_name_of_unknown_identity_fails(backend) -> None:
    with pytest.raises(ProfileUpdateError):
        backend.update_display_name("ghost", "Nobody")


def test_revoke_session_clears_owner(backend) -> None:
    backend.create_identity("a@example.com", "secret1")

    backend.revoke_session()

    assert backend.session.value is None


def test_password_hash_round_trip_uses_salt() -> None:
    digest, salt = hash_password("secret1")
    other_digest, other_salt = hash_password("secret1")

    assert verify_password("secret1", digest, salt)
    assert not verify_password("secret2", digest, salt)
    assert salt != other_salt
    assert digest != other_digest

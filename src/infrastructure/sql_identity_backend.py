"""SQLAlchemy-backed identity backend with local password hashes."""

from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from src.application.errors import (
    AuthenticationError,
    ProfileUpdateError,
    StoreUnavailableError,
)
from src.application.ports.auth_provider import IdentityBackendPort
from src.application.ports.database import DatabaseEnginePort
from src.application.streams import LiveValue
from src.domain.models.owner import Owner
from src.domain.services.normalization import normalize_email
from src.domain.services.validation import validate_credentials
from src.infrastructure.logging.logger import get_app_logger
from src.infrastructure.passwords import hash_password, verify_password


CREATE_IDENTITIES_SQL = """
CREATE TABLE IF NOT EXISTS identities (
    id TEXT PRIMARY KEY,
    email TEXT NOT NULL UNIQUE,
    display_name TEXT,
    password_hash TEXT NOT NULL,
    salt TEXT NOT NULL,
    created_at TEXT
)
"""

SELECT_IDENTITY_BY_EMAIL_SQL = text(
    """
    SELECT id, email, display_name, password_hash, salt
    FROM identities
    WHERE email = :email
    """
)

INSERT_IDENTITY_SQL = text(
    """
    INSERT INTO identities (
        id, email, display_name, password_hash, salt, created_at
    )
    VALUES (
        :id, :email, :display_name, :password_hash, :salt, :created_at
    )
    """
)

UPDATE_DISPLAY_NAME_SQL = text(
    """
    UPDATE identities
    SET display_name = :display_name
    WHERE id = :id
    """
)

SELECT_IDENTITY_BY_ID_SQL = text(
    "SELECT id, email, display_name FROM identities WHERE id = :id"
)


class SqlAlchemyIdentityBackend(IdentityBackendPort):
    """Identity backend storing accounts in an ``identities`` table.

    The session itself is process-local: it lives in a ``LiveValue`` that
    is pushed to the auth provider on every change.
    """

    def __init__(self, db_port: DatabaseEnginePort, logger=None) -> None:
        """Initialize the backend.

        Args:
            db_port: Port providing access to the finance engine.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._db_port = db_port
        self._logger = logger or get_app_logger()
        self._session: LiveValue[Owner | None] = LiveValue(None)
        self._schema_ready = False

    @property
    def session(self) -> LiveValue[Owner | None]:
        return self._session

    def prepare_schema(self) -> None:
        """Create the identities table if it does not exist."""
        engine = self._db_port.get_finance_engine()
        try:
            with engine.begin() as conn:
                conn.exec_driver_sql(CREATE_IDENTITIES_SQL)
        except SQLAlchemyError as exc:
            raise StoreUnavailableError(
                f"Could not prepare identities table: {exc}"
            ) from exc
        self._schema_ready = True

    def authenticate(self, email: str, password: str) -> Owner:
        self._ensure_schema()
        key = normalize_email(email)
        engine = self._db_port.get_finance_engine()
        try:
            with engine.connect() as conn:
                row = conn.execute(
                    SELECT_IDENTITY_BY_EMAIL_SQL,
                    {"email": key},
                ).first()
        except SQLAlchemyError as exc:
            raise StoreUnavailableError(
                f"Identity backend unreachable: {exc}"
            ) from exc
        if row is None or not verify_password(
            password or "",
            row.password_hash,
            row.salt,
        ):
            raise AuthenticationError("Invalid email or password")
        owner = Owner(
            id=row.id,
            email=row.email,
            display_name=row.display_name or "",
        )
        self._session.set(owner)
        return owner

    def create_identity(self, email: str, password: str) -> Owner:
        self._ensure_schema()
        key = normalize_email(email)
        try:
            validate_credentials(key, password)
        except ValueError as exc:
            raise AuthenticationError(str(exc)) from exc
        password_hash, salt = hash_password(password)
        owner = Owner(id=uuid4().hex, email=key)
        engine = self._db_port.get_finance_engine()
        try:
            with engine.begin() as conn:
                conn.execute(
                    INSERT_IDENTITY_SQL,
                    {
                        "id": owner.id,
                        "email": owner.email,
                        "display_name": "",
                        "password_hash": password_hash,
                        "salt": salt,
                        "created_at": datetime.now(timezone.utc).isoformat(),
                    },
                )
        except IntegrityError as exc:
            raise AuthenticationError(
                "An account already exists for this email"
            ) from exc
        except SQLAlchemyError as exc:
            raise StoreUnavailableError(
                f"Identity backend unreachable: {exc}"
            ) from exc
        self._logger.info(f"Created identity {owner.id}")
        self._session.set(owner)
        return owner

    def update_display_name(self, owner_id: str, display_name: str) -> Owner:
        self._ensure_schema()
        engine = self._db_port.get_finance_engine()
        try:
            with engine.begin() as conn:
                conn.execute(
                    UPDATE_DISPLAY_NAME_SQL,
                    {"id": owner_id, "display_name": display_name},
                )
                row = conn.execute(
                    SELECT_IDENTITY_BY_ID_SQL,
                    {"id": owner_id},
                ).first()
        except SQLAlchemyError as exc:
            raise ProfileUpdateError(
                f"Could not update display name: {exc}"
            ) from exc
        if row is None:
            raise ProfileUpdateError(f"Unknown identity: {owner_id}")
        owner = Owner(
            id=row.id,
            email=row.email,
            display_name=row.display_name or "",
        )
        current = self._session.value
        if current is not None and current.id == owner_id:
            self._session.set(owner)
        return owner

    def end_session(self) -> None:
        self._session.set(None)

    def revoke_session(self) -> None:
        """Drop the session as if it expired or was revoked remotely."""
        self._logger.warning("Session revoked")
        self._session.set(None)

    def _ensure_schema(self) -> None:
        if not self._schema_ready:
            self.prepare_schema()


__all__ = ["SqlAlchemyIdentityBackend", "CREATE_IDENTITIES_SQL"]

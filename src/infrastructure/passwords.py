"""Password hashing for the local identity backends."""

import secrets

from cryptography.exceptions import InvalidKey
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC


PBKDF2_ITERATIONS = 200_000


def _kdf(salt: str) -> PBKDF2HMAC:
    return PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=32,
        salt=bytes.fromhex(salt),
        iterations=PBKDF2_ITERATIONS,
    )


def hash_password(password: str, salt: str | None = None) -> tuple[str, str]:
    """Hash a password with PBKDF2-SHA256.

    Args:
        password: Plain-text password.
        salt: Optional hex salt; a random one is generated when omitted.

    Returns:
        tuple[str, str]: Hex digest and hex salt.
    """
    resolved_salt = salt or secrets.token_hex(16)
    digest = _kdf(resolved_salt).derive(password.encode("utf-8"))
    return digest.hex(), resolved_salt


def verify_password(password: str, expected_hash: str, salt: str) -> bool:
    """Return True when the password matches the stored hash."""
    try:
        _kdf(salt).verify(
            password.encode("utf-8"),
            bytes.fromhex(expected_hash),
        )
    except InvalidKey:
        return False
    return True


__all__ = ["PBKDF2_ITERATIONS", "hash_password", "verify_password"]

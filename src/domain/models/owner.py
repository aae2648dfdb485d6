"""Domain model for the authenticated owner."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Owner:
    """Authenticated identity to which transactions are scoped."""

    id: str
    email: str
    display_name: str = ""


__all__ = ["Owner"]

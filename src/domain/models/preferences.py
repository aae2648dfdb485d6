"""Domain models for local user preferences and categories."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Preferences:
    """User-chosen settings, independent of the signed-in owner."""

    dark_theme: bool = False
    currency_code: str = "USD"


@dataclass(frozen=True)
class Category:
    """Transaction category with its display attributes."""

    name: str
    color: str
    icon: str


__all__ = ["Preferences", "Category"]

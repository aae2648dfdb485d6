"""Domain constants for the finance tracker."""

from src.domain.models.preferences import Category

DEFAULT_CURRENCY_CODE = "USD"
DEFAULT_CURRENCY_SYMBOL = "$"

CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "BRL": "R$",
    "GBP": "£",
    "JPY": "¥",
    "CAD": "C$",
    "AUD": "A$",
    "CHF": "CHF",
    "CNY": "¥",
    "INR": "₹",
    "KRW": "₩",
}

OTHER_CATEGORY = "Other"

DEFAULT_CATEGORIES = (
    Category(name="Food", color="#FF6B6B", icon="🍽️"),
    Category(name="Transport", color="#4ECDC4", icon="🚗"),
    Category(name="Housing", color="#45B7D1", icon="🏠"),
    Category(name="Entertainment", color="#96CEB4", icon="🎬"),
    Category(name="Healthcare", color="#FFEAA7", icon="🏥"),
    Category(name="Education", color="#DDA0DD", icon="📚"),
    Category(name="Shopping", color="#FFB6C1", icon="🛍️"),
    Category(name="Utilities", color="#F0E68C", icon="⚡"),
    Category(name="Salary", color="#90EE90", icon="💼"),
    Category(name="Freelance", color="#87CEEB", icon="💻"),
    Category(name="Investment", color="#FFD700", icon="📈"),
    Category(name=OTHER_CATEGORY, color="#D3D3D3", icon="📝"),
)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

CSV_HEADER = "Date,Description,Category,Type,Amount"


__all__ = [
    "DEFAULT_CURRENCY_CODE",
    "DEFAULT_CURRENCY_SYMBOL",
    "CURRENCY_SYMBOLS",
    "OTHER_CATEGORY",
    "DEFAULT_CATEGORIES",
    "TIMESTAMP_FORMAT",
    "CSV_HEADER",
]

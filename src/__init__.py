"""Finance tracker application package."""

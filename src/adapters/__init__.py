"""Adapters driving the application (CLIs and user interfaces)."""

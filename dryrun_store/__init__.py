"""Dry-run data access layer for a small store: every write is rolled back."""

__version__ = "0.1.0"

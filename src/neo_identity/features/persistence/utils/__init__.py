"""Persistence utilities."""

from .error_handling import handle_storage_error, rows_affected

__all__ = ["handle_storage_error", "rows_affected"]

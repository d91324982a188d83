"""Refresh token utilities."""

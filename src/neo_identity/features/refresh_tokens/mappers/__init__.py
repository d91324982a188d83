"""Refresh token mappers."""

from .refresh_token_mapper import RefreshTokenMapper

__all__ = ["RefreshTokenMapper"]

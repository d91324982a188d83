"""Refresh token storage models."""

from .data_model import RefreshTokenDataModel

__all__ = ["RefreshTokenDataModel"]

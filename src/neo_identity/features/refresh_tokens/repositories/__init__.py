"""Refresh token repositories."""

from .refresh_token_repository import RefreshTokenRepository
from .refresh_token_data_model_repository import (
    AsyncpgRefreshTokenDataModelRepository,
    InMemoryRefreshTokenDataModelRepository,
    REFRESH_TOKENS_TABLE,
)

__all__ = [
    "RefreshTokenRepository",
    "AsyncpgRefreshTokenDataModelRepository",
    "InMemoryRefreshTokenDataModelRepository",
    "REFRESH_TOKENS_TABLE",
]

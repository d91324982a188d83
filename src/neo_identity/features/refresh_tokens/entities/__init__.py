"""Refresh token entities."""

from .refresh_token import (
    RefreshToken,
    RefreshTokenStatus,
    RefreshTokenMetadata,
    RegisterNewRefreshTokenInput,
    CreateFromExistingInfoRefreshTokenInput,
    MarkAsUsedRefreshTokenInput,
    RevokeRefreshTokenInput,
)
from .protocols import RefreshTokenDataModelRepository

__all__ = [
    "RefreshToken",
    "RefreshTokenStatus",
    "RefreshTokenMetadata",
    "RegisterNewRefreshTokenInput",
    "CreateFromExistingInfoRefreshTokenInput",
    "MarkAsUsedRefreshTokenInput",
    "RevokeRefreshTokenInput",
    "RefreshTokenDataModelRepository",
]

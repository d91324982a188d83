"""Refresh tokens feature: rotating refresh tokens grouped in families."""

from .entities import (
    RefreshToken,
    RefreshTokenStatus,
    RefreshTokenMetadata,
    RegisterNewRefreshTokenInput,
    CreateFromExistingInfoRefreshTokenInput,
    MarkAsUsedRefreshTokenInput,
    RevokeRefreshTokenInput,
    RefreshTokenDataModelRepository,
)
from .models import RefreshTokenDataModel
from .mappers import RefreshTokenMapper
from .repositories import (
    RefreshTokenRepository,
    AsyncpgRefreshTokenDataModelRepository,
    InMemoryRefreshTokenDataModelRepository,
)

__all__ = [
    "RefreshToken",
    "RefreshTokenStatus",
    "RefreshTokenMetadata",
    "RegisterNewRefreshTokenInput",
    "CreateFromExistingInfoRefreshTokenInput",
    "MarkAsUsedRefreshTokenInput",
    "RevokeRefreshTokenInput",
    "RefreshTokenDataModelRepository",
    "RefreshTokenDataModel",
    "RefreshTokenMapper",
    "RefreshTokenRepository",
    "AsyncpgRefreshTokenDataModelRepository",
    "InMemoryRefreshTokenDataModelRepository",
]

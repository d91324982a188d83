"""Password reset tokens feature.

Single-use, expiring tokens issued during the password recovery flow.
"""

from .entities import (
    PasswordResetToken,
    PasswordResetTokenMetadata,
    RegisterNewPasswordResetTokenInput,
    CreateFromExistingInfoPasswordResetTokenInput,
    MarkUsedPasswordResetTokenInput,
    PasswordResetTokenDataModelRepository,
)
from .models import PasswordResetTokenDataModel
from .mappers import PasswordResetTokenMapper
from .repositories import (
    PasswordResetTokenRepository,
    AsyncpgPasswordResetTokenDataModelRepository,
    InMemoryPasswordResetTokenDataModelRepository,
)

__all__ = [
    "PasswordResetToken",
    "PasswordResetTokenMetadata",
    "RegisterNewPasswordResetTokenInput",
    "CreateFromExistingInfoPasswordResetTokenInput",
    "MarkUsedPasswordResetTokenInput",
    "PasswordResetTokenDataModelRepository",
    "PasswordResetTokenDataModel",
    "PasswordResetTokenMapper",
    "PasswordResetTokenRepository",
    "AsyncpgPasswordResetTokenDataModelRepository",
    "InMemoryPasswordResetTokenDataModelRepository",
]

"""Password reset token entities."""

from .password_reset_token import (
    PasswordResetToken,
    PasswordResetTokenMetadata,
    RegisterNewPasswordResetTokenInput,
    CreateFromExistingInfoPasswordResetTokenInput,
    MarkUsedPasswordResetTokenInput,
)
from .protocols import PasswordResetTokenDataModelRepository

__all__ = [
    "PasswordResetToken",
    "PasswordResetTokenMetadata",
    "RegisterNewPasswordResetTokenInput",
    "CreateFromExistingInfoPasswordResetTokenInput",
    "MarkUsedPasswordResetTokenInput",
    "PasswordResetTokenDataModelRepository",
]

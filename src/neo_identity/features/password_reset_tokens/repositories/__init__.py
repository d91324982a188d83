"""Password reset token repositories."""

from .password_reset_token_repository import PasswordResetTokenRepository
from .password_reset_token_data_model_repository import (
    AsyncpgPasswordResetTokenDataModelRepository,
    InMemoryPasswordResetTokenDataModelRepository,
    PASSWORD_RESET_TOKENS_TABLE,
)

__all__ = [
    "PasswordResetTokenRepository",
    "AsyncpgPasswordResetTokenDataModelRepository",
    "InMemoryPasswordResetTokenDataModelRepository",
    "PASSWORD_RESET_TOKENS_TABLE",
]

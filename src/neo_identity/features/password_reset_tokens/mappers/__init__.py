"""Password reset token mappers."""

from .password_reset_token_mapper import PasswordResetTokenMapper

__all__ = ["PasswordResetTokenMapper"]

"""Password reset token storage models."""

from .data_model import PasswordResetTokenDataModel

__all__ = ["PasswordResetTokenDataModel"]

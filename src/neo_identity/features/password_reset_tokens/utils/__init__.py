"""Password reset token utilities."""

"""Base exceptions for neo-identity.

Only programming and contract failures are raised. Business outcomes
(validation, not found, concurrency conflicts) are reported through the
ExecutionContext message collection instead.
"""

from typing import Any, Dict, Optional


class NeoIdentityError(Exception):
    """Base exception for all neo-identity errors.

    Carries a machine readable error code and optional structured details.
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        *args,
        **kwargs
    ):
        super().__init__(message, *args, **kwargs)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.error_code,
            "message": self.message,
            "details": self.details,
            "type": self.__class__.__name__,
        }


class InvalidArgumentError(NeoIdentityError, ValueError):
    """Raised when a required dependency or argument is missing or malformed."""

    def __init__(self, argument_name: str, reason: str = ""):
        self.argument_name = argument_name
        self.reason = reason
        message = f"Invalid argument '{argument_name}'"
        if reason:
            message += f": {reason}"
        super().__init__(message, details={"argument": argument_name})


class ConfigurationError(NeoIdentityError):
    """Raised when settings cannot be loaded or are inconsistent."""
    pass

"""Exception hierarchy for neo-identity."""

from .base import NeoIdentityError, InvalidArgumentError, ConfigurationError
from .repository import RepositoryError, ConcurrencyConflictError

__all__ = [
    "NeoIdentityError",
    "InvalidArgumentError",
    "ConfigurationError",
    "RepositoryError",
    "ConcurrencyConflictError",
]

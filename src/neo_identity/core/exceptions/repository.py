"""Repository-related exceptions for neo-identity."""

from typing import Any, Optional

from .base import NeoIdentityError


class RepositoryError(NeoIdentityError):
    """Base class for storage collaborator errors."""
    pass


class ConcurrencyConflictError(RepositoryError):
    """Raised by a storage collaborator when the expected version is stale."""

    def __init__(
        self,
        entity_type: str,
        identifier: Any,
        expected_version: Optional[int] = None,
        actual_version: Optional[int] = None,
    ):
        self.entity_type = entity_type
        self.identifier = identifier
        self.expected_version = expected_version
        self.actual_version = actual_version
        super().__init__(
            f"Concurrency conflict for {entity_type} '{identifier}'. "
            f"Entity was modified by another process.",
            details={
                "entity_type": entity_type,
                "identifier": str(identifier),
                "expected_version": expected_version,
                "actual_version": actual_version,
            },
        )


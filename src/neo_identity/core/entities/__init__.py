"""Entity base, audit metadata and validation primitives."""

from .entity_info import EntityInfo
from .entity_base import EntityBase, EntityBaseMetadata, TENANT_MISMATCH, validate_entity_info
from .validation import (
    IS_REQUIRED,
    MIN_LENGTH,
    MAX_LENGTH,
    create_message_code,
    is_missing,
    validate_is_required,
    validate_min_length,
    validate_max_length,
    validate_text,
)

__all__ = [
    "EntityInfo",
    "EntityBase",
    "EntityBaseMetadata",
    "TENANT_MISMATCH",
    "validate_entity_info",
    "IS_REQUIRED",
    "MIN_LENGTH",
    "MAX_LENGTH",
    "create_message_code",
    "is_missing",
    "validate_is_required",
    "validate_min_length",
    "validate_max_length",
    "validate_text",
]

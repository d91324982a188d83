"""Field-level validation primitives.

Every validator appends one coded error message to the context on failure and
returns a boolean. They never raise. Message codes are built as
``{prefix}.{Kind}`` where the prefix is ``{EntityClassName}.{PropertyName}``.
"""

from datetime import datetime
from typing import Any, Optional, Sized
from uuid import UUID

from ..shared.context import ExecutionContext
from ...utils.uuid import NIL_UUID

IS_REQUIRED = "IsRequired"
MIN_LENGTH = "MinLength"
MAX_LENGTH = "MaxLength"


def create_message_code(entity_name: str, property_name: str, kind: Optional[str] = None) -> str:
    """Build a stable message code such as ``PasswordResetToken.TokenHash.IsRequired``."""
    code = f"{entity_name}.{property_name}"
    return f"{code}.{kind}" if kind else code


def is_missing(value: Any) -> bool:
    """A value is missing when it is None, the all-zero UUID or ``datetime.min``."""
    if value is None:
        return True
    if isinstance(value, UUID):
        return value == NIL_UUID
    if isinstance(value, datetime):
        return value == datetime.min
    return False


def validate_is_required(
    ctx: ExecutionContext,
    code_prefix: str,
    is_required: bool,
    value: Any,
) -> bool:
    if not is_required:
        return True
    if is_missing(value):
        ctx.add_error_message(f"{code_prefix}.{IS_REQUIRED}")
        return False
    return True


def validate_min_length(ctx: ExecutionContext, code_prefix: str, min_length: int, length: int) -> bool:
    if length < min_length:
        ctx.add_error_message(
            f"{code_prefix}.{MIN_LENGTH}",
            f"Minimum length is {min_length}, got {length}",
        )
        return False
    return True


def validate_max_length(ctx: ExecutionContext, code_prefix: str, max_length: int, length: int) -> bool:
    if length > max_length:
        ctx.add_error_message(
            f"{code_prefix}.{MAX_LENGTH}",
            f"Maximum length is {max_length}, got {length}",
        )
        return False
    return True


def validate_text(
    ctx: ExecutionContext,
    code_prefix: str,
    value: Optional[Sized],
    is_required: bool,
    min_length: Optional[int] = None,
    max_length: Optional[int] = None,
) -> bool:
    """Required, then minimum length, then maximum length; stops at the first failure.

    A missing optional value is valid and its length rules are skipped.
    """
    if not validate_is_required(ctx, code_prefix, is_required, value):
        return False
    if value is None:
        return True
    if min_length is not None and not validate_min_length(ctx, code_prefix, min_length, len(value)):
        return False
    if max_length is not None and not validate_max_length(ctx, code_prefix, max_length, len(value)):
        return False
    return True


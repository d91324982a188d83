"""Per-operation execution context.

The ExecutionContext travels with one inbound operation. It carries the
tenant, the acting user, the correlation id and the business operation tag
used for audit stamping, and it collects the diagnostic messages produced by
validation and persistence. Business failures are reported here instead of
being raised.
"""

import copy
import logging
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import IntEnum
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

from ..exceptions import InvalidArgumentError
from ..value_objects.tenant_info import TenantInfo
from ...utils.uuid import generate_uuid_v7
from .clock import Clock

logger = logging.getLogger(__name__)


class MessageLevel(IntEnum):
    """Diagnostic message levels, ordered by severity."""
    TRACE = 0
    DEBUG = 1
    INFORMATION = 2
    WARNING = 3
    ERROR = 4
    CRITICAL = 5
    SUCCESS = 6


# Never filtered by the minimum level
ALWAYS_RECORDED_LEVELS = frozenset({MessageLevel.ERROR, MessageLevel.CRITICAL, MessageLevel.SUCCESS})
ERROR_LEVELS = frozenset({MessageLevel.ERROR, MessageLevel.CRITICAL})


@dataclass(frozen=True)
class Message:
    """Immutable diagnostic message."""

    id: UUID
    timestamp: datetime
    level: MessageLevel
    code: str
    text: Optional[str] = None

    def with_text(self, text: Optional[str]) -> "Message":
        return replace(self, text=text)

    def with_level(self, level: MessageLevel) -> "Message":
        return replace(self, level=level)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": str(self.id),
            "timestamp": self.timestamp.isoformat(),
            "level": self.level.name,
            "code": self.code,
            "text": self.text,
        }


@dataclass
class ExecutionContext:
    """Carrier of tenant, audit and diagnostic state for one operation."""

    tenant_info: TenantInfo
    execution_user: str
    execution_origin: str
    business_operation_code: str
    clock: Clock
    correlation_id: UUID = field(default_factory=generate_uuid_v7)
    minimum_message_level: MessageLevel = MessageLevel.INFORMATION
    timestamp: datetime = field(init=False)
    _messages: Dict[UUID, Message] = field(default_factory=dict, init=False, repr=False)
    _exceptions: List[BaseException] = field(default_factory=list, init=False, repr=False)

    def __post_init__(self):
        if self.clock is None:
            raise InvalidArgumentError("clock", "a clock is required")
        if self.tenant_info is None:
            raise InvalidArgumentError("tenant_info", "tenant information is required")
        for name in ("execution_user", "execution_origin", "business_operation_code"):
            value = getattr(self, name)
            if value is None or not str(value).strip():
                raise InvalidArgumentError(name, "must not be empty or whitespace")
        if not isinstance(self.minimum_message_level, MessageLevel):
            raise InvalidArgumentError("minimum_message_level", f"unknown level {self.minimum_message_level!r}")
        self.timestamp = self.clock.utc_now()

    @classmethod
    def create(
        cls,
        tenant_info: TenantInfo,
        execution_user: str,
        execution_origin: str,
        business_operation_code: str,
        clock: Clock,
        correlation_id: Optional[UUID] = None,
        minimum_message_level: MessageLevel = MessageLevel.INFORMATION,
    ) -> "ExecutionContext":
        """Create a context for a new inbound operation.

        Raises:
            InvalidArgumentError: if the clock is missing or the user, origin
                or business operation code is blank
        """
        return cls(
            tenant_info=tenant_info,
            execution_user=execution_user,
            execution_origin=execution_origin,
            business_operation_code=business_operation_code,
            clock=clock,
            correlation_id=correlation_id or generate_uuid_v7(),
            minimum_message_level=minimum_message_level,
        )

    # Inspection

    @property
    def messages(self) -> Tuple[Message, ...]:
        return tuple(self._messages.values())

    @property
    def exceptions(self) -> Tuple[BaseException, ...]:
        return tuple(self._exceptions)

    @property
    def has_messages(self) -> bool:
        return bool(self._messages)

    @property
    def has_error_messages(self) -> bool:
        return any(m.level in ERROR_LEVELS for m in self._messages.values())

    @property
    def has_exceptions(self) -> bool:
        return bool(self._exceptions)

    @property
    def is_successful(self) -> bool:
        return not self.has_error_messages and not self.has_exceptions

    @property
    def is_faulted(self) -> bool:
        return self.has_exceptions or self.has_error_messages

    @property
    def is_partially_successful(self) -> bool:
        has_success = any(m.level == MessageLevel.SUCCESS for m in self._messages.values())
        return has_success and self.is_faulted

    def get_messages(self, level: Optional[MessageLevel] = None) -> List[Message]:
        if level is None:
            return list(self._messages.values())
        return [m for m in self._messages.values() if m.level == level]

    def has_message_code(self, code: str) -> bool:
        return any(m.code == code for m in self._messages.values())

    # Recording

    def add_message(self, level: MessageLevel, code: str, text: Optional[str] = None) -> Optional[Message]:
        """Append a message unless it is filtered out by the minimum level."""
        if level not in ALWAYS_RECORDED_LEVELS and level < self.minimum_message_level:
            return None

        message = Message(
            id=generate_uuid_v7(),
            timestamp=self.clock.utc_now(),
            level=level,
            code=code,
            text=text,
        )
        self._messages[message.id] = message
        return message

    def add_trace_message(self, code: str, text: Optional[str] = None) -> Optional[Message]:
        return self.add_message(MessageLevel.TRACE, code, text)

    def add_debug_message(self, code: str, text: Optional[str] = None) -> Optional[Message]:
        return self.add_message(MessageLevel.DEBUG, code, text)

    def add_information_message(self, code: str, text: Optional[str] = None) -> Optional[Message]:
        return self.add_message(MessageLevel.INFORMATION, code, text)

    def add_warning_message(self, code: str, text: Optional[str] = None) -> Optional[Message]:
        return self.add_message(MessageLevel.WARNING, code, text)

    def add_error_message(self, code: str, text: Optional[str] = None) -> Message:
        return self.add_message(MessageLevel.ERROR, code, text)

    def add_critical_message(self, code: str, text: Optional[str] = None) -> Message:
        return self.add_message(MessageLevel.CRITICAL, code, text)

    def add_success_message(self, code: str, text: Optional[str] = None) -> Message:
        return self.add_message(MessageLevel.SUCCESS, code, text)

    def add_exception(self, exception: BaseException) -> None:
        if exception is None:
            raise InvalidArgumentError("exception", "an exception instance is required")
        self._exceptions.append(exception)

    # Mutation of recorded state

    def change_message_text(self, message_id: UUID, text: Optional[str]) -> bool:
        message = self._messages.get(message_id)
        if message is None:
            return False
        self._messages[message_id] = message.with_text(text)
        return True

    def change_message_level(self, message_id: UUID, level: MessageLevel) -> bool:
        message = self._messages.get(message_id)
        if message is None:
            return False
        self._messages[message_id] = message.with_level(level)
        return True

    def change_messages_level(self, old_level: MessageLevel, new_level: MessageLevel) -> bool:
        """Move every message of one level to another; True if any changed."""
        changed = False
        for message_id, message in list(self._messages.items()):
            if message.level == old_level:
                self._messages[message_id] = message.with_level(new_level)
                changed = True
        return changed

    def change_business_operation_code(self, business_operation_code: str) -> None:
        if business_operation_code is None or not business_operation_code.strip():
            raise InvalidArgumentError("business_operation_code", "must not be empty or whitespace")
        logger.debug(
            f"Business operation changed from {self.business_operation_code} "
            f"to {business_operation_code} (correlation_id={self.correlation_id})"
        )
        self.business_operation_code = business_operation_code

    def clone(self) -> "ExecutionContext":
        """Copy with the same timestamp and independent message collections."""
        cloned = copy.copy(self)
        cloned._messages = dict(self._messages)
        cloned._exceptions = list(self._exceptions)
        return cloned

    def import_from(self, other: "ExecutionContext") -> None:
        """Merge messages and exceptions collected by another context."""
        if other is None:
            raise InvalidArgumentError("other", "a context to import from is required")
        for message_id, message in other._messages.items():
            self._messages.setdefault(message_id, message)
        self._exceptions.extend(other._exceptions)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp.isoformat(),
            "correlation_id": str(self.correlation_id),
            "tenant_code": str(self.tenant_info.code),
            "tenant_name": self.tenant_info.name,
            "execution_user": self.execution_user,
            "execution_origin": self.execution_origin,
            "business_operation_code": self.business_operation_code,
        }

    def __str__(self) -> str:
        return (
            f"ExecutionContext(correlation_id={self.correlation_id}, tenant={self.tenant_info}, "
            f"user={self.execution_user}, operation={self.business_operation_code})"
        )

"""Concurrency version token."""

import threading
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import ClassVar, Optional

from ..shared.clock import Clock

UNIX_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def datetime_to_ticks(value: datetime) -> int:
    """Convert an aware datetime to 100 ns ticks since the Unix epoch."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    delta = value - UNIX_EPOCH
    return (delta // timedelta(microseconds=1)) * 10


@dataclass(frozen=True, order=True)
class RegistryVersion:
    """Monotonic version stamped on every successful entity mutation.

    Values are clock ticks; within one process a generated version is always
    strictly greater than every version generated before it, even when the
    clock stands still or goes backwards.
    """

    value: int

    _lock: ClassVar[threading.Lock] = threading.Lock()
    _last_generated: ClassVar[int] = 0

    def __post_init__(self):
        if not isinstance(self.value, int) or isinstance(self.value, bool):
            raise ValueError(f"RegistryVersion value must be an int, got {type(self.value).__name__}")
        if self.value < 0:
            raise ValueError(f"RegistryVersion value cannot be negative: {self.value}")

    @classmethod
    def generate(cls, clock: Optional[Clock] = None) -> "RegistryVersion":
        now = clock.utc_now() if clock is not None else datetime.now(timezone.utc)
        ticks = datetime_to_ticks(now)
        with cls._lock:
            if ticks <= RegistryVersion._last_generated:
                ticks = RegistryVersion._last_generated + 1
            RegistryVersion._last_generated = ticks
        return cls(ticks)

    @classmethod
    def create_from_existing_info(cls, value: int) -> "RegistryVersion":
        return cls(int(value))

    def as_datetime(self) -> datetime:
        return UNIX_EPOCH + timedelta(microseconds=self.value // 10)

    def __int__(self) -> int:
        return self.value

    def __str__(self) -> str:
        return str(self.value)

"""Shared per-operation primitives: context, clock, cancellation."""

from .clock import Clock, SystemClock, FixedClock
from .cancellation import CancellationToken, ensure_token
from .context import ExecutionContext, Message, MessageLevel

__all__ = [
    "Clock",
    "SystemClock",
    "FixedClock",
    "CancellationToken",
    "ensure_token",
    "ExecutionContext",
    "Message",
    "MessageLevel",
]

"""UUID utilities for neo-identity."""

import uuid
import time
from typing import Optional, Union
from datetime import datetime, timezone


NIL_UUID = uuid.UUID(int=0)


def generate_uuid_v7() -> uuid.UUID:
    """
    Generate a UUIDv7 with time-based ordering.

    Entity ids and message ids are time-ordered so that storage indexes
    stay append-mostly.

    Returns:
        UUIDv7 instance
    """
    # 48-bit millisecond timestamp
    timestamp_ms = int(time.time() * 1000)
    timestamp_bytes = timestamp_ms.to_bytes(6, byteorder='big')

    # 80 random bits
    random_bytes = uuid.uuid4().bytes[6:]

    uuid_bytes = bytearray(timestamp_bytes + random_bytes)

    # Version 7
    uuid_bytes[6] = (uuid_bytes[6] & 0x0f) | 0x70
    # Variant 10
    uuid_bytes[8] = (uuid_bytes[8] & 0x3f) | 0x80

    return uuid.UUID(bytes=bytes(uuid_bytes))


def is_nil_uuid(value: Optional[uuid.UUID]) -> bool:
    """Check whether a UUID is missing or the all-zero default."""
    return value is None or value == NIL_UUID


def extract_timestamp_from_uuid_v7(value: Union[str, uuid.UUID]) -> Optional[datetime]:
    """
    Extract timestamp from UUIDv7.

    Args:
        value: UUIDv7 instance or its string representation

    Returns:
        Datetime object representing the timestamp, or None if invalid
    """
    try:
        uuid_obj = value if isinstance(value, uuid.UUID) else uuid.UUID(value)
    except (ValueError, TypeError, AttributeError):
        return None

    if uuid_obj.version != 7:
        return None

    timestamp_ms = int.from_bytes(uuid_obj.bytes[:6], byteorder='big')
    return datetime.fromtimestamp(timestamp_ms / 1000.0, tz=timezone.utc)

"""Shared utilities."""

from .uuid import NIL_UUID, generate_uuid_v7, is_nil_uuid, extract_timestamp_from_uuid_v7

__all__ = [
    "NIL_UUID",
    "generate_uuid_v7",
    "is_nil_uuid",
    "extract_timestamp_from_uuid_v7",
]

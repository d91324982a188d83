"""Core value objects."""

from .tenant_info import TenantInfo
from .registry_version import RegistryVersion, datetime_to_ticks

__all__ = [
    "TenantInfo",
    "RegistryVersion",
    "datetime_to_ticks",
]

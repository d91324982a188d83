"""Tenant identity value object."""

from dataclasses import dataclass, field
from typing import Optional, Union
from uuid import UUID

from ..exceptions import InvalidArgumentError


@dataclass(frozen=True)
class TenantInfo:
    """Tenant identity carried by contexts and entities.

    Two tenants are the same tenant when their codes match; the display
    name is informational only.
    """

    code: UUID
    name: Optional[str] = field(default=None, compare=False)

    def __post_init__(self):
        if isinstance(self.code, str):
            try:
                object.__setattr__(self, "code", UUID(self.code))
            except ValueError as e:
                raise InvalidArgumentError("code", f"not a valid UUID: {self.code}") from e
        if not isinstance(self.code, UUID):
            raise InvalidArgumentError("code", "tenant code must be a UUID")

    @classmethod
    def create(cls, code: Union[UUID, str], name: Optional[str] = None) -> "TenantInfo":
        return cls(code=code, name=name)

    def __str__(self) -> str:
        return self.name or str(self.code)

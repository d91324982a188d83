"""Identity, audit trail and version of an entity."""

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Dict, Optional
from uuid import UUID

from ..shared.context import ExecutionContext
from ..value_objects.registry_version import RegistryVersion
from ..value_objects.tenant_info import TenantInfo
from ...utils.uuid import generate_uuid_v7


@dataclass(frozen=True)
class EntityInfo:
    """Immutable identity and audit metadata stamped on every entity.

    ``created_*`` fields are set once at registration. ``last_changed_*``
    fields stay ``None`` until the first successful change and are replaced
    wholesale on every subsequent change. ``entity_version`` advances on every
    stamp but is informational only for persistence; repositories always use
    the version they just read from storage.
    """

    id: UUID
    tenant_info: TenantInfo
    created_at: datetime
    created_by: str
    created_correlation_id: UUID
    created_execution_origin: str
    created_business_operation_code: str
    entity_version: RegistryVersion
    last_changed_at: Optional[datetime] = None
    last_changed_by: Optional[str] = None
    last_changed_correlation_id: Optional[UUID] = None
    last_changed_execution_origin: Optional[str] = None
    last_changed_business_operation_code: Optional[str] = None

    @classmethod
    def register_new(
        cls,
        ctx: ExecutionContext,
        tenant_info: TenantInfo,
        created_by: str,
    ) -> "EntityInfo":
        return cls(
            id=generate_uuid_v7(),
            tenant_info=tenant_info,
            created_at=ctx.timestamp,
            created_by=created_by,
            created_correlation_id=ctx.correlation_id,
            created_execution_origin=ctx.execution_origin,
            created_business_operation_code=ctx.business_operation_code,
            entity_version=RegistryVersion.generate(ctx.clock),
        )

    def register_change(self, ctx: ExecutionContext, changed_by: str) -> "EntityInfo":
        return replace(
            self,
            last_changed_at=ctx.timestamp,
            last_changed_by=changed_by,
            last_changed_correlation_id=ctx.correlation_id,
            last_changed_execution_origin=ctx.execution_origin,
            last_changed_business_operation_code=ctx.business_operation_code,
            entity_version=RegistryVersion.generate(ctx.clock),
        )

    @classmethod
    def create_from_existing_info(
        cls,
        id: UUID,
        tenant_info: TenantInfo,
        created_at: datetime,
        created_by: str,
        created_correlation_id: UUID,
        created_execution_origin: str,
        created_business_operation_code: str,
        entity_version: RegistryVersion,
        last_changed_at: Optional[datetime] = None,
        last_changed_by: Optional[str] = None,
        last_changed_correlation_id: Optional[UUID] = None,
        last_changed_execution_origin: Optional[str] = None,
        last_changed_business_operation_code: Optional[str] = None,
    ) -> "EntityInfo":
        """Rebuild from trusted stored values without validation."""
        return cls(
            id=id,
            tenant_info=tenant_info,
            created_at=created_at,
            created_by=created_by,
            created_correlation_id=created_correlation_id,
            created_execution_origin=created_execution_origin,
            created_business_operation_code=created_business_operation_code,
            entity_version=entity_version,
            last_changed_at=last_changed_at,
            last_changed_by=last_changed_by,
            last_changed_correlation_id=last_changed_correlation_id,
            last_changed_execution_origin=last_changed_execution_origin,
            last_changed_business_operation_code=last_changed_business_operation_code,
        )

    @property
    def last_modified_at(self) -> datetime:
        return self.last_changed_at or self.created_at

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": str(self.id),
            "tenant_code": str(self.tenant_info.code),
            "created_at": self.created_at.isoformat(),
            "created_by": self.created_by,
            "created_correlation_id": str(self.created_correlation_id),
            "created_execution_origin": self.created_execution_origin,
            "created_business_operation_code": self.created_business_operation_code,
            "last_changed_at": self.last_changed_at.isoformat() if self.last_changed_at else None,
            "last_changed_by": self.last_changed_by,
            "last_changed_correlation_id": (
                str(self.last_changed_correlation_id) if self.last_changed_correlation_id else None
            ),
            "last_changed_execution_origin": self.last_changed_execution_origin,
            "last_changed_business_operation_code": self.last_changed_business_operation_code,
            "entity_version": self.entity_version.value,
        }

"""Storage row base shared by every persisted entity."""

from dataclasses import dataclass, fields
from datetime import datetime
from typing import Any, Dict, Optional, Tuple
from uuid import UUID


@dataclass(kw_only=True)
class DataModelBase:
    """Flat audit and version columns present on every table."""

    id: UUID
    tenant_code: UUID
    created_by: str
    created_at: datetime
    created_correlation_id: UUID
    created_execution_origin: str
    created_business_operation_code: str
    last_changed_by: Optional[str] = None
    last_changed_at: Optional[datetime] = None
    last_changed_correlation_id: Optional[UUID] = None
    last_changed_execution_origin: Optional[str] = None
    last_changed_business_operation_code: Optional[str] = None
    entity_version: int

    @classmethod
    def column_names(cls) -> Tuple[str, ...]:
        return tuple(f.name for f in fields(cls))

    @classmethod
    def from_record(cls, record: Any) -> "DataModelBase":
        """Build from an asyncpg Record or any mapping with the same keys."""
        return cls(**{name: record[name] for name in cls.column_names()})

    def to_dict(self) -> Dict[str, Any]:
        return {name: getattr(self, name) for name in self.column_names()}

    @property
    def last_modified_at(self) -> datetime:
        return self.last_changed_at or self.created_at


BASE_COLUMNS: Tuple[str, ...] = DataModelBase.column_names()

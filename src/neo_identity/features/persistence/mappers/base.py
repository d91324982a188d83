"""Entity <-> storage row mapping.

Mappers are the only place where entities and rows meet. Each entity type
provides a small subclass that knows its own columns; the audit and version
columns are handled here.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, Type, TypeVar

from ....core.entities.entity_base import EntityBase
from ....core.entities.entity_info import EntityInfo
from ....core.value_objects.registry_version import RegistryVersion
from ....core.value_objects.tenant_info import TenantInfo
from ..entities.data_model import DataModelBase

TEntity = TypeVar("TEntity", bound=EntityBase)
TDataModel = TypeVar("TDataModel", bound=DataModelBase)

# Identity columns are never rewritten by adapt()
IMMUTABLE_COLUMNS = frozenset({"id", "tenant_code"})


def entity_info_columns(entity_info: EntityInfo) -> Dict[str, Any]:
    return {
        "id": entity_info.id,
        "tenant_code": entity_info.tenant_info.code,
        "created_by": entity_info.created_by,
        "created_at": entity_info.created_at,
        "created_correlation_id": entity_info.created_correlation_id,
        "created_execution_origin": entity_info.created_execution_origin,
        "created_business_operation_code": entity_info.created_business_operation_code,
        "last_changed_by": entity_info.last_changed_by,
        "last_changed_at": entity_info.last_changed_at,
        "last_changed_correlation_id": entity_info.last_changed_correlation_id,
        "last_changed_execution_origin": entity_info.last_changed_execution_origin,
        "last_changed_business_operation_code": entity_info.last_changed_business_operation_code,
        "entity_version": entity_info.entity_version.value,
    }


def entity_info_from_data_model(data_model: DataModelBase) -> EntityInfo:
    return EntityInfo.create_from_existing_info(
        id=data_model.id,
        tenant_info=TenantInfo(code=data_model.tenant_code),
        created_at=data_model.created_at,
        created_by=data_model.created_by,
        created_correlation_id=data_model.created_correlation_id,
        created_execution_origin=data_model.created_execution_origin,
        created_business_operation_code=data_model.created_business_operation_code,
        entity_version=RegistryVersion.create_from_existing_info(data_model.entity_version),
        last_changed_at=data_model.last_changed_at,
        last_changed_by=data_model.last_changed_by,
        last_changed_correlation_id=data_model.last_changed_correlation_id,
        last_changed_execution_origin=data_model.last_changed_execution_origin,
        last_changed_business_operation_code=data_model.last_changed_business_operation_code,
    )


class DataModelMapper(ABC, Generic[TEntity, TDataModel]):
    """Translate one entity type to and from its row type."""

    entity_type: Type[TEntity]
    data_model_type: Type[TDataModel]

    @property
    def entity_name(self) -> str:
        return self.entity_type.__name__

    @abstractmethod
    def field_columns(self, entity: TEntity) -> Dict[str, Any]:
        """Entity-specific column values, excluding audit columns."""

    @abstractmethod
    def to_entity(self, data_model: TDataModel) -> TEntity:
        """Materialize an entity from a trusted row without validation."""

    def to_data_model(self, entity: TEntity) -> TDataModel:
        return self.data_model_type(
            **entity_info_columns(entity.entity_info),
            **self.field_columns(entity),
        )

    def adapt(self, data_model: TDataModel, entity: TEntity) -> TDataModel:
        """Copy the entity's values onto an existing row object in place."""
        values = {**entity_info_columns(entity.entity_info), **self.field_columns(entity)}
        for column, value in values.items():
            if column in IMMUTABLE_COLUMNS:
                continue
            setattr(data_model, column, value)
        return data_model

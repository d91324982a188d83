"""Base class for validated, audited, tenant-scoped entities.

Entities are never mutated in place from outside. They come into existence
through one of three paths:

* ``register_new``: build a blank instance, stamp creation audit info and run
  every field setter. All setters run even after a failure, so the context
  ends up with one message per invalid field.
* ``create_from_existing_info``: trusted reconstruction from storage, no
  validation.
* ``register_change``: clone, stamp change audit info, apply a transition to
  the clone. The original instance is left untouched.

A failed path returns ``None`` and leaves the reasons in the ExecutionContext.
"""

import logging
import threading
from abc import ABC, abstractmethod
from typing import Any, Callable, ClassVar, Generic, Iterable, Optional, TypeVar

from ..shared.context import ExecutionContext
from ..value_objects.tenant_info import TenantInfo
from .entity_info import EntityInfo
from .validation import create_message_code, validate_is_required, validate_text

logger = logging.getLogger(__name__)

TEntity = TypeVar("TEntity", bound="EntityBase")
TInput = TypeVar("TInput")

TENANT_MISMATCH = "TenantMismatch"


class EntityBaseMetadata:
    """Validation rules for EntityInfo fields, shared by every entity type."""

    _lock: ClassVar[threading.Lock] = threading.Lock()

    ENTITY_NAME: ClassVar[str] = "EntityBase"

    ID_PROPERTY_NAME: ClassVar[str] = "EntityInfo.Id"
    TENANT_CODE_PROPERTY_NAME: ClassVar[str] = "EntityInfo.TenantCode"
    CREATED_AT_PROPERTY_NAME: ClassVar[str] = "EntityInfo.CreatedAt"
    CREATED_BY_PROPERTY_NAME: ClassVar[str] = "EntityInfo.CreatedBy"
    CREATED_CORRELATION_ID_PROPERTY_NAME: ClassVar[str] = "EntityInfo.CreatedCorrelationId"
    CREATED_EXECUTION_ORIGIN_PROPERTY_NAME: ClassVar[str] = "EntityInfo.CreatedExecutionOrigin"
    LAST_CHANGED_AT_PROPERTY_NAME: ClassVar[str] = "EntityInfo.LastChangedAt"
    LAST_CHANGED_BY_PROPERTY_NAME: ClassVar[str] = "EntityInfo.LastChangedBy"
    LAST_CHANGED_CORRELATION_ID_PROPERTY_NAME: ClassVar[str] = "EntityInfo.LastChangedCorrelationId"
    LAST_CHANGED_EXECUTION_ORIGIN_PROPERTY_NAME: ClassVar[str] = "EntityInfo.LastChangedExecutionOrigin"
    ENTITY_VERSION_PROPERTY_NAME: ClassVar[str] = "EntityInfo.EntityVersion"

    id_is_required: ClassVar[bool] = True
    tenant_code_is_required: ClassVar[bool] = True

    created_at_is_required: ClassVar[bool] = True
    created_by_is_required: ClassVar[bool] = True
    created_by_min_length: ClassVar[int] = 1
    created_by_max_length: ClassVar[int] = 255

    last_changed_at_is_required: ClassVar[bool] = False
    last_changed_by_is_required: ClassVar[bool] = False
    last_changed_by_min_length: ClassVar[int] = 1
    last_changed_by_max_length: ClassVar[int] = 255

    created_correlation_id_is_required: ClassVar[bool] = True
    last_changed_correlation_id_is_required: ClassVar[bool] = False

    created_execution_origin_is_required: ClassVar[bool] = True
    created_execution_origin_min_length: ClassVar[int] = 1
    created_execution_origin_max_length: ClassVar[int] = 255
    last_changed_execution_origin_is_required: ClassVar[bool] = False
    last_changed_execution_origin_min_length: ClassVar[int] = 1
    last_changed_execution_origin_max_length: ClassVar[int] = 255

    entity_version_is_required: ClassVar[bool] = True

    @classmethod
    def change_id_metadata(cls, is_required: bool) -> None:
        with cls._lock:
            cls.id_is_required = is_required

    @classmethod
    def change_tenant_code_metadata(cls, is_required: bool) -> None:
        with cls._lock:
            cls.tenant_code_is_required = is_required

    @classmethod
    def change_creation_info_metadata(
        cls,
        created_at_is_required: bool,
        created_by_is_required: bool,
        created_by_min_length: int,
        created_by_max_length: int,
    ) -> None:
        with cls._lock:
            cls.created_at_is_required = created_at_is_required
            cls.created_by_is_required = created_by_is_required
            cls.created_by_min_length = created_by_min_length
            cls.created_by_max_length = created_by_max_length

    @classmethod
    def change_update_info_metadata(
        cls,
        last_changed_at_is_required: bool,
        last_changed_by_is_required: bool,
        last_changed_by_min_length: int,
        last_changed_by_max_length: int,
    ) -> None:
        with cls._lock:
            cls.last_changed_at_is_required = last_changed_at_is_required
            cls.last_changed_by_is_required = last_changed_by_is_required
            cls.last_changed_by_min_length = last_changed_by_min_length
            cls.last_changed_by_max_length = last_changed_by_max_length

    @classmethod
    def change_correlation_id_metadata(
        cls,
        created_correlation_id_is_required: bool,
        last_changed_correlation_id_is_required: bool,
    ) -> None:
        with cls._lock:
            cls.created_correlation_id_is_required = created_correlation_id_is_required
            cls.last_changed_correlation_id_is_required = last_changed_correlation_id_is_required

    @classmethod
    def change_execution_origin_metadata(
        cls,
        created_execution_origin_is_required: bool,
        created_execution_origin_min_length: int,
        created_execution_origin_max_length: int,
        last_changed_execution_origin_is_required: bool,
        last_changed_execution_origin_min_length: int,
        last_changed_execution_origin_max_length: int,
    ) -> None:
        with cls._lock:
            cls.created_execution_origin_is_required = created_execution_origin_is_required
            cls.created_execution_origin_min_length = created_execution_origin_min_length
            cls.created_execution_origin_max_length = created_execution_origin_max_length
            cls.last_changed_execution_origin_is_required = last_changed_execution_origin_is_required
            cls.last_changed_execution_origin_min_length = last_changed_execution_origin_min_length
            cls.last_changed_execution_origin_max_length = last_changed_execution_origin_max_length

    @classmethod
    def change_entity_version_metadata(cls, is_required: bool) -> None:
        with cls._lock:
            cls.entity_version_is_required = is_required

    @classmethod
    def code(cls, property_name: str) -> str:
        return create_message_code(cls.ENTITY_NAME, property_name)


def validate_entity_info(ctx: ExecutionContext, entity_info: Optional[EntityInfo]) -> bool:
    """Validate every EntityInfo field against EntityBaseMetadata.

    All field checks run; the result is their conjunction.
    """
    meta = EntityBaseMetadata
    if entity_info is None:
        ctx.add_error_message(f"{meta.ENTITY_NAME}.EntityInfo.IsRequired")
        return False

    tenant_code = entity_info.tenant_info.code if entity_info.tenant_info is not None else None

    results = [
        validate_is_required(ctx, meta.code(meta.ID_PROPERTY_NAME), meta.id_is_required, entity_info.id),
        validate_is_required(
            ctx, meta.code(meta.TENANT_CODE_PROPERTY_NAME), meta.tenant_code_is_required, tenant_code
        ),
        validate_is_required(
            ctx, meta.code(meta.CREATED_AT_PROPERTY_NAME), meta.created_at_is_required, entity_info.created_at
        ),
        validate_text(
            ctx,
            meta.code(meta.CREATED_BY_PROPERTY_NAME),
            entity_info.created_by,
            meta.created_by_is_required,
            meta.created_by_min_length,
            meta.created_by_max_length,
        ),
        validate_is_required(
            ctx,
            meta.code(meta.LAST_CHANGED_AT_PROPERTY_NAME),
            meta.last_changed_at_is_required,
            entity_info.last_changed_at,
        ),
        validate_text(
            ctx,
            meta.code(meta.LAST_CHANGED_BY_PROPERTY_NAME),
            entity_info.last_changed_by,
            meta.last_changed_by_is_required,
            meta.last_changed_by_min_length,
            meta.last_changed_by_max_length,
        ),
        validate_is_required(
            ctx,
            meta.code(meta.ENTITY_VERSION_PROPERTY_NAME),
            meta.entity_version_is_required,
            entity_info.entity_version,
        ),
        validate_is_required(
            ctx,
            meta.code(meta.CREATED_CORRELATION_ID_PROPERTY_NAME),
            meta.created_correlation_id_is_required,
            entity_info.created_correlation_id,
        ),
        validate_is_required(
            ctx,
            meta.code(meta.LAST_CHANGED_CORRELATION_ID_PROPERTY_NAME),
            meta.last_changed_correlation_id_is_required,
            entity_info.last_changed_correlation_id,
        ),
        validate_text(
            ctx,
            meta.code(meta.CREATED_EXECUTION_ORIGIN_PROPERTY_NAME),
            entity_info.created_execution_origin,
            meta.created_execution_origin_is_required,
            meta.created_execution_origin_min_length,
            meta.created_execution_origin_max_length,
        ),
        validate_text(
            ctx,
            meta.code(meta.LAST_CHANGED_EXECUTION_ORIGIN_PROPERTY_NAME),
            entity_info.last_changed_execution_origin,
            meta.last_changed_execution_origin_is_required,
            meta.last_changed_execution_origin_min_length,
            meta.last_changed_execution_origin_max_length,
        ),
    ]
    return all(results)


class EntityBase(ABC, Generic[TEntity]):
    """Abstract base for tenant-scoped domain entities."""

    def __init__(self, entity_info: Optional[EntityInfo] = None):
        self._entity_info = entity_info

    @property
    def entity_info(self) -> EntityInfo:
        return self._entity_info

    @property
    def id(self):
        return self._entity_info.id if self._entity_info else None

    @property
    def tenant_info(self) -> Optional[TenantInfo]:
        return self._entity_info.tenant_info if self._entity_info else None

    @classmethod
    def entity_name(cls) -> str:
        return cls.__name__

    @classmethod
    def create_message_code(cls, property_name: str, kind: Optional[str] = None) -> str:
        return create_message_code(cls.entity_name(), property_name, kind)

    # Validation

    @staticmethod
    def validate_entity_info(ctx: ExecutionContext, entity_info: Optional[EntityInfo]) -> bool:
        return validate_entity_info(ctx, entity_info)

    @classmethod
    def validate_tenant_matches_context(cls, ctx: ExecutionContext, tenant_info: Optional[TenantInfo]) -> bool:
        if tenant_info is None or tenant_info.code != ctx.tenant_info.code:
            ctx.add_error_message(
                cls.create_message_code(TENANT_MISMATCH),
                f"Entity tenant {tenant_info} does not match context tenant {ctx.tenant_info}",
            )
            return False
        return True

    @classmethod
    def validate_tenant_for_collection(cls, ctx: ExecutionContext, entities: Iterable["EntityBase"]) -> bool:
        for entity in entities:
            if entity.tenant_info is None or entity.tenant_info.code != ctx.tenant_info.code:
                ctx.add_error_message(cls.create_message_code(TENANT_MISMATCH))
                return False
        return True

    def is_valid(self, ctx: ExecutionContext) -> bool:
        results = [
            self.validate_entity_info(ctx, self._entity_info),
            self._is_valid_internal(ctx),
        ]
        return all(results)

    @abstractmethod
    def _is_valid_internal(self, ctx: ExecutionContext) -> bool:
        """Validate entity-specific fields."""

    @abstractmethod
    def clone(self) -> TEntity:
        """Return an independent copy sharing the immutable EntityInfo."""

    # Mutation pipeline

    @classmethod
    def _register_new_internal(
        cls,
        ctx: ExecutionContext,
        input: TInput,
        handler: Callable[[ExecutionContext, TInput, Any], bool],
    ) -> Optional[TEntity]:
        instance = cls()
        entity_info = EntityInfo.register_new(ctx, ctx.tenant_info, ctx.execution_user)
        if not instance._set_entity_info(ctx, entity_info):
            logger.debug(f"{cls.entity_name()} registration rejected: invalid entity info")
            return None

        if not handler(ctx, input, instance):
            logger.debug(f"{cls.entity_name()} registration rejected by field validation")
            return None

        return instance

    def _register_change_internal(
        self,
        ctx: ExecutionContext,
        input: TInput,
        handler: Callable[[ExecutionContext, TInput, Any], bool],
    ) -> Optional[TEntity]:
        if not self.validate_tenant_matches_context(ctx, self.tenant_info):
            return None

        new_instance = self.clone()
        entity_info = self._entity_info.register_change(ctx, ctx.execution_user)
        if not new_instance._set_entity_info(ctx, entity_info):
            return None

        if not handler(ctx, input, new_instance):
            logger.debug(f"{self.entity_name()} {self.id} change rejected")
            return None

        return new_instance

    def _set_entity_info(self, ctx: ExecutionContext, entity_info: EntityInfo) -> bool:
        if not self.validate_entity_info(ctx, entity_info):
            return False
        self._entity_info = entity_info
        return True

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, EntityBase) or type(self) is not type(other):
            return NotImplemented
        return self._entity_info == other._entity_info and self._fields() == other._fields()

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.id))

    def _fields(self) -> tuple:
        return ()

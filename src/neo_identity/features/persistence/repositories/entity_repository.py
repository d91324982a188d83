"""Generic optimistic-concurrency repository adapter.

EntityRepository sits between callers holding entities and a storage
collaborator holding rows. It owns the read-verify-write protocol:

* ``update`` and ``delete`` read the current row first. A missing row is a
  business outcome (False) and the write is never attempted.
* The expected version handed to the collaborator is always the version of
  the row just read, never the version carried by the caller's entity.
* A concurrency conflict, whether reported as False or raised as
  ConcurrencyConflictError, is returned as False. The adapter never retries.
"""

import itertools
import logging
from datetime import datetime
from typing import Awaitable, Callable, Generic, Iterable, List, Optional, TypeVar
from uuid import UUID

from ....core.entities.entity_base import EntityBase
from ....core.exceptions import ConcurrencyConflictError, InvalidArgumentError
from ....core.shared.cancellation import CancellationToken, ensure_token
from ....core.shared.clock import Clock
from ....core.shared.context import ExecutionContext
from ...pagination.entities import PaginationInfo
from ..entities.data_model import DataModelBase
from ..entities.protocols import DataModelRepository, ItemHandler
from ..mappers.base import DataModelMapper

logger = logging.getLogger(__name__)

TEntity = TypeVar("TEntity", bound=EntityBase)
TDataModel = TypeVar("TDataModel", bound=DataModelBase)


class EntityRepository(Generic[TEntity, TDataModel]):
    """Entity-facing repository delegating I/O to a storage collaborator."""

    def __init__(
        self,
        data_model_repository: DataModelRepository[TDataModel],
        mapper: DataModelMapper[TEntity, TDataModel],
    ):
        """Initialize with a storage collaborator and a mapper.

        Raises:
            InvalidArgumentError: if either dependency is missing
        """
        if data_model_repository is None:
            raise InvalidArgumentError("data_model_repository", "storage collaborator is required")
        if mapper is None:
            raise InvalidArgumentError("mapper", "data model mapper is required")

        self._data_model_repository = data_model_repository
        self._mapper = mapper

    @property
    def entity_name(self) -> str:
        return self._mapper.entity_name

    def _message_code(self, property_name: str, kind: str) -> str:
        return f"{self.entity_name}.{property_name}.{kind}"

    # Reads

    async def get_by_id(
        self,
        ctx: ExecutionContext,
        id: UUID,
        cancellation_token: Optional[CancellationToken] = None,
    ) -> Optional[TEntity]:
        token = ensure_token(cancellation_token)
        token.raise_if_cancellation_requested()

        data_model = await self._data_model_repository.get_by_id(ctx, id, token)
        if data_model is None:
            return None
        return self._mapper.to_entity(data_model)

    async def exists(
        self,
        ctx: ExecutionContext,
        id: UUID,
        cancellation_token: Optional[CancellationToken] = None,
    ) -> bool:
        token = ensure_token(cancellation_token)
        token.raise_if_cancellation_requested()
        return await self._data_model_repository.exists(ctx, id, token)

    # Writes

    async def register_new(
        self,
        ctx: ExecutionContext,
        entity: TEntity,
        cancellation_token: Optional[CancellationToken] = None,
    ) -> bool:
        token = ensure_token(cancellation_token)
        token.raise_if_cancellation_requested()

        data_model = self._mapper.to_data_model(entity)
        inserted = await self._data_model_repository.insert(ctx, data_model, token)
        if inserted:
            logger.debug(f"Registered {self.entity_name} {entity.id} (correlation_id={ctx.correlation_id})")
        return inserted

    async def update(
        self,
        ctx: ExecutionContext,
        entity: TEntity,
        cancellation_token: Optional[CancellationToken] = None,
    ) -> bool:
        token = ensure_token(cancellation_token)
        token.raise_if_cancellation_requested()

        existing = await self._data_model_repository.get_by_id(ctx, entity.id, token)
        if existing is None:
            self._report_not_found(ctx, entity.id, "update")
            return False

        expected_version = existing.entity_version
        self._mapper.adapt(existing, entity)

        token.raise_if_cancellation_requested()
        return await self._guard_conflict(
            ctx,
            entity.id,
            expected_version,
            lambda: self._data_model_repository.update(ctx, existing, expected_version, token),
        )

    async def delete(
        self,
        ctx: ExecutionContext,
        entity: TEntity,
        cancellation_token: Optional[CancellationToken] = None,
    ) -> bool:
        token = ensure_token(cancellation_token)
        token.raise_if_cancellation_requested()

        existing = await self._data_model_repository.get_by_id(ctx, entity.id, token)
        if existing is None:
            self._report_not_found(ctx, entity.id, "delete")
            return False

        expected_version = existing.entity_version

        token.raise_if_cancellation_requested()
        return await self._guard_conflict(
            ctx,
            entity.id,
            expected_version,
            lambda: self._data_model_repository.delete(ctx, existing.id, expected_version, token),
        )

    # Enumeration

    async def enumerate_all(
        self,
        ctx: ExecutionContext,
        pagination: PaginationInfo,
        handler: ItemHandler,
        cancellation_token: Optional[CancellationToken] = None,
    ) -> bool:
        """Feed one page of entities to ``handler`` until it returns False.

        The ordinal passed to the handler is the item's absolute position in
        the scan (``pagination.offset`` + position within the page).
        """
        token = ensure_token(cancellation_token)
        token.raise_if_cancellation_requested()

        row_handler = self._wrap_handler(ctx, handler, start=pagination.offset)
        return await self._data_model_repository.enumerate_all(ctx, pagination, row_handler, token)

    async def enumerate_modified_since(
        self,
        ctx: ExecutionContext,
        clock: Clock,
        since: datetime,
        handler: ItemHandler,
        cancellation_token: Optional[CancellationToken] = None,
    ) -> bool:
        """Feed entities created or changed at or after ``since``, oldest first."""
        token = ensure_token(cancellation_token)
        token.raise_if_cancellation_requested()

        if clock is not None:
            logger.debug(
                f"Enumerating {self.entity_name} changes since {since.isoformat()} "
                f"(window={clock.utc_now() - since}, correlation_id={ctx.correlation_id})"
            )

        row_handler = self._wrap_handler(ctx, handler, start=0)
        return await self._data_model_repository.enumerate_modified_since(ctx, since, row_handler, token)

    # Helpers for entity-specific finders

    def _to_entity(self, data_model: Optional[TDataModel]) -> Optional[TEntity]:
        return self._mapper.to_entity(data_model) if data_model is not None else None

    def _to_entities(self, data_models: Iterable[TDataModel]) -> List[TEntity]:
        return [self._mapper.to_entity(data_model) for data_model in data_models]

    def _wrap_handler(
        self,
        ctx: ExecutionContext,
        handler: ItemHandler,
        start: int,
    ) -> Callable[[TDataModel, CancellationToken], Awaitable[bool]]:
        ordinals = itertools.count(start)

        async def row_handler(data_model: TDataModel, token: CancellationToken) -> bool:
            entity = self._mapper.to_entity(data_model)
            return await handler(ctx, entity, next(ordinals), token)

        return row_handler

    def _report_not_found(self, ctx: ExecutionContext, id: UUID, operation: str) -> None:
        logger.debug(f"Cannot {operation} {self.entity_name} {id}: not found")
        ctx.add_warning_message(
            self._message_code("EntityInfo.Id", "NotFound"),
            f"{self.entity_name} '{id}' was not found",
        )

    async def _guard_conflict(
        self,
        ctx: ExecutionContext,
        id: UUID,
        expected_version: int,
        write: Callable[[], Awaitable[bool]],
    ) -> bool:
        try:
            return await write()
        except ConcurrencyConflictError as e:
            logger.info(f"{e} (expected_version={expected_version}, correlation_id={ctx.correlation_id})")
            ctx.add_error_message(
                self._message_code("EntityInfo.EntityVersion", "ConcurrencyConflict"),
                f"{self.entity_name} '{id}' was modified by another operation",
            )
            return False

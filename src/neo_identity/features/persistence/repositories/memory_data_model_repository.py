"""In-memory storage collaborator.

Keeps rows per tenant in a dict and deep-copies them on the way in and out,
so callers never share row objects with the store. Version checks and writes
happen without an intervening await, which makes each compare-and-swap
atomic with respect to other coroutines on the same event loop.
"""

import copy
import logging
from datetime import datetime
from typing import Callable, Dict, Generic, List, Optional, Tuple, TypeVar
from uuid import UUID

from ....core.exceptions import ConcurrencyConflictError
from ....core.shared.cancellation import CancellationToken
from ....core.shared.context import ExecutionContext
from ...pagination.entities import PaginationInfo
from ..entities.data_model import DataModelBase
from ..entities.protocols import RowHandler

logger = logging.getLogger(__name__)

TDataModel = TypeVar("TDataModel", bound=DataModelBase)


class InMemoryDataModelRepository(Generic[TDataModel]):
    """Tenant-scoped dict store implementing the DataModelRepository protocol."""

    def __init__(self, entity_name: str, raise_on_conflict: bool = False):
        """
        Args:
            entity_name: Entity type name used in message codes
            raise_on_conflict: Raise ConcurrencyConflictError on a stale
                version instead of returning False
        """
        self._entity_name = entity_name
        self._raise_on_conflict = raise_on_conflict
        self._rows: Dict[Tuple[UUID, UUID], TDataModel] = {}

    def __len__(self) -> int:
        return len(self._rows)

    @staticmethod
    def _key(ctx: ExecutionContext, id: UUID) -> Tuple[UUID, UUID]:
        return (ctx.tenant_info.code, id)

    def _tenant_rows(self, ctx: ExecutionContext) -> List[TDataModel]:
        tenant_code = ctx.tenant_info.code
        return [row for (code, _), row in self._rows.items() if code == tenant_code]

    async def get_by_id(
        self, ctx: ExecutionContext, id: UUID, cancellation_token: CancellationToken
    ) -> Optional[TDataModel]:
        cancellation_token.raise_if_cancellation_requested()
        row = self._rows.get(self._key(ctx, id))
        return copy.deepcopy(row) if row is not None else None

    async def exists(self, ctx: ExecutionContext, id: UUID, cancellation_token: CancellationToken) -> bool:
        cancellation_token.raise_if_cancellation_requested()
        return self._key(ctx, id) in self._rows

    async def insert(self, ctx: ExecutionContext, data_model: TDataModel, cancellation_token: CancellationToken) -> bool:
        cancellation_token.raise_if_cancellation_requested()

        if data_model.tenant_code != ctx.tenant_info.code:
            ctx.add_error_message(f"{self._entity_name}.TenantMismatch")
            return False

        key = self._key(ctx, data_model.id)
        if key in self._rows:
            ctx.add_error_message(
                f"{self._entity_name}.EntityInfo.Id.AlreadyExists",
                f"{self._entity_name} '{data_model.id}' already exists",
            )
            return False

        self._rows[key] = copy.deepcopy(data_model)
        return True

    async def update(
        self,
        ctx: ExecutionContext,
        data_model: TDataModel,
        expected_version: int,
        cancellation_token: CancellationToken,
    ) -> bool:
        cancellation_token.raise_if_cancellation_requested()

        key = self._key(ctx, data_model.id)
        stored = self._rows.get(key)
        if stored is None:
            return False
        if stored.entity_version != expected_version:
            return self._conflict(ctx, data_model.id, expected_version, stored.entity_version)

        self._rows[key] = copy.deepcopy(data_model)
        return True

    async def delete(
        self,
        ctx: ExecutionContext,
        id: UUID,
        expected_version: int,
        cancellation_token: CancellationToken,
    ) -> bool:
        cancellation_token.raise_if_cancellation_requested()

        key = self._key(ctx, id)
        stored = self._rows.get(key)
        if stored is None:
            return False
        if stored.entity_version != expected_version:
            return self._conflict(ctx, id, expected_version, stored.entity_version)

        del self._rows[key]
        return True

    async def enumerate_all(
        self,
        ctx: ExecutionContext,
        pagination: PaginationInfo,
        handler: RowHandler,
        cancellation_token: CancellationToken,
    ) -> bool:
        rows = sorted(self._tenant_rows(ctx), key=lambda row: row.id)
        if pagination.is_unbounded:
            page = rows
        else:
            page = rows[pagination.offset:pagination.offset + pagination.page_size]
        return await self._feed(page, handler, cancellation_token)

    async def enumerate_modified_since(
        self,
        ctx: ExecutionContext,
        since: datetime,
        handler: RowHandler,
        cancellation_token: CancellationToken,
    ) -> bool:
        rows = sorted(
            (row for row in self._tenant_rows(ctx) if row.last_modified_at >= since),
            key=lambda row: (row.last_modified_at, row.id),
        )
        return await self._feed(rows, handler, cancellation_token)

    # Lookup helpers used by entity-specific collaborators

    def find_one(self, ctx: ExecutionContext, predicate: Callable[[TDataModel], bool]) -> Optional[TDataModel]:
        for row in self._tenant_rows(ctx):
            if predicate(row):
                return copy.deepcopy(row)
        return None

    def find_all(self, ctx: ExecutionContext, predicate: Callable[[TDataModel], bool]) -> List[TDataModel]:
        matches = [row for row in self._tenant_rows(ctx) if predicate(row)]
        return [copy.deepcopy(row) for row in sorted(matches, key=lambda row: row.id)]

    def delete_where(self, ctx: ExecutionContext, predicate: Callable[[TDataModel], bool]) -> int:
        keys = [self._key(ctx, row.id) for row in self._tenant_rows(ctx) if predicate(row)]
        for key in keys:
            del self._rows[key]
        return len(keys)

    # Internals

    def _conflict(self, ctx: ExecutionContext, id: UUID, expected_version: int, actual_version: int) -> bool:
        logger.debug(
            f"Version conflict on {self._entity_name} {id}: expected {expected_version}, stored {actual_version}"
        )
        if self._raise_on_conflict:
            raise ConcurrencyConflictError(self._entity_name, id, expected_version, actual_version)
        ctx.add_error_message(f"{self._entity_name}.EntityInfo.EntityVersion.ConcurrencyConflict")
        return False

    @staticmethod
    async def _feed(rows: List[TDataModel], handler: RowHandler, cancellation_token: CancellationToken) -> bool:
        for row in rows:
            cancellation_token.raise_if_cancellation_requested()
            if not await handler(copy.deepcopy(row), cancellation_token):
                break
        return True

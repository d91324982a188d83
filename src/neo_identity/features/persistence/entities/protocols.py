"""Protocols for persistence collaborators.

A storage collaborator performs the actual I/O for one row type and is the
component that enforces the expected-version check atomically. Every query
is scoped to ``ctx.tenant_info.code``.
"""

from datetime import datetime
from typing import Awaitable, Callable, Optional, Protocol, TypeVar, runtime_checkable
from uuid import UUID

from ....core.shared.cancellation import CancellationToken
from ....core.shared.context import ExecutionContext
from ...pagination.entities import PaginationInfo
from .data_model import DataModelBase

TDataModel = TypeVar("TDataModel", bound=DataModelBase)
TEntity = TypeVar("TEntity")

# (row, token) -> continue?
RowHandler = Callable[[TDataModel, CancellationToken], Awaitable[bool]]

# (ctx, entity, ordinal, token) -> continue?
ItemHandler = Callable[[ExecutionContext, TEntity, int, CancellationToken], Awaitable[bool]]


@runtime_checkable
class DataModelRepository(Protocol[TDataModel]):
    """Storage collaborator contract consumed by EntityRepository."""

    async def get_by_id(
        self, ctx: ExecutionContext, id: UUID, cancellation_token: CancellationToken
    ) -> Optional[TDataModel]:
        """Fetch one row of the context tenant, or None."""
        ...

    async def exists(self, ctx: ExecutionContext, id: UUID, cancellation_token: CancellationToken) -> bool:
        ...

    async def insert(self, ctx: ExecutionContext, data_model: TDataModel, cancellation_token: CancellationToken) -> bool:
        ...

    async def update(
        self,
        ctx: ExecutionContext,
        data_model: TDataModel,
        expected_version: int,
        cancellation_token: CancellationToken,
    ) -> bool:
        """Write the row only if the stored version equals ``expected_version``.

        A stale version yields False or raises ConcurrencyConflictError.
        """
        ...

    async def delete(
        self,
        ctx: ExecutionContext,
        id: UUID,
        expected_version: int,
        cancellation_token: CancellationToken,
    ) -> bool:
        """Delete the row only if the stored version equals ``expected_version``."""
        ...

    async def enumerate_all(
        self,
        ctx: ExecutionContext,
        pagination: PaginationInfo,
        handler: RowHandler,
        cancellation_token: CancellationToken,
    ) -> bool:
        """Feed one page of rows to ``handler`` until it returns False."""
        ...

    async def enumerate_modified_since(
        self,
        ctx: ExecutionContext,
        since: datetime,
        handler: RowHandler,
        cancellation_token: CancellationToken,
    ) -> bool:
        """Feed rows created or changed at or after ``since``, oldest first."""
        ...

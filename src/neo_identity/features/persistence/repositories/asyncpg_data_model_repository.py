"""asyncpg storage collaborator.

Uses any asyncpg handle exposing ``fetchrow``/``fetch``/``fetchval``/
``execute`` (a Pool or a Connection) and a schema, so the same class serves
admin and tenant schemas. The column list comes from the data model
dataclass; the version check is part of the UPDATE/DELETE WHERE clause so
the compare-and-swap is atomic in PostgreSQL.
"""

import logging
from datetime import datetime
from typing import Any, Generic, List, Optional, Type, TypeVar
from uuid import UUID

import asyncpg

from ....core.shared.cancellation import CancellationToken
from ....core.shared.context import ExecutionContext
from ...pagination.entities import PaginationInfo
from ..entities.data_model import DataModelBase
from ..entities.protocols import RowHandler
from ..utils.error_handling import handle_storage_error, rows_affected
from ..utils.queries import (
    DATA_MODEL_GET_BY_ID,
    DATA_MODEL_EXISTS,
    DATA_MODEL_INSERT,
    DATA_MODEL_UPDATE,
    DATA_MODEL_DELETE,
    DATA_MODEL_ENUMERATE_ALL,
    DATA_MODEL_ENUMERATE_MODIFIED_SINCE,
)

logger = logging.getLogger(__name__)

TDataModel = TypeVar("TDataModel", bound=DataModelBase)

# $1 tenant_code, $2 id, $3 expected entity_version
UPDATE_KEY_COLUMNS = ("tenant_code", "id")
UPDATE_FIRST_VALUE_PARAMETER = 4


class AsyncpgDataModelRepository(Generic[TDataModel]):
    """Generic PostgreSQL collaborator for one data model table."""

    def __init__(
        self,
        database: Any,
        schema: str,
        table: str,
        data_model_type: Type[TDataModel],
        entity_name: str,
    ):
        """Initialize with an asyncpg pool or connection.

        Args:
            database: asyncpg Pool or Connection
            schema: Database schema name (admin, tenant-specific, etc.)
            table: Table name inside the schema
            data_model_type: Dataclass describing the row
            entity_name: Entity type name used in message codes
        """
        if database is None:
            raise ValueError("Database connection is required")

        self._db = database
        self._schema = schema
        self._table = f"{schema}.{table}"
        self._table_name = table
        self._data_model_type = data_model_type
        self._entity_name = entity_name

        self._columns = data_model_type.column_names()
        self._value_columns = tuple(c for c in self._columns if c not in UPDATE_KEY_COLUMNS)

    # Query rendering

    def _render(self, template: str, **extra: str) -> str:
        return template.format(
            schema=self._schema,
            table=self._table_name,
            columns=", ".join(self._columns),
            **extra,
        )

    def _insert_query(self) -> str:
        placeholders = ", ".join(f"${i}" for i in range(1, len(self._columns) + 1))
        return self._render(DATA_MODEL_INSERT, placeholders=placeholders)

    def _update_query(self) -> str:
        assignments = ",\n        ".join(
            f"{column} = ${index}"
            for index, column in enumerate(self._value_columns, start=UPDATE_FIRST_VALUE_PARAMETER)
        )
        return self._render(DATA_MODEL_UPDATE, assignments=assignments)

    def _to_data_model(self, record: Any) -> TDataModel:
        return self._data_model_type.from_record(record)

    # DataModelRepository protocol

    @handle_storage_error("get_by_id")
    async def get_by_id(
        self, ctx: ExecutionContext, id: UUID, cancellation_token: CancellationToken
    ) -> Optional[TDataModel]:
        cancellation_token.raise_if_cancellation_requested()
        query = self._render(DATA_MODEL_GET_BY_ID)
        row = await self._db.fetchrow(query, ctx.tenant_info.code, id)
        return self._to_data_model(row) if row else None

    @handle_storage_error("exists", default_return=False)
    async def exists(self, ctx: ExecutionContext, id: UUID, cancellation_token: CancellationToken) -> bool:
        cancellation_token.raise_if_cancellation_requested()
        query = self._render(DATA_MODEL_EXISTS)
        return bool(await self._db.fetchval(query, ctx.tenant_info.code, id))

    @handle_storage_error("insert", default_return=False)
    async def insert(self, ctx: ExecutionContext, data_model: TDataModel, cancellation_token: CancellationToken) -> bool:
        cancellation_token.raise_if_cancellation_requested()

        if data_model.tenant_code != ctx.tenant_info.code:
            ctx.add_error_message(f"{self._entity_name}.TenantMismatch")
            return False

        values = [getattr(data_model, column) for column in self._columns]
        try:
            result = await self._db.execute(self._insert_query(), *values)
        except asyncpg.UniqueViolationError:
            logger.info(f"{self._entity_name} {data_model.id} already exists in {self._table}")
            ctx.add_error_message(
                f"{self._entity_name}.EntityInfo.Id.AlreadyExists",
                f"{self._entity_name} '{data_model.id}' already exists",
            )
            return False
        return rows_affected(result) == 1

    @handle_storage_error("update", default_return=False)
    async def update(
        self,
        ctx: ExecutionContext,
        data_model: TDataModel,
        expected_version: int,
        cancellation_token: CancellationToken,
    ) -> bool:
        cancellation_token.raise_if_cancellation_requested()

        values = [getattr(data_model, column) for column in self._value_columns]
        result = await self._db.execute(
            self._update_query(),
            ctx.tenant_info.code,
            data_model.id,
            expected_version,
            *values,
        )
        if rows_affected(result) != 1:
            self._report_stale_version(ctx, data_model.id, expected_version)
            return False
        return True

    @handle_storage_error("delete", default_return=False)
    async def delete(
        self,
        ctx: ExecutionContext,
        id: UUID,
        expected_version: int,
        cancellation_token: CancellationToken,
    ) -> bool:
        cancellation_token.raise_if_cancellation_requested()

        query = self._render(DATA_MODEL_DELETE)
        result = await self._db.execute(query, ctx.tenant_info.code, id, expected_version)
        if rows_affected(result) != 1:
            self._report_stale_version(ctx, id, expected_version)
            return False
        return True

    @handle_storage_error("enumerate_all", default_return=False)
    async def enumerate_all(
        self,
        ctx: ExecutionContext,
        pagination: PaginationInfo,
        handler: RowHandler,
        cancellation_token: CancellationToken,
    ) -> bool:
        cancellation_token.raise_if_cancellation_requested()
        query = self._render(DATA_MODEL_ENUMERATE_ALL)
        rows = await self._db.fetch(query, ctx.tenant_info.code, pagination.limit, pagination.offset)
        await self._feed(rows, handler, cancellation_token)
        return True

    @handle_storage_error("enumerate_modified_since", default_return=False)
    async def enumerate_modified_since(
        self,
        ctx: ExecutionContext,
        since: datetime,
        handler: RowHandler,
        cancellation_token: CancellationToken,
    ) -> bool:
        cancellation_token.raise_if_cancellation_requested()
        query = self._render(DATA_MODEL_ENUMERATE_MODIFIED_SINCE)
        rows = await self._db.fetch(query, ctx.tenant_info.code, since)
        await self._feed(rows, handler, cancellation_token)
        return True

    # Helpers for entity-specific finders

    async def _fetch_one(self, template: str, *args: Any) -> Optional[TDataModel]:
        row = await self._db.fetchrow(self._render(template), *args)
        return self._to_data_model(row) if row else None

    async def _fetch_many(self, template: str, *args: Any) -> List[TDataModel]:
        rows = await self._db.fetch(self._render(template), *args)
        return [self._to_data_model(row) for row in rows]

    async def _execute_count(self, template: str, *args: Any) -> int:
        return rows_affected(await self._db.execute(self._render(template), *args))

    async def _feed(self, rows: List[Any], handler: RowHandler, cancellation_token: CancellationToken) -> None:
        for row in rows:
            cancellation_token.raise_if_cancellation_requested()
            if not await handler(self._to_data_model(row), cancellation_token):
                break

    def _report_stale_version(self, ctx: ExecutionContext, id: UUID, expected_version: int) -> None:
        logger.debug(f"No {self._entity_name} row {id} at version {expected_version} in {self._table}")
        ctx.add_error_message(
            f"{self._entity_name}.EntityInfo.EntityVersion.ConcurrencyConflict",
            f"{self._entity_name} '{id}' is not at version {expected_version}",
        )

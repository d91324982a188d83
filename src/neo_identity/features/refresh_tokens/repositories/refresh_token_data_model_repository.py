"""Storage collaborators for refresh tokens."""

from typing import Any, List, Optional
from uuid import UUID

from ....core.shared.cancellation import CancellationToken
from ....core.shared.context import ExecutionContext
from ...persistence.repositories.asyncpg_data_model_repository import AsyncpgDataModelRepository
from ...persistence.repositories.memory_data_model_repository import InMemoryDataModelRepository
from ...persistence.utils.error_handling import handle_storage_error
from ..entities.refresh_token import RefreshToken, RefreshTokenStatus
from ..models.data_model import RefreshTokenDataModel
from ..utils.queries import (
    REFRESH_TOKEN_GET_BY_USER_ID,
    REFRESH_TOKEN_GET_BY_TOKEN_HASH,
    REFRESH_TOKEN_GET_ACTIVE_BY_FAMILY_ID,
)

REFRESH_TOKENS_TABLE = "refresh_tokens"


class AsyncpgRefreshTokenDataModelRepository(AsyncpgDataModelRepository[RefreshTokenDataModel]):
    """PostgreSQL storage for refresh tokens."""

    def __init__(self, database: Any, schema: str):
        super().__init__(
            database,
            schema,
            REFRESH_TOKENS_TABLE,
            RefreshTokenDataModel,
            RefreshToken.entity_name(),
        )

    @handle_storage_error("get_by_user_id", default_return=list)
    async def get_by_user_id(
        self, ctx: ExecutionContext, user_id: UUID, cancellation_token: CancellationToken
    ) -> List[RefreshTokenDataModel]:
        cancellation_token.raise_if_cancellation_requested()
        return await self._fetch_many(REFRESH_TOKEN_GET_BY_USER_ID, ctx.tenant_info.code, user_id)

    @handle_storage_error("get_by_token_hash")
    async def get_by_token_hash(
        self, ctx: ExecutionContext, token_hash: bytes, cancellation_token: CancellationToken
    ) -> Optional[RefreshTokenDataModel]:
        cancellation_token.raise_if_cancellation_requested()
        return await self._fetch_one(REFRESH_TOKEN_GET_BY_TOKEN_HASH, ctx.tenant_info.code, token_hash)

    @handle_storage_error("get_active_by_family_id", default_return=list)
    async def get_active_by_family_id(
        self, ctx: ExecutionContext, family_id: UUID, cancellation_token: CancellationToken
    ) -> List[RefreshTokenDataModel]:
        cancellation_token.raise_if_cancellation_requested()
        return await self._fetch_many(
            REFRESH_TOKEN_GET_ACTIVE_BY_FAMILY_ID,
            ctx.tenant_info.code,
            family_id,
            int(RefreshTokenStatus.ACTIVE),
        )


class InMemoryRefreshTokenDataModelRepository(InMemoryDataModelRepository[RefreshTokenDataModel]):
    """In-memory storage for refresh tokens."""

    def __init__(self, raise_on_conflict: bool = False):
        super().__init__(RefreshToken.entity_name(), raise_on_conflict=raise_on_conflict)

    async def get_by_user_id(
        self, ctx: ExecutionContext, user_id: UUID, cancellation_token: CancellationToken
    ) -> List[RefreshTokenDataModel]:
        cancellation_token.raise_if_cancellation_requested()
        return self.find_all(ctx, lambda row: row.user_id == user_id)

    async def get_by_token_hash(
        self, ctx: ExecutionContext, token_hash: bytes, cancellation_token: CancellationToken
    ) -> Optional[RefreshTokenDataModel]:
        cancellation_token.raise_if_cancellation_requested()
        return self.find_one(ctx, lambda row: row.token_hash == token_hash)

    async def get_active_by_family_id(
        self, ctx: ExecutionContext, family_id: UUID, cancellation_token: CancellationToken
    ) -> List[RefreshTokenDataModel]:
        cancellation_token.raise_if_cancellation_requested()
        return self.find_all(
            ctx,
            lambda row: row.family_id == family_id and row.status == RefreshTokenStatus.ACTIVE,
        )

"""Storage collaborators for password reset tokens."""

import logging
from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from ....core.shared.cancellation import CancellationToken
from ....core.shared.context import ExecutionContext
from ...persistence.repositories.asyncpg_data_model_repository import AsyncpgDataModelRepository
from ...persistence.repositories.memory_data_model_repository import InMemoryDataModelRepository
from ...persistence.utils.error_handling import handle_storage_error
from ..entities.password_reset_token import PasswordResetToken
from ..models.data_model import PasswordResetTokenDataModel
from ..utils.queries import (
    PASSWORD_RESET_TOKEN_GET_BY_TOKEN_HASH,
    PASSWORD_RESET_TOKEN_DELETE_ALL_BY_USER_ID,
    PASSWORD_RESET_TOKEN_DELETE_EXPIRED,
)

logger = logging.getLogger(__name__)

PASSWORD_RESET_TOKENS_TABLE = "password_reset_tokens"


class AsyncpgPasswordResetTokenDataModelRepository(AsyncpgDataModelRepository[PasswordResetTokenDataModel]):
    """PostgreSQL storage for password reset tokens."""

    def __init__(self, database: Any, schema: str):
        super().__init__(
            database,
            schema,
            PASSWORD_RESET_TOKENS_TABLE,
            PasswordResetTokenDataModel,
            PasswordResetToken.entity_name(),
        )

    @handle_storage_error("get_by_token_hash")
    async def get_by_token_hash(
        self, ctx: ExecutionContext, token_hash: str, cancellation_token: CancellationToken
    ) -> Optional[PasswordResetTokenDataModel]:
        cancellation_token.raise_if_cancellation_requested()
        return await self._fetch_one(PASSWORD_RESET_TOKEN_GET_BY_TOKEN_HASH, ctx.tenant_info.code, token_hash)

    @handle_storage_error("delete_all_by_user_id", default_return=0)
    async def delete_all_by_user_id(
        self, ctx: ExecutionContext, user_id: UUID, cancellation_token: CancellationToken
    ) -> int:
        cancellation_token.raise_if_cancellation_requested()
        return await self._execute_count(PASSWORD_RESET_TOKEN_DELETE_ALL_BY_USER_ID, ctx.tenant_info.code, user_id)

    @handle_storage_error("delete_expired", default_return=0)
    async def delete_expired(
        self, ctx: ExecutionContext, reference_date: datetime, cancellation_token: CancellationToken
    ) -> int:
        cancellation_token.raise_if_cancellation_requested()
        return await self._execute_count(PASSWORD_RESET_TOKEN_DELETE_EXPIRED, ctx.tenant_info.code, reference_date)


class InMemoryPasswordResetTokenDataModelRepository(InMemoryDataModelRepository[PasswordResetTokenDataModel]):
    """In-memory storage for password reset tokens."""

    def __init__(self, raise_on_conflict: bool = False):
        super().__init__(PasswordResetToken.entity_name(), raise_on_conflict=raise_on_conflict)

    async def get_by_token_hash(
        self, ctx: ExecutionContext, token_hash: str, cancellation_token: CancellationToken
    ) -> Optional[PasswordResetTokenDataModel]:
        cancellation_token.raise_if_cancellation_requested()
        return self.find_one(ctx, lambda row: row.token_hash == token_hash)

    async def delete_all_by_user_id(
        self, ctx: ExecutionContext, user_id: UUID, cancellation_token: CancellationToken
    ) -> int:
        cancellation_token.raise_if_cancellation_requested()
        return self.delete_where(ctx, lambda row: row.user_id == user_id)

    async def delete_expired(
        self, ctx: ExecutionContext, reference_date: datetime, cancellation_token: CancellationToken
    ) -> int:
        cancellation_token.raise_if_cancellation_requested()
        return self.delete_where(ctx, lambda row: row.expires_at < reference_date)

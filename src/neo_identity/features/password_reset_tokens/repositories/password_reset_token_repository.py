"""Entity-facing repository for password reset tokens."""

import logging
from datetime import datetime
from typing import Optional
from uuid import UUID

from ....core.shared.cancellation import CancellationToken, ensure_token
from ....core.shared.context import ExecutionContext
from ...persistence.repositories.entity_repository import EntityRepository
from ..entities.password_reset_token import PasswordResetToken
from ..entities.protocols import PasswordResetTokenDataModelRepository
from ..mappers.password_reset_token_mapper import PasswordResetTokenMapper
from ..models.data_model import PasswordResetTokenDataModel

logger = logging.getLogger(__name__)


class PasswordResetTokenRepository(EntityRepository[PasswordResetToken, PasswordResetTokenDataModel]):
    """Optimistic-concurrency repository plus password reset token finders."""

    def __init__(
        self,
        data_model_repository: PasswordResetTokenDataModelRepository,
        mapper: Optional[PasswordResetTokenMapper] = None,
    ):
        super().__init__(data_model_repository, mapper or PasswordResetTokenMapper())
        self._tokens = data_model_repository

    async def get_by_token_hash(
        self,
        ctx: ExecutionContext,
        token_hash: str,
        cancellation_token: Optional[CancellationToken] = None,
    ) -> Optional[PasswordResetToken]:
        token = ensure_token(cancellation_token)
        token.raise_if_cancellation_requested()
        return self._to_entity(await self._tokens.get_by_token_hash(ctx, token_hash, token))

    async def revoke_all_by_user_id(
        self,
        ctx: ExecutionContext,
        user_id: UUID,
        cancellation_token: Optional[CancellationToken] = None,
    ) -> int:
        """Remove every outstanding token of a user, e.g. after a password change."""
        token = ensure_token(cancellation_token)
        token.raise_if_cancellation_requested()

        revoked = await self._tokens.delete_all_by_user_id(ctx, user_id, token)
        logger.info(f"Revoked {revoked} password reset token(s) for user {user_id} (correlation_id={ctx.correlation_id})")
        return revoked

    async def delete_expired(
        self,
        ctx: ExecutionContext,
        reference_date: datetime,
        cancellation_token: Optional[CancellationToken] = None,
    ) -> int:
        token = ensure_token(cancellation_token)
        token.raise_if_cancellation_requested()

        deleted = await self._tokens.delete_expired(ctx, reference_date, token)
        logger.debug(f"Deleted {deleted} password reset token(s) expired before {reference_date.isoformat()}")
        return deleted

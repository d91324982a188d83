"""Entity-facing repository for refresh tokens."""

from typing import List, Optional
from uuid import UUID

from ....core.shared.cancellation import CancellationToken, ensure_token
from ....core.shared.context import ExecutionContext
from ...persistence.repositories.entity_repository import EntityRepository
from ..entities.protocols import RefreshTokenDataModelRepository
from ..entities.refresh_token import RefreshToken
from ..mappers.refresh_token_mapper import RefreshTokenMapper
from ..models.data_model import RefreshTokenDataModel


class RefreshTokenRepository(EntityRepository[RefreshToken, RefreshTokenDataModel]):
    """Optimistic-concurrency repository plus refresh token finders."""

    def __init__(
        self,
        data_model_repository: RefreshTokenDataModelRepository,
        mapper: Optional[RefreshTokenMapper] = None,
    ):
        super().__init__(data_model_repository, mapper or RefreshTokenMapper())
        self._tokens = data_model_repository

    async def get_by_user_id(
        self,
        ctx: ExecutionContext,
        user_id: UUID,
        cancellation_token: Optional[CancellationToken] = None,
    ) -> List[RefreshToken]:
        token = ensure_token(cancellation_token)
        token.raise_if_cancellation_requested()
        return self._to_entities(await self._tokens.get_by_user_id(ctx, user_id, token))

    async def get_by_token_hash(
        self,
        ctx: ExecutionContext,
        token_hash: bytes,
        cancellation_token: Optional[CancellationToken] = None,
    ) -> Optional[RefreshToken]:
        token = ensure_token(cancellation_token)
        token.raise_if_cancellation_requested()
        return self._to_entity(await self._tokens.get_by_token_hash(ctx, token_hash, token))

    async def get_active_by_family_id(
        self,
        ctx: ExecutionContext,
        family_id: UUID,
        cancellation_token: Optional[CancellationToken] = None,
    ) -> List[RefreshToken]:
        """Active tokens of a family, used to revoke the family on token reuse."""
        token = ensure_token(cancellation_token)
        token.raise_if_cancellation_requested()
        return self._to_entities(await self._tokens.get_active_by_family_id(ctx, family_id, token))

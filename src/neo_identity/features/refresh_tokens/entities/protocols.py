"""Protocols for refresh token storage."""

from typing import List, Optional, Protocol, runtime_checkable
from uuid import UUID

from ....core.shared.cancellation import CancellationToken
from ....core.shared.context import ExecutionContext
from ...persistence.entities.protocols import DataModelRepository
from ..models.data_model import RefreshTokenDataModel


@runtime_checkable
class RefreshTokenDataModelRepository(DataModelRepository[RefreshTokenDataModel], Protocol):
    """Storage collaborator with refresh token lookups."""

    async def get_by_user_id(
        self, ctx: ExecutionContext, user_id: UUID, cancellation_token: CancellationToken
    ) -> List[RefreshTokenDataModel]:
        ...

    async def get_by_token_hash(
        self, ctx: ExecutionContext, token_hash: bytes, cancellation_token: CancellationToken
    ) -> Optional[RefreshTokenDataModel]:
        ...

    async def get_active_by_family_id(
        self, ctx: ExecutionContext, family_id: UUID, cancellation_token: CancellationToken
    ) -> List[RefreshTokenDataModel]:
        ...

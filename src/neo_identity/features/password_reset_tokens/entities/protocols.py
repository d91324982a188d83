"""Protocols for password reset token storage."""

from datetime import datetime
from typing import Optional, Protocol, runtime_checkable
from uuid import UUID

from ....core.shared.cancellation import CancellationToken
from ....core.shared.context import ExecutionContext
from ...persistence.entities.protocols import DataModelRepository
from ..models.data_model import PasswordResetTokenDataModel


@runtime_checkable
class PasswordResetTokenDataModelRepository(DataModelRepository[PasswordResetTokenDataModel], Protocol):
    """Storage collaborator with password reset token lookups."""

    async def get_by_token_hash(
        self, ctx: ExecutionContext, token_hash: str, cancellation_token: CancellationToken
    ) -> Optional[PasswordResetTokenDataModel]:
        ...

    async def delete_all_by_user_id(
        self, ctx: ExecutionContext, user_id: UUID, cancellation_token: CancellationToken
    ) -> int:
        """Delete every token of a user; returns the number removed."""
        ...

    async def delete_expired(
        self, ctx: ExecutionContext, reference_date: datetime, cancellation_token: CancellationToken
    ) -> int:
        """Delete tokens that expired before ``reference_date``."""
        ...

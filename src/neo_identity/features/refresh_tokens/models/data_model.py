"""Storage row for refresh tokens."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID

from ...persistence.entities.data_model import DataModelBase


@dataclass(kw_only=True)
class RefreshTokenDataModel(DataModelBase):
    user_id: UUID
    token_hash: bytes
    family_id: UUID
    expires_at: datetime
    status: int
    revoked_at: Optional[datetime] = None
    replaced_by_token_id: Optional[UUID] = None

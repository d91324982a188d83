"""Storage row for password reset tokens."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID

from ...persistence.entities.data_model import DataModelBase


@dataclass(kw_only=True)
class PasswordResetTokenDataModel(DataModelBase):
    user_id: UUID
    token_hash: str
    expires_at: datetime
    is_used: bool = False
    used_at: Optional[datetime] = None

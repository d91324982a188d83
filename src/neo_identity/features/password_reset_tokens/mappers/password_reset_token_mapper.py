"""Mapping between PasswordResetToken and its storage row."""

from typing import Any, Dict

from ...persistence.mappers.base import DataModelMapper, entity_info_from_data_model
from ..entities.password_reset_token import (
    PasswordResetToken,
    CreateFromExistingInfoPasswordResetTokenInput,
)
from ..models.data_model import PasswordResetTokenDataModel


class PasswordResetTokenMapper(DataModelMapper[PasswordResetToken, PasswordResetTokenDataModel]):
    entity_type = PasswordResetToken
    data_model_type = PasswordResetTokenDataModel

    def field_columns(self, entity: PasswordResetToken) -> Dict[str, Any]:
        return {
            "user_id": entity.user_id,
            "token_hash": entity.token_hash,
            "expires_at": entity.expires_at,
            "is_used": entity.is_used,
            "used_at": entity.used_at,
        }

    def to_entity(self, data_model: PasswordResetTokenDataModel) -> PasswordResetToken:
        return PasswordResetToken.create_from_existing_info(
            CreateFromExistingInfoPasswordResetTokenInput(
                entity_info=entity_info_from_data_model(data_model),
                user_id=data_model.user_id,
                token_hash=data_model.token_hash,
                expires_at=data_model.expires_at,
                is_used=data_model.is_used,
                used_at=data_model.used_at,
            )
        )

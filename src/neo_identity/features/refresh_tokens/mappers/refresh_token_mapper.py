"""Mapping between RefreshToken and its storage row."""

from typing import Any, Dict

from ...persistence.mappers.base import DataModelMapper, entity_info_from_data_model
from ..entities.refresh_token import (
    RefreshToken,
    RefreshTokenStatus,
    CreateFromExistingInfoRefreshTokenInput,
)
from ..models.data_model import RefreshTokenDataModel


class RefreshTokenMapper(DataModelMapper[RefreshToken, RefreshTokenDataModel]):
    entity_type = RefreshToken
    data_model_type = RefreshTokenDataModel

    def field_columns(self, entity: RefreshToken) -> Dict[str, Any]:
        return {
            "user_id": entity.user_id,
            "token_hash": entity.token_hash,
            "family_id": entity.family_id,
            "expires_at": entity.expires_at,
            "status": int(entity.status),
            "revoked_at": entity.revoked_at,
            "replaced_by_token_id": entity.replaced_by_token_id,
        }

    def to_entity(self, data_model: RefreshTokenDataModel) -> RefreshToken:
        return RefreshToken.create_from_existing_info(
            CreateFromExistingInfoRefreshTokenInput(
                entity_info=entity_info_from_data_model(data_model),
                user_id=data_model.user_id,
                token_hash=bytes(data_model.token_hash),
                family_id=data_model.family_id,
                expires_at=data_model.expires_at,
                status=RefreshTokenStatus(data_model.status),
                revoked_at=data_model.revoked_at,
                replaced_by_token_id=data_model.replaced_by_token_id,
            )
        )

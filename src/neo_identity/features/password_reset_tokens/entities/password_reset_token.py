"""Password reset token entity.

A single-use token with an expiry. Only the hash of the token is stored.

States: Active after registration, Consumed after ``mark_used``. Expiry is
derived from ``expires_at`` and never stored; ``mark_used`` does not check it.
"""

import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Any, ClassVar, Dict, Optional
from uuid import UUID

from ....core.entities.entity_base import EntityBase
from ....core.entities.entity_info import EntityInfo
from ....core.entities.validation import validate_is_required, validate_text
from ....core.shared.context import ExecutionContext
from ....utils.uuid import NIL_UUID

ALREADY_USED = "AlreadyUsed"


class PasswordResetTokenMetadata:
    """Validation rules for PasswordResetToken fields."""

    _lock: ClassVar[threading.Lock] = threading.Lock()

    USER_ID_PROPERTY_NAME: ClassVar[str] = "UserId"
    TOKEN_HASH_PROPERTY_NAME: ClassVar[str] = "TokenHash"
    EXPIRES_AT_PROPERTY_NAME: ClassVar[str] = "ExpiresAt"
    IS_USED_PROPERTY_NAME: ClassVar[str] = "IsUsed"

    user_id_is_required: ClassVar[bool] = True
    token_hash_is_required: ClassVar[bool] = True
    token_hash_min_length: ClassVar[int] = 1
    token_hash_max_length: ClassVar[int] = 128
    expires_at_is_required: ClassVar[bool] = True

    @classmethod
    def change_user_id_metadata(cls, is_required: bool) -> None:
        with cls._lock:
            cls.user_id_is_required = is_required

    @classmethod
    def change_token_hash_metadata(cls, is_required: bool, max_length: int) -> None:
        with cls._lock:
            cls.token_hash_is_required = is_required
            cls.token_hash_max_length = max_length

    @classmethod
    def change_expires_at_metadata(cls, is_required: bool) -> None:
        with cls._lock:
            cls.expires_at_is_required = is_required


@dataclass(frozen=True)
class RegisterNewPasswordResetTokenInput:
    user_id: UUID
    token_hash: str
    expires_at: datetime


@dataclass(frozen=True)
class CreateFromExistingInfoPasswordResetTokenInput:
    entity_info: EntityInfo
    user_id: UUID
    token_hash: str
    expires_at: datetime
    is_used: bool
    used_at: Optional[datetime] = None


@dataclass(frozen=True)
class MarkUsedPasswordResetTokenInput:
    pass


class PasswordResetToken(EntityBase["PasswordResetToken"]):
    """Single-use, expiring password reset token."""

    def __init__(
        self,
        entity_info: Optional[EntityInfo] = None,
        user_id: UUID = NIL_UUID,
        token_hash: str = "",
        expires_at: Optional[datetime] = None,
        is_used: bool = False,
        used_at: Optional[datetime] = None,
    ):
        super().__init__(entity_info)
        self._user_id = user_id
        self._token_hash = token_hash
        self._expires_at = expires_at
        self._is_used = is_used
        self._used_at = used_at

    @property
    def user_id(self) -> UUID:
        return self._user_id

    @property
    def token_hash(self) -> str:
        return self._token_hash

    @property
    def expires_at(self) -> Optional[datetime]:
        return self._expires_at

    @property
    def is_used(self) -> bool:
        return self._is_used

    @property
    def used_at(self) -> Optional[datetime]:
        return self._used_at

    def is_expired(self, now: datetime) -> bool:
        return self._expires_at is not None and now > self._expires_at

    # Construction paths

    @classmethod
    def register_new(
        cls,
        ctx: ExecutionContext,
        input: RegisterNewPasswordResetTokenInput,
    ) -> Optional["PasswordResetToken"]:
        def handler(ctx: ExecutionContext, input: RegisterNewPasswordResetTokenInput, instance: "PasswordResetToken") -> bool:
            results = [
                instance._set_user_id(ctx, input.user_id),
                instance._set_token_hash(ctx, input.token_hash),
                instance._set_expires_at(ctx, input.expires_at),
                instance._set_is_used(False),
                instance._set_used_at(None),
            ]
            return all(results)

        return cls._register_new_internal(ctx, input, handler)

    @classmethod
    def create_from_existing_info(cls, input: CreateFromExistingInfoPasswordResetTokenInput) -> "PasswordResetToken":
        return cls(
            entity_info=input.entity_info,
            user_id=input.user_id,
            token_hash=input.token_hash,
            expires_at=input.expires_at,
            is_used=input.is_used,
            used_at=input.used_at,
        )

    def mark_used(
        self,
        ctx: ExecutionContext,
        input: Optional[MarkUsedPasswordResetTokenInput] = None,
    ) -> Optional["PasswordResetToken"]:
        """Consume the token. Fails with ``IsUsed.AlreadyUsed`` if already consumed."""
        return self._register_change_internal(
            ctx,
            input or MarkUsedPasswordResetTokenInput(),
            lambda ctx, input, new_instance: new_instance._mark_used_internal(ctx),
        )

    def clone(self) -> "PasswordResetToken":
        return PasswordResetToken(
            entity_info=self._entity_info,
            user_id=self._user_id,
            token_hash=self._token_hash,
            expires_at=self._expires_at,
            is_used=self._is_used,
            used_at=self._used_at,
        )

    def _mark_used_internal(self, ctx: ExecutionContext) -> bool:
        if self._is_used:
            ctx.add_error_message(
                self.create_message_code(PasswordResetTokenMetadata.IS_USED_PROPERTY_NAME, ALREADY_USED),
                f"Password reset token {self.id} was already used at {self._used_at}",
            )
            return False

        self._is_used = True
        self._used_at = ctx.timestamp
        return True

    # Validation

    @classmethod
    def is_valid_values(
        cls,
        ctx: ExecutionContext,
        entity_info: Optional[EntityInfo],
        user_id: Optional[UUID],
        token_hash: Optional[str],
        expires_at: Optional[datetime],
    ) -> bool:
        """Pre-validate candidate values without constructing an entity."""
        results = [
            cls.validate_entity_info(ctx, entity_info),
            cls.validate_user_id(ctx, user_id),
            cls.validate_token_hash(ctx, token_hash),
            cls.validate_expires_at(ctx, expires_at),
        ]
        return all(results)

    def _is_valid_internal(self, ctx: ExecutionContext) -> bool:
        results = [
            self.validate_user_id(ctx, self._user_id),
            self.validate_token_hash(ctx, self._token_hash),
            self.validate_expires_at(ctx, self._expires_at),
        ]
        return all(results)

    @classmethod
    def validate_user_id(cls, ctx: ExecutionContext, user_id: Optional[UUID]) -> bool:
        return validate_is_required(
            ctx,
            cls.create_message_code(PasswordResetTokenMetadata.USER_ID_PROPERTY_NAME),
            PasswordResetTokenMetadata.user_id_is_required,
            user_id,
        )

    @classmethod
    def validate_token_hash(cls, ctx: ExecutionContext, token_hash: Optional[str]) -> bool:
        return validate_text(
            ctx,
            cls.create_message_code(PasswordResetTokenMetadata.TOKEN_HASH_PROPERTY_NAME),
            token_hash,
            is_required=PasswordResetTokenMetadata.token_hash_is_required,
            min_length=PasswordResetTokenMetadata.token_hash_min_length,
            max_length=PasswordResetTokenMetadata.token_hash_max_length,
        )

    @classmethod
    def validate_expires_at(cls, ctx: ExecutionContext, expires_at: Optional[datetime]) -> bool:
        return validate_is_required(
            ctx,
            cls.create_message_code(PasswordResetTokenMetadata.EXPIRES_AT_PROPERTY_NAME),
            PasswordResetTokenMetadata.expires_at_is_required,
            expires_at,
        )

    # Validated setters

    def _set_user_id(self, ctx: ExecutionContext, user_id: UUID) -> bool:
        if not self.validate_user_id(ctx, user_id):
            return False
        self._user_id = user_id
        return True

    def _set_token_hash(self, ctx: ExecutionContext, token_hash: str) -> bool:
        if not self.validate_token_hash(ctx, token_hash):
            return False
        self._token_hash = token_hash
        return True

    def _set_expires_at(self, ctx: ExecutionContext, expires_at: datetime) -> bool:
        if not self.validate_expires_at(ctx, expires_at):
            return False
        self._expires_at = expires_at
        return True

    def _set_is_used(self, is_used: bool) -> bool:
        self._is_used = is_used
        return True

    def _set_used_at(self, used_at: Optional[datetime]) -> bool:
        self._used_at = used_at
        return True

    def _fields(self) -> tuple:
        return (self._user_id, self._token_hash, self._expires_at, self._is_used, self._used_at)

    def to_dict(self) -> Dict[str, Any]:
        return {
            **self._entity_info.to_dict(),
            "user_id": str(self._user_id),
            "expires_at": self._expires_at.isoformat() if self._expires_at else None,
            "is_used": self._is_used,
            "used_at": self._used_at.isoformat() if self._used_at else None,
        }

    def __str__(self) -> str:
        return f"PasswordResetToken(id={self.id}, user_id={self._user_id}, is_used={self._is_used})"

    def __repr__(self) -> str:
        return (
            f"PasswordResetToken(id={self.id}, user_id={self._user_id}, "
            f"expires_at={self._expires_at}, is_used={self._is_used}, used_at={self._used_at})"
        )

"""Refresh token entity with rotation and revocation."""

import threading
from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum
from typing import Any, ClassVar, Dict, FrozenSet, Optional, Tuple
from uuid import UUID

from ....core.entities.entity_base import EntityBase
from ....core.entities.entity_info import EntityInfo
from ....core.entities.validation import IS_REQUIRED, validate_is_required, validate_max_length
from ....core.shared.context import ExecutionContext
from ....utils.uuid import NIL_UUID

SAME_STATUS = "SameStatus"
INVALID_TRANSITION = "InvalidTransition"


class RefreshTokenStatus(IntEnum):
    ACTIVE = 1
    USED = 2
    REVOKED = 3


ALLOWED_TRANSITIONS: FrozenSet[Tuple[RefreshTokenStatus, RefreshTokenStatus]] = frozenset({
    (RefreshTokenStatus.ACTIVE, RefreshTokenStatus.USED),
    (RefreshTokenStatus.ACTIVE, RefreshTokenStatus.REVOKED),
})


class RefreshTokenMetadata:
    """Validation rules for RefreshToken fields."""

    _lock: ClassVar[threading.Lock] = threading.Lock()

    USER_ID_PROPERTY_NAME: ClassVar[str] = "UserId"
    TOKEN_HASH_PROPERTY_NAME: ClassVar[str] = "TokenHash"
    FAMILY_ID_PROPERTY_NAME: ClassVar[str] = "FamilyId"
    EXPIRES_AT_PROPERTY_NAME: ClassVar[str] = "ExpiresAt"
    STATUS_PROPERTY_NAME: ClassVar[str] = "Status"

    user_id_is_required: ClassVar[bool] = True
    token_hash_is_required: ClassVar[bool] = True
    token_hash_max_length: ClassVar[int] = 64
    family_id_is_required: ClassVar[bool] = True
    expires_at_is_required: ClassVar[bool] = True
    status_is_required: ClassVar[bool] = True

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
    def change_family_id_metadata(cls, is_required: bool) -> None:
        with cls._lock:
            cls.family_id_is_required = is_required

    @classmethod
    def change_expires_at_metadata(cls, is_required: bool) -> None:
        with cls._lock:
            cls.expires_at_is_required = is_required

    @classmethod
    def change_status_metadata(cls, is_required: bool) -> None:
        with cls._lock:
            cls.status_is_required = is_required


@dataclass(frozen=True)
class RegisterNewRefreshTokenInput:
    user_id: UUID
    token_hash: bytes
    family_id: UUID
    expires_at: datetime


@dataclass(frozen=True)
class CreateFromExistingInfoRefreshTokenInput:
    entity_info: EntityInfo
    user_id: UUID
    token_hash: bytes
    family_id: UUID
    expires_at: datetime
    status: RefreshTokenStatus
    revoked_at: Optional[datetime] = None
    replaced_by_token_id: Optional[UUID] = None


@dataclass(frozen=True)
class MarkAsUsedRefreshTokenInput:
    replaced_by_token_id: UUID


@dataclass(frozen=True)
class RevokeRefreshTokenInput:
    pass


class RefreshToken(EntityBase["RefreshToken"]):
    """Rotating refresh token.

    Tokens issued from the same login share a ``family_id``. Rotation marks
    the presented token USED and records its successor; revocation marks it
    REVOKED. Only ACTIVE tokens can transition.
    """

    def __init__(
        self,
        entity_info: Optional[EntityInfo] = None,
        user_id: UUID = NIL_UUID,
        token_hash: bytes = b"",
        family_id: UUID = NIL_UUID,
        expires_at: Optional[datetime] = None,
        status: Optional[RefreshTokenStatus] = None,
        revoked_at: Optional[datetime] = None,
        replaced_by_token_id: Optional[UUID] = None,
    ):
        super().__init__(entity_info)
        self._user_id = user_id
        self._token_hash = token_hash
        self._family_id = family_id
        self._expires_at = expires_at
        self._status = status
        self._revoked_at = revoked_at
        self._replaced_by_token_id = replaced_by_token_id

    @property
    def user_id(self) -> UUID:
        return self._user_id

    @property
    def token_hash(self) -> bytes:
        return self._token_hash

    @property
    def family_id(self) -> UUID:
        return self._family_id

    @property
    def expires_at(self) -> Optional[datetime]:
        return self._expires_at

    @property
    def status(self) -> Optional[RefreshTokenStatus]:
        return self._status

    @property
    def revoked_at(self) -> Optional[datetime]:
        return self._revoked_at

    @property
    def replaced_by_token_id(self) -> Optional[UUID]:
        return self._replaced_by_token_id

    @property
    def is_active(self) -> bool:
        return self._status == RefreshTokenStatus.ACTIVE

    def is_expired(self, now: datetime) -> bool:
        return self._expires_at is not None and now > self._expires_at

    @classmethod
    def register_new(cls, ctx: ExecutionContext, input: RegisterNewRefreshTokenInput) -> Optional["RefreshToken"]:
        def handler(ctx: ExecutionContext, input: RegisterNewRefreshTokenInput, instance: "RefreshToken") -> bool:
            results = [
                instance._set_user_id(ctx, input.user_id),
                instance._set_token_hash(ctx, input.token_hash),
                instance._set_family_id(ctx, input.family_id),
                instance._set_expires_at(ctx, input.expires_at),
                instance._set_status(ctx, RefreshTokenStatus.ACTIVE),
            ]
            instance._revoked_at = None
            instance._replaced_by_token_id = None
            return all(results)

        return cls._register_new_internal(ctx, input, handler)

    @classmethod
    def create_from_existing_info(cls, input: CreateFromExistingInfoRefreshTokenInput) -> "RefreshToken":
        return cls(
            entity_info=input.entity_info,
            user_id=input.user_id,
            token_hash=input.token_hash,
            family_id=input.family_id,
            expires_at=input.expires_at,
            status=input.status,
            revoked_at=input.revoked_at,
            replaced_by_token_id=input.replaced_by_token_id,
        )

    def mark_as_used(self, ctx: ExecutionContext, input: MarkAsUsedRefreshTokenInput) -> Optional["RefreshToken"]:
        """Rotate: ACTIVE -> USED, remembering the token that replaced this one."""
        def handler(ctx: ExecutionContext, input: MarkAsUsedRefreshTokenInput, new_instance: "RefreshToken") -> bool:
            if not new_instance.validate_status_transition(ctx, new_instance._status, RefreshTokenStatus.USED):
                return False
            new_instance._status = RefreshTokenStatus.USED
            new_instance._replaced_by_token_id = input.replaced_by_token_id
            return True

        return self._register_change_internal(ctx, input, handler)

    def revoke(self, ctx: ExecutionContext, input: Optional[RevokeRefreshTokenInput] = None) -> Optional["RefreshToken"]:
        """ACTIVE -> REVOKED, stamping ``revoked_at`` with the context timestamp."""
        def handler(ctx: ExecutionContext, input: RevokeRefreshTokenInput, new_instance: "RefreshToken") -> bool:
            if not new_instance.validate_status_transition(ctx, new_instance._status, RefreshTokenStatus.REVOKED):
                return False
            new_instance._status = RefreshTokenStatus.REVOKED
            new_instance._revoked_at = ctx.timestamp
            return True

        return self._register_change_internal(ctx, input or RevokeRefreshTokenInput(), handler)

    def clone(self) -> "RefreshToken":
        return RefreshToken(
            entity_info=self._entity_info,
            user_id=self._user_id,
            token_hash=self._token_hash,
            family_id=self._family_id,
            expires_at=self._expires_at,
            status=self._status,
            revoked_at=self._revoked_at,
            replaced_by_token_id=self._replaced_by_token_id,
        )

    # Validation

    @classmethod
    def is_valid_values(
        cls,
        ctx: ExecutionContext,
        entity_info: Optional[EntityInfo],
        user_id: Optional[UUID],
        token_hash: Optional[bytes],
        family_id: Optional[UUID],
        expires_at: Optional[datetime],
        status: Optional[RefreshTokenStatus],
    ) -> bool:
        results = [
            cls.validate_entity_info(ctx, entity_info),
            cls.validate_user_id(ctx, user_id),
            cls.validate_token_hash(ctx, token_hash),
            cls.validate_family_id(ctx, family_id),
            cls.validate_expires_at(ctx, expires_at),
            cls.validate_status(ctx, status),
        ]
        return all(results)

    def _is_valid_internal(self, ctx: ExecutionContext) -> bool:
        results = [
            self.validate_user_id(ctx, self._user_id),
            self.validate_token_hash(ctx, self._token_hash),
            self.validate_family_id(ctx, self._family_id),
            self.validate_expires_at(ctx, self._expires_at),
            self.validate_status(ctx, self._status),
        ]
        return all(results)

    @classmethod
    def validate_user_id(cls, ctx: ExecutionContext, user_id: Optional[UUID]) -> bool:
        return validate_is_required(
            ctx,
            cls.create_message_code(RefreshTokenMetadata.USER_ID_PROPERTY_NAME),
            RefreshTokenMetadata.user_id_is_required,
            user_id,
        )

    @classmethod
    def validate_token_hash(cls, ctx: ExecutionContext, token_hash: Optional[bytes]) -> bool:
        code = cls.create_message_code(RefreshTokenMetadata.TOKEN_HASH_PROPERTY_NAME)
        if not validate_is_required(ctx, code, RefreshTokenMetadata.token_hash_is_required, token_hash):
            return False
        if token_hash is None:
            return True
        # An empty hash is as good as none
        if len(token_hash) == 0:
            ctx.add_error_message(f"{code}.{IS_REQUIRED}")
            return False
        return validate_max_length(ctx, code, RefreshTokenMetadata.token_hash_max_length, len(token_hash))

    @classmethod
    def validate_family_id(cls, ctx: ExecutionContext, family_id: Optional[UUID]) -> bool:
        return validate_is_required(
            ctx,
            cls.create_message_code(RefreshTokenMetadata.FAMILY_ID_PROPERTY_NAME),
            RefreshTokenMetadata.family_id_is_required,
            family_id,
        )

    @classmethod
    def validate_expires_at(cls, ctx: ExecutionContext, expires_at: Optional[datetime]) -> bool:
        return validate_is_required(
            ctx,
            cls.create_message_code(RefreshTokenMetadata.EXPIRES_AT_PROPERTY_NAME),
            RefreshTokenMetadata.expires_at_is_required,
            expires_at,
        )

    @classmethod
    def validate_status(cls, ctx: ExecutionContext, status: Optional[RefreshTokenStatus]) -> bool:
        return validate_is_required(
            ctx,
            cls.create_message_code(RefreshTokenMetadata.STATUS_PROPERTY_NAME),
            RefreshTokenMetadata.status_is_required,
            status,
        )

    @classmethod
    def validate_status_transition(
        cls,
        ctx: ExecutionContext,
        from_status: Optional[RefreshTokenStatus],
        to_status: Optional[RefreshTokenStatus],
    ) -> bool:
        code = cls.create_message_code(RefreshTokenMetadata.STATUS_PROPERTY_NAME)
        results = [
            validate_is_required(ctx, code, True, from_status),
            validate_is_required(ctx, code, True, to_status),
        ]
        if not all(results):
            return False

        if from_status == to_status:
            ctx.add_error_message(f"{code}.{SAME_STATUS}", f"Refresh token is already {to_status.name}")
            return False

        if (from_status, to_status) not in ALLOWED_TRANSITIONS:
            ctx.add_error_message(
                f"{code}.{INVALID_TRANSITION}",
                f"Cannot change refresh token status from {from_status.name} to {to_status.name}",
            )
            return False

        return True

    # Validated setters

    def _set_user_id(self, ctx: ExecutionContext, user_id: UUID) -> bool:
        if not self.validate_user_id(ctx, user_id):
            return False
        self._user_id = user_id
        return True

    def _set_token_hash(self, ctx: ExecutionContext, token_hash: bytes) -> bool:
        if not self.validate_token_hash(ctx, token_hash):
            return False
        self._token_hash = token_hash
        return True

    def _set_family_id(self, ctx: ExecutionContext, family_id: UUID) -> bool:
        if not self.validate_family_id(ctx, family_id):
            return False
        self._family_id = family_id
        return True

    def _set_expires_at(self, ctx: ExecutionContext, expires_at: datetime) -> bool:
        if not self.validate_expires_at(ctx, expires_at):
            return False
        self._expires_at = expires_at
        return True

    def _set_status(self, ctx: ExecutionContext, status: RefreshTokenStatus) -> bool:
        if not self.validate_status(ctx, status):
            return False
        self._status = status
        return True

    def _fields(self) -> tuple:
        return (
            self._user_id,
            self._token_hash,
            self._family_id,
            self._expires_at,
            self._status,
            self._revoked_at,
            self._replaced_by_token_id,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            **self._entity_info.to_dict(),
            "user_id": str(self._user_id),
            "family_id": str(self._family_id),
            "expires_at": self._expires_at.isoformat() if self._expires_at else None,
            "status": self._status.name if self._status else None,
            "revoked_at": self._revoked_at.isoformat() if self._revoked_at else None,
            "replaced_by_token_id": str(self._replaced_by_token_id) if self._replaced_by_token_id else None,
        }

    def __repr__(self) -> str:
        return (
            f"RefreshToken(id={self.id}, user_id={self._user_id}, family_id={self._family_id}, "
            f"status={self._status.name if self._status else None})"
        )

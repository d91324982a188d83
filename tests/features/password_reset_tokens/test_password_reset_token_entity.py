"""Tests for the PasswordResetToken entity."""

import pytest
from datetime import timedelta
from uuid import uuid4

from neo_identity.core.shared import ExecutionContext, MessageLevel
from neo_identity.features.password_reset_tokens import (
    CreateFromExistingInfoPasswordResetTokenInput,
    PasswordResetToken,
    PasswordResetTokenMetadata,
    RegisterNewPasswordResetTokenInput,
)
from neo_identity.utils.uuid import NIL_UUID


def codes(ctx):
    return [m.code for m in ctx.messages]


class TestRegisterNew:

    def test_valid_input(self, execution_context, register_token_input, fixed_now):
        token = PasswordResetToken.register_new(execution_context, register_token_input)

        assert token is not None
        assert token.user_id == register_token_input.user_id
        assert token.token_hash == register_token_input.token_hash
        assert token.expires_at == fixed_now + timedelta(hours=24)
        assert token.is_used is False
        assert token.used_at is None
        assert token.tenant_info == execution_context.tenant_info
        assert token.entity_info.created_by == "alice@acme.test"
        assert token.entity_info.created_at == fixed_now
        assert token.entity_info.created_correlation_id == execution_context.correlation_id
        assert token.entity_info.last_changed_at is None
        assert not execution_context.has_messages

    def test_empty_token_hash_rejected(self, execution_context, register_token_input):
        token = PasswordResetToken.register_new(
            execution_context,
            RegisterNewPasswordResetTokenInput(
                user_id=register_token_input.user_id,
                token_hash="",
                expires_at=register_token_input.expires_at,
            ),
        )

        assert token is None
        assert codes(execution_context) == ["PasswordResetToken.TokenHash.MinLength"]
        assert execution_context.messages[0].level == MessageLevel.ERROR

    def test_missing_token_hash_rejected(self, execution_context, register_token_input):
        token = PasswordResetToken.register_new(
            execution_context,
            RegisterNewPasswordResetTokenInput(
                user_id=register_token_input.user_id,
                token_hash=None,
                expires_at=register_token_input.expires_at,
            ),
        )

        assert token is None
        assert codes(execution_context) == ["PasswordResetToken.TokenHash.IsRequired"]

    def test_every_invalid_field_reported(self, execution_context, fixed_now):
        token = PasswordResetToken.register_new(
            execution_context,
            RegisterNewPasswordResetTokenInput(user_id=NIL_UUID, token_hash="x" * 129, expires_at=fixed_now),
        )

        assert token is None
        assert codes(execution_context) == [
            "PasswordResetToken.UserId.IsRequired",
            "PasswordResetToken.TokenHash.MaxLength",
        ]

    def test_token_hash_max_length_metadata(self, execution_context, register_token_input):
        try:
            PasswordResetTokenMetadata.change_token_hash_metadata(is_required=True, max_length=8)

            token = PasswordResetToken.register_new(execution_context, register_token_input)

            assert token is None
            assert codes(execution_context) == ["PasswordResetToken.TokenHash.MaxLength"]
        finally:
            PasswordResetTokenMetadata.change_token_hash_metadata(is_required=True, max_length=128)

    def test_ids_are_unique(self, execution_context, register_token_input):
        first = PasswordResetToken.register_new(execution_context, register_token_input)
        second = PasswordResetToken.register_new(execution_context, register_token_input)

        assert first.id != second.id
        assert second.entity_info.entity_version > first.entity_info.entity_version


class TestMarkUsed:

    def test_mark_used_returns_new_instance(self, execution_context, password_reset_token, tenant_info, clock, fixed_now):
        clock.advance(timedelta(minutes=15))
        use_ctx = ExecutionContext.create(tenant_info, "alice@acme.test", "web", "CONFIRM_RESET", clock)

        used = password_reset_token.mark_used(use_ctx)

        assert used is not None
        assert used is not password_reset_token
        assert used.is_used is True
        assert used.used_at == fixed_now + timedelta(minutes=15)
        assert used.id == password_reset_token.id
        assert used.entity_info.last_changed_by == "alice@acme.test"
        assert used.entity_info.last_changed_business_operation_code == "CONFIRM_RESET"
        assert used.entity_info.entity_version > password_reset_token.entity_info.entity_version
        assert password_reset_token.is_used is False
        assert password_reset_token.entity_info.last_changed_at is None

    def test_mark_used_twice_fails(self, execution_context, password_reset_token):
        used = password_reset_token.mark_used(execution_context)

        assert used.mark_used(execution_context) is None
        assert codes(execution_context) == ["PasswordResetToken.IsUsed.AlreadyUsed"]
        assert used.is_used is True

    def test_mark_used_does_not_check_expiry(self, execution_context, password_reset_token, clock):
        clock.advance(timedelta(days=2))

        assert password_reset_token.is_expired(clock.utc_now())
        assert password_reset_token.mark_used(execution_context) is not None

    def test_other_tenant_cannot_change(self, password_reset_token, other_tenant_info, clock):
        other_ctx = ExecutionContext.create(other_tenant_info, "mallory", "api", "CONFIRM_RESET", clock)

        assert password_reset_token.mark_used(other_ctx) is None
        assert codes(other_ctx) == ["PasswordResetToken.TenantMismatch"]
        assert password_reset_token.is_used is False


class TestValidationAndEquality:

    def test_is_valid(self, execution_context, password_reset_token):
        assert password_reset_token.is_valid(execution_context)
        assert not execution_context.has_messages

    def test_is_valid_values_reports_all_fields(self, execution_context, password_reset_token):
        assert not PasswordResetToken.is_valid_values(
            execution_context, password_reset_token.entity_info, NIL_UUID, "", None
        )
        assert codes(execution_context) == [
            "PasswordResetToken.UserId.IsRequired",
            "PasswordResetToken.TokenHash.MinLength",
            "PasswordResetToken.ExpiresAt.IsRequired",
        ]

    def test_is_valid_values_without_entity_info(self, execution_context, sample_user_id, fixed_now):
        assert not PasswordResetToken.is_valid_values(execution_context, None, sample_user_id, "abc", fixed_now)
        assert codes(execution_context) == ["EntityBase.EntityInfo.IsRequired"]

    def test_create_from_existing_info_skips_validation(self, password_reset_token):
        token = PasswordResetToken.create_from_existing_info(
            CreateFromExistingInfoPasswordResetTokenInput(
                entity_info=password_reset_token.entity_info,
                user_id=NIL_UUID,
                token_hash="",
                expires_at=None,
                is_used=True,
            )
        )

        assert token.user_id == NIL_UUID
        assert token.is_used is True

    def test_clone_is_equal_but_distinct(self, password_reset_token):
        cloned = password_reset_token.clone()

        assert cloned == password_reset_token
        assert cloned is not password_reset_token
        assert hash(cloned) == hash(password_reset_token)

    def test_different_field_values_not_equal(self, execution_context, password_reset_token):
        assert password_reset_token.mark_used(execution_context) != password_reset_token

    def test_to_dict_omits_token_hash(self, password_reset_token):
        data = password_reset_token.to_dict()

        assert "token_hash" not in data
        assert data["user_id"] == str(password_reset_token.user_id)
        assert data["is_used"] is False

    def test_is_expired(self, password_reset_token, fixed_now):
        assert not password_reset_token.is_expired(fixed_now)
        assert password_reset_token.is_expired(fixed_now + timedelta(hours=25))

    def test_entity_name(self):
        assert PasswordResetToken.entity_name() == "PasswordResetToken"
        assert PasswordResetToken.create_message_code("TokenHash", "IsRequired") == "PasswordResetToken.TokenHash.IsRequired"

    def test_unknown_user_is_not_missing(self, execution_context, fixed_now):
        assert PasswordResetToken.validate_user_id(execution_context, uuid4())

"""Tests for refresh tokens: status transitions, mapping and repositories."""

import pytest
from datetime import timedelta
from uuid import uuid4

from neo_identity.core.shared import CancellationToken, ExecutionContext
from neo_identity.features.refresh_tokens import (
    AsyncpgRefreshTokenDataModelRepository,
    MarkAsUsedRefreshTokenInput,
    RefreshToken,
    RefreshTokenDataModelRepository,
    RefreshTokenMapper,
    RefreshTokenRepository,
    RefreshTokenStatus,
    RegisterNewRefreshTokenInput,
)
from neo_identity.utils.uuid import NIL_UUID


def codes(ctx):
    return [m.code for m in ctx.messages]


class TestRefreshTokenEntity:

    def test_register_new_is_active(self, refresh_token, register_refresh_token_input, execution_context):
        assert refresh_token.status == RefreshTokenStatus.ACTIVE
        assert refresh_token.is_active
        assert refresh_token.family_id == register_refresh_token_input.family_id
        assert refresh_token.revoked_at is None
        assert refresh_token.replaced_by_token_id is None
        assert not execution_context.has_messages

    def test_empty_hash_is_missing(self, execution_context, register_refresh_token_input):
        token = RefreshToken.register_new(
            execution_context,
            RegisterNewRefreshTokenInput(
                user_id=register_refresh_token_input.user_id,
                token_hash=b"",
                family_id=register_refresh_token_input.family_id,
                expires_at=register_refresh_token_input.expires_at,
            ),
        )

        assert token is None
        assert codes(execution_context) == ["RefreshToken.TokenHash.IsRequired"]

    def test_every_invalid_field_reported(self, execution_context, fixed_now):
        token = RefreshToken.register_new(
            execution_context,
            RegisterNewRefreshTokenInput(
                user_id=NIL_UUID, token_hash=bytes(65), family_id=NIL_UUID, expires_at=None
            ),
        )

        assert token is None
        assert codes(execution_context) == [
            "RefreshToken.UserId.IsRequired",
            "RefreshToken.TokenHash.MaxLength",
            "RefreshToken.FamilyId.IsRequired",
            "RefreshToken.ExpiresAt.IsRequired",
        ]

    def test_mark_as_used_records_successor(self, refresh_token, execution_context):
        successor_id = uuid4()

        used = refresh_token.mark_as_used(execution_context, MarkAsUsedRefreshTokenInput(successor_id))

        assert used.status == RefreshTokenStatus.USED
        assert used.replaced_by_token_id == successor_id
        assert refresh_token.status == RefreshTokenStatus.ACTIVE
        assert used.entity_info.entity_version > refresh_token.entity_info.entity_version

    def test_revoke_stamps_revoked_at(self, refresh_token, tenant_info, clock, fixed_now):
        clock.advance(timedelta(hours=2))
        ctx = ExecutionContext.create(tenant_info, "admin", "console", "REVOKE_SESSIONS", clock)

        revoked = refresh_token.revoke(ctx)

        assert revoked.status == RefreshTokenStatus.REVOKED
        assert revoked.revoked_at == fixed_now + timedelta(hours=2)
        assert not revoked.is_active

    def test_revoking_twice_is_same_status(self, refresh_token, execution_context):
        revoked = refresh_token.revoke(execution_context)

        assert revoked.revoke(execution_context) is None
        assert codes(execution_context) == ["RefreshToken.Status.SameStatus"]

    def test_used_token_cannot_be_revoked(self, refresh_token, execution_context):
        used = refresh_token.mark_as_used(execution_context, MarkAsUsedRefreshTokenInput(uuid4()))

        assert used.revoke(execution_context) is None
        assert codes(execution_context) == ["RefreshToken.Status.InvalidTransition"]
        assert used.status == RefreshTokenStatus.USED

    def test_revoked_token_cannot_be_used(self, refresh_token, execution_context):
        revoked = refresh_token.revoke(execution_context)

        assert revoked.mark_as_used(execution_context, MarkAsUsedRefreshTokenInput(uuid4())) is None
        assert codes(execution_context) == ["RefreshToken.Status.InvalidTransition"]

    def test_other_tenant_cannot_revoke(self, refresh_token, other_tenant_info, clock):
        other_ctx = ExecutionContext.create(other_tenant_info, "mallory", "api", "REVOKE_SESSIONS", clock)

        assert refresh_token.revoke(other_ctx) is None
        assert codes(other_ctx) == ["RefreshToken.TenantMismatch"]

    def test_validate_tenant_for_collection(self, refresh_token, other_tenant_info, clock, execution_context):
        other_ctx = ExecutionContext.create(other_tenant_info, "mallory", "api", "LIST", clock)

        assert RefreshToken.validate_tenant_for_collection(execution_context, [refresh_token])
        assert not RefreshToken.validate_tenant_for_collection(other_ctx, [refresh_token])
        assert codes(other_ctx) == ["RefreshToken.TenantMismatch"]

    def test_is_valid(self, refresh_token, execution_context):
        assert refresh_token.is_valid(execution_context)


class TestRefreshTokenMapper:

    def test_status_stored_as_int(self, refresh_token):
        row = RefreshTokenMapper().to_data_model(refresh_token)

        assert row.status == 1
        assert type(row.status) is int
        assert row.token_hash == refresh_token.token_hash

    def test_to_entity_restores_enum(self, refresh_token):
        mapper = RefreshTokenMapper()
        restored = mapper.to_entity(mapper.to_data_model(refresh_token))

        assert restored.status is RefreshTokenStatus.ACTIVE
        assert restored == refresh_token


class TestAsyncpgRefreshTokenDataModelRepository:

    @pytest.fixture
    def repository(self, mock_database_repository):
        return AsyncpgRefreshTokenDataModelRepository(mock_database_repository, "auth")

    def test_satisfies_protocol(self, repository):
        assert isinstance(repository, RefreshTokenDataModelRepository)

    @pytest.mark.asyncio
    async def test_get_active_by_family_id(self, repository, mock_database_repository, execution_context, refresh_token):
        mock_database_repository.fetch.return_value = [RefreshTokenMapper().to_data_model(refresh_token).to_dict()]

        rows = await repository.get_active_by_family_id(execution_context, refresh_token.family_id, CancellationToken())

        assert [row.id for row in rows] == [refresh_token.id]
        query, tenant_code, family_id, status = mock_database_repository.fetch.call_args[0]
        assert "FROM auth.refresh_tokens" in query
        assert "status = $3" in query
        assert family_id == refresh_token.family_id
        assert status == 1

    @pytest.mark.asyncio
    async def test_list_finder_failure_returns_empty_list(self, repository, mock_database_repository, execution_context):
        mock_database_repository.fetch.side_effect = OSError("connection refused")

        assert await repository.get_by_user_id(execution_context, uuid4(), CancellationToken()) == []
        assert execution_context.has_exceptions


class TestRefreshTokenRepository:
    """Rotation and family revocation over the in-memory collaborator."""

    @pytest.fixture
    def repository(self, refresh_token_store):
        return RefreshTokenRepository(refresh_token_store)

    @pytest.mark.asyncio
    async def test_rotation(self, repository, execution_context, refresh_token, register_refresh_token_input):
        await repository.register_new(execution_context, refresh_token)
        successor = RefreshToken.register_new(
            execution_context,
            RegisterNewRefreshTokenInput(
                user_id=refresh_token.user_id,
                token_hash=bytes(range(1, 33)),
                family_id=refresh_token.family_id,
                expires_at=register_refresh_token_input.expires_at,
            ),
        )
        await repository.register_new(execution_context, successor)

        presented = await repository.get_by_token_hash(execution_context, refresh_token.token_hash)
        used = presented.mark_as_used(execution_context, MarkAsUsedRefreshTokenInput(successor.id))
        assert await repository.update(execution_context, used)

        active = await repository.get_active_by_family_id(execution_context, refresh_token.family_id)
        assert [token.id for token in active] == [successor.id]

        tokens = await repository.get_by_user_id(execution_context, refresh_token.user_id)
        assert {token.id for token in tokens} == {refresh_token.id, successor.id}

    @pytest.mark.asyncio
    async def test_revoke_family(self, repository, execution_context, sample_user_id, fixed_now):
        family_id = uuid4()
        for index in range(3):
            token = RefreshToken.register_new(
                execution_context,
                RegisterNewRefreshTokenInput(
                    user_id=sample_user_id,
                    token_hash=bytes([index]) * 32,
                    family_id=family_id,
                    expires_at=fixed_now + timedelta(days=1),
                ),
            )
            await repository.register_new(execution_context, token)

        for token in await repository.get_active_by_family_id(execution_context, family_id):
            assert await repository.update(execution_context, token.revoke(execution_context))

        assert await repository.get_active_by_family_id(execution_context, family_id) == []
        assert execution_context.is_successful

    @pytest.mark.asyncio
    async def test_get_by_unknown_hash(self, repository, execution_context):
        assert await repository.get_by_token_hash(execution_context, b"\x00" * 32) is None

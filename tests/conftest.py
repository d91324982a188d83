"""Pytest configuration and fixtures for neo-identity tests."""

import pytest
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock
from uuid import uuid4

from neo_identity.core.shared import CancellationToken, ExecutionContext, FixedClock, MessageLevel
from neo_identity.core.value_objects import TenantInfo
from neo_identity.features.password_reset_tokens import (
    PasswordResetToken,
    RegisterNewPasswordResetTokenInput,
    InMemoryPasswordResetTokenDataModelRepository,
)
from neo_identity.features.refresh_tokens import (
    RefreshToken,
    RegisterNewRefreshTokenInput,
    InMemoryRefreshTokenDataModelRepository,
)


@pytest.fixture
def fixed_now():
    """Instant every test clock starts at."""
    return datetime(2025, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def clock(fixed_now):
    return FixedClock(fixed_now)


@pytest.fixture
def tenant_info():
    return TenantInfo(code=uuid4(), name="Acme Corp")


@pytest.fixture
def other_tenant_info():
    return TenantInfo(code=uuid4(), name="Globex")


@pytest.fixture
def execution_context(tenant_info, clock):
    """Context recording every message level."""
    return ExecutionContext.create(
        tenant_info=tenant_info,
        execution_user="alice@acme.test",
        execution_origin="identity-tests",
        business_operation_code="RESET_PASSWORD",
        clock=clock,
        minimum_message_level=MessageLevel.TRACE,
    )


@pytest.fixture
def cancellation_token():
    return CancellationToken()


@pytest.fixture
def mock_database_repository():
    """Mock asyncpg pool/connection for testing."""
    mock_db = AsyncMock()
    mock_db.fetchrow = AsyncMock()
    mock_db.fetch = AsyncMock()
    mock_db.fetchval = AsyncMock()
    mock_db.execute = AsyncMock()
    return mock_db


@pytest.fixture
def sample_user_id():
    return uuid4()


@pytest.fixture
def sample_token_hash():
    return "9f86d081884c7d659a2feaa0c55ad015a3bf4f1b2b0b822cd15d6c15b0f00a08"


@pytest.fixture
def register_token_input(sample_user_id, sample_token_hash, fixed_now):
    return RegisterNewPasswordResetTokenInput(
        user_id=sample_user_id,
        token_hash=sample_token_hash,
        expires_at=fixed_now + timedelta(hours=24),
    )


@pytest.fixture
def password_reset_token(execution_context, register_token_input):
    token = PasswordResetToken.register_new(execution_context, register_token_input)
    assert token is not None
    return token


@pytest.fixture
def password_reset_token_store():
    return InMemoryPasswordResetTokenDataModelRepository()


@pytest.fixture
def register_refresh_token_input(sample_user_id, fixed_now):
    return RegisterNewRefreshTokenInput(
        user_id=sample_user_id,
        token_hash=bytes(range(32)),
        family_id=uuid4(),
        expires_at=fixed_now + timedelta(days=30),
    )


@pytest.fixture
def refresh_token(execution_context, register_refresh_token_input):
    token = RefreshToken.register_new(execution_context, register_refresh_token_input)
    assert token is not None
    return token


@pytest.fixture
def refresh_token_store():
    return InMemoryRefreshTokenDataModelRepository()

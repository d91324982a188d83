"""Tests for the database manager, storage error handling and cancellation."""

import asyncio
import logging
import pytest
from unittest.mock import AsyncMock, MagicMock

import asyncpg

from neo_identity.config import IdentitySettings
from neo_identity.core.exceptions import ConcurrencyConflictError
from neo_identity.core.shared import CancellationToken, ensure_token
from neo_identity.features.persistence import DatabaseManager
from neo_identity.features.persistence.utils import handle_storage_error


@pytest.fixture
def settings():
    return IdentitySettings(
        _env_file=None,
        database_url="postgresql+asyncpg://identity:secret@db:5432/identity",
        db_pool_min_size=2,
        db_pool_max_size=4,
    )


@pytest.fixture
def mock_pool():
    """Mock asyncpg pool whose acquire() yields a mock connection."""
    connection = AsyncMock()
    pool = MagicMock()
    pool.acquire.return_value.__aenter__.return_value = connection
    pool.acquire.return_value.__aexit__.return_value = False
    pool.close = AsyncMock()
    pool.connection = connection
    return pool


class TestDatabaseManager:

    @pytest.fixture
    def create_pool(self, mocker, mock_pool):
        return mocker.patch(
            "neo_identity.features.persistence.database.asyncpg.create_pool",
            new=AsyncMock(return_value=mock_pool),
        )

    @pytest.mark.asyncio
    async def test_create_pool_uses_settings(self, settings, create_pool, mock_pool):
        manager = DatabaseManager(settings)

        assert await manager.create_pool() is mock_pool
        assert await manager.create_pool() is mock_pool

        create_pool.assert_awaited_once()
        args, kwargs = create_pool.call_args
        assert args[0] == "postgresql://identity:secret@db:5432/identity"
        assert kwargs["min_size"] == 2
        assert kwargs["max_size"] == 4

    @pytest.mark.asyncio
    async def test_queries_run_on_acquired_connection(self, settings, create_pool, mock_pool):
        mock_pool.connection.fetchval.return_value = 5
        manager = DatabaseManager(settings)

        assert await manager.fetchval("SELECT count(*) FROM auth.refresh_tokens") == 5
        mock_pool.connection.fetchval.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_health_check(self, settings, create_pool, mock_pool):
        mock_pool.connection.fetchval.return_value = 1

        assert await DatabaseManager(settings).health_check()

    @pytest.mark.asyncio
    async def test_health_check_failure(self, settings, create_pool, mock_pool):
        mock_pool.connection.fetchval.side_effect = asyncpg.PostgresError("down")

        assert not await DatabaseManager(settings).health_check()

    @pytest.mark.asyncio
    async def test_close_pool(self, settings, create_pool, mock_pool):
        manager = DatabaseManager(settings)
        await manager.create_pool()

        await manager.close_pool()

        mock_pool.close.assert_awaited_once()
        assert manager.pool is None

    def test_schema_from_settings(self, settings):
        assert DatabaseManager(settings).schema == "auth"


class FlakyCollaborator:
    """Collaborator double whose operations fail on demand."""

    _table = "auth.flaky"

    def __init__(self, error):
        self.error = error

    @handle_storage_error("load")
    async def load(self, ctx, id):
        raise self.error

    @handle_storage_error("load_all", default_return=list)
    async def load_all(self, ctx):
        raise self.error

    @handle_storage_error("count", default_return=0, log_level=logging.WARNING)
    async def count(self, ctx):
        raise self.error


class TestHandleStorageError:

    @pytest.mark.asyncio
    async def test_failure_recorded_and_default_returned(self, execution_context, caplog):
        collaborator = FlakyCollaborator(RuntimeError("socket closed"))

        with caplog.at_level(logging.ERROR):
            assert await collaborator.load(execution_context, 1) is None

        assert execution_context.exceptions[0] is collaborator.error
        assert "Failed to load" in caplog.text
        assert "auth.flaky" in caplog.text

    @pytest.mark.asyncio
    async def test_callable_default_builds_fresh_value(self, execution_context):
        collaborator = FlakyCollaborator(RuntimeError("socket closed"))

        first = await collaborator.load_all(execution_context)
        second = await collaborator.load_all(execution_context)

        assert first == [] and second == []
        assert first is not second

    @pytest.mark.asyncio
    async def test_custom_default(self, execution_context):
        assert await FlakyCollaborator(OSError("refused")).count(ctx=execution_context) == 0
        assert execution_context.has_exceptions

    @pytest.mark.asyncio
    async def test_concurrency_conflict_propagates(self, execution_context):
        collaborator = FlakyCollaborator(ConcurrencyConflictError("RefreshToken", "abc", 1, 2))

        with pytest.raises(ConcurrencyConflictError):
            await collaborator.load(execution_context, 1)

        assert not execution_context.has_exceptions

    @pytest.mark.asyncio
    async def test_cancellation_propagates(self, execution_context):
        collaborator = FlakyCollaborator(asyncio.CancelledError())

        with pytest.raises(asyncio.CancelledError):
            await collaborator.load(execution_context, 1)


class TestCancellationToken:

    def test_cancel(self):
        token = CancellationToken()

        assert not token.is_cancellation_requested
        token.cancel()
        assert token.is_cancellation_requested
        with pytest.raises(asyncio.CancelledError):
            token.raise_if_cancellation_requested()

    def test_ensure_token(self):
        token = CancellationToken()

        assert ensure_token(token) is token
        assert not ensure_token(None).is_cancellation_requested

    @pytest.mark.asyncio
    async def test_wait_returns_after_cancel(self):
        token = CancellationToken()
        waiter = asyncio.create_task(token.wait())

        token.cancel()

        await asyncio.wait_for(waiter, timeout=1)
        assert waiter.done()

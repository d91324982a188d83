"""
Database connection management using asyncpg.
"""
import logging
from contextlib import asynccontextmanager
from typing import Any, List, Optional

import asyncpg
from asyncpg import Pool, Record

from ...config.settings import IdentitySettings, get_settings

logger = logging.getLogger(__name__)


class DatabaseManager:
    """Owns the asyncpg pool used by the storage collaborators.

    Exposes ``fetch``/``fetchrow``/``fetchval``/``execute`` so it can be
    passed wherever a pool or connection is accepted.
    """

    def __init__(self, settings: Optional[IdentitySettings] = None):
        self.settings = settings or get_settings()
        self.pool: Optional[Pool] = None

    @property
    def schema(self) -> str:
        return self.settings.database_schema

    async def create_pool(self) -> Pool:
        """Create and return a connection pool."""
        if self.pool is None:
            logger.info(f"Creating database pool with size {self.settings.db_pool_max_size}")
            self.pool = await asyncpg.create_pool(
                self.settings.database_url,
                min_size=self.settings.db_pool_min_size,
                max_size=self.settings.db_pool_max_size,
                command_timeout=self.settings.db_command_timeout,
                max_inactive_connection_lifetime=self.settings.db_max_inactive_connection_lifetime,
                server_settings={"application_name": self.settings.app_name},
            )
            logger.info("Database pool created successfully")
        return self.pool

    async def close_pool(self) -> None:
        if self.pool:
            await self.pool.close()
            self.pool = None
            logger.info("Database pool closed")

    @asynccontextmanager
    async def acquire(self):
        """Acquire a connection from the pool."""
        if not self.pool:
            await self.create_pool()

        async with self.pool.acquire() as connection:
            yield connection

    @asynccontextmanager
    async def transaction(self):
        """Create a transaction context."""
        async with self.acquire() as connection:
            async with connection.transaction():
                yield connection

    async def execute(self, query: str, *args, timeout: float = None) -> str:
        async with self.acquire() as connection:
            return await connection.execute(query, *args, timeout=timeout)

    async def fetch(self, query: str, *args, timeout: float = None) -> List[Record]:
        async with self.acquire() as connection:
            return await connection.fetch(query, *args, timeout=timeout)

    async def fetchrow(self, query: str, *args, timeout: float = None) -> Optional[Record]:
        async with self.acquire() as connection:
            return await connection.fetchrow(query, *args, timeout=timeout)

    async def fetchval(self, query: str, *args, column: int = 0, timeout: float = None) -> Any:
        async with self.acquire() as connection:
            return await connection.fetchval(query, *args, column=column, timeout=timeout)

    async def health_check(self) -> bool:
        """Check database health."""
        try:
            async with self.acquire() as connection:
                return await connection.fetchval("SELECT 1") == 1
        except (OSError, asyncpg.PostgresError) as e:
            logger.error(f"Database health check failed: {e}")
            return False

"""
Database connection management using asyncpg for canopy.
"""
from typing import Optional, Any, List
from contextlib import asynccontextmanager
import asyncpg
from asyncpg import Pool, Record
import logging

from ..config.settings import CanopySettings, get_settings
from ..core.exceptions import DatabaseConnectionError

logger = logging.getLogger(__name__)


class DatabaseManager:
    """Manages the connection pool shared by the hierarchy store and the catalog."""

    def __init__(self, settings: Optional[CanopySettings] = None, database_url: Optional[str] = None, **pool_config):
        """Configure the manager; the pool opens on first use.

        Args:
            settings: Settings to read the DSN and pool sizing from
            database_url: Explicit DSN, overrides ``settings.database_url``
            **pool_config: Overrides for the asyncpg pool keyword arguments
        """
        self.settings = settings or get_settings()
        self.pool: Optional[Pool] = None
        self.dsn = database_url or self.settings.database_url or ""
        if "+asyncpg" in self.dsn:
            self.dsn = self.dsn.replace("+asyncpg", "")

        self.pool_config = {
            **self.settings.get_pool_config(),
            **pool_config
        }

    async def create_pool(self) -> Pool:
        """Return the pool, creating it on first use."""
        if self.pool is None:
            if not self.dsn:
                raise DatabaseConnectionError(
                    "No database URL configured (set CANOPY_DATABASE_URL)",
                    operation="create pool",
                )

            logger.info(f"Opening asyncpg pool ({self.pool_config['min_size']}..{self.pool_config['max_size']} connections)")

            server_settings = {
                'application_name': self.settings.application_name,
                'jit': 'on'
            }

            try:
                self.pool = await asyncpg.create_pool(
                    self.dsn,
                    server_settings=server_settings,
                    **self.pool_config
                )
            except (OSError, asyncpg.PostgresError) as e:
                raise DatabaseConnectionError(
                    f"Failed to create database pool: {e}",
                    operation="create pool",
                ) from e
            logger.info("asyncpg pool ready")
        return self.pool

    async def close_pool(self):
        """Close the pool; a later query reopens it."""
        if self.pool:
            await self.pool.close()
            self.pool = None
            logger.info("asyncpg pool closed")

    @asynccontextmanager
    async def acquire(self):
        """Yield a pooled connection, opening the pool if needed."""
        if not self.pool:
            await self.create_pool()

        async with self.pool.acquire() as connection:
            yield connection

    @asynccontextmanager
    async def transaction(self):
        """Yield a connection inside a transaction that commits on exit."""
        async with self.acquire() as connection:
            async with connection.transaction():
                yield connection

    async def execute(self, query: str, *args, timeout: float = None) -> str:
        """Run a statement and return its status string."""
        async with self.acquire() as connection:
            return await connection.execute(query, *args, timeout=timeout)

    async def fetch(self, query: str, *args, timeout: float = None) -> List[Record]:
        """Fetch all rows of a query."""
        async with self.acquire() as connection:
            return await connection.fetch(query, *args, timeout=timeout)

    async def fetchrow(self, query: str, *args, timeout: float = None) -> Optional[Record]:
        """Fetch the first row, or None."""
        async with self.acquire() as connection:
            return await connection.fetchrow(query, *args, timeout=timeout)

    async def fetchval(self, query: str, *args, column: int = 0, timeout: float = None) -> Any:
        """Fetch one column of the first row."""
        async with self.acquire() as connection:
            return await connection.fetchval(query, *args, column=column, timeout=timeout)

    async def health_check(self) -> bool:
        """Return True when the server answers a trivial query."""
        try:
            async with self.acquire() as connection:
                result = await connection.fetchval("SELECT 1")
                return result == 1
        except Exception as e:
            logger.warning(f"Database unreachable: {e}")
            return False


_database_manager: Optional[DatabaseManager] = None


def get_database(settings: Optional[CanopySettings] = None) -> DatabaseManager:
    """Return the process-wide manager, creating it lazily."""
    global _database_manager
    if _database_manager is None:
        _database_manager = DatabaseManager(settings)
    return _database_manager


async def init_database(settings: Optional[CanopySettings] = None) -> DatabaseManager:
    """Initialize the global connection pool."""
    logger.info("Connecting to the content database")
    db = get_database(settings)
    await db.create_pool()
    logger.info("Content database connected")
    return db


async def close_database():
    """Close the global connection pool."""
    global _database_manager
    if _database_manager:
        await _database_manager.close_pool()
        _database_manager = None
    logger.info("Content database disconnected")

"""SQLite database connection implementation."""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import aiosqlite

from dryrun_store.config.schema import DatabaseConnectionConfig
from dryrun_store.domain.exceptions import ServerError
from dryrun_store.infrastructure.data_access.connection import DatabaseConnection

logger = logging.getLogger(__name__)


class SQLiteConnection(DatabaseConnection):
    """SQLite implementation of database connection management.

    The connection runs in autocommit mode so that transactions are
    controlled only by explicit BEGIN / ROLLBACK statements.
    """

    def __init__(self, database_path: str, config: Optional[DatabaseConnectionConfig] = None):
        """Initialize SQLite connection.

        Args:
            database_path: Path to the SQLite database file
            config: Connection settings (uses defaults if None)
        """
        self.database_path = database_path
        self.config = config or DatabaseConnectionConfig(database_path=database_path)
        self._connection: Optional[aiosqlite.Connection] = None
        self._is_connected = False

    async def connect(self) -> None:
        """Open the database file and apply per-connection settings."""
        try:
            if self.database_path != ":memory:":
                Path(self.database_path).parent.mkdir(parents=True, exist_ok=True)

            self._connection = await aiosqlite.connect(
                self.database_path,
                timeout=self.config.timeout,
                isolation_level=None,
            )
            await self._configure_connection()

            self._is_connected = True
            logger.debug(f"Connected to SQLite database: {self.database_path}")

        except Exception as e:
            self._is_connected = False
            if self._connection is not None:
                await self._connection.close()
                self._connection = None
            logger.error(f"Failed to connect to SQLite database {self.database_path}: {e}")
            raise ServerError("Failed to connect to database", raw=str(e)) from e

    async def disconnect(self) -> None:
        """Close the SQLite connection and clean up resources."""
        if self._connection:
            try:
                await self._connection.close()
                logger.debug("Disconnected from SQLite database")
            except Exception as e:
                logger.warning(f"Error during disconnect: {str(e)}")
            finally:
                self._connection = None
                self._is_connected = False

    async def is_connected(self) -> bool:
        """Check if database connection is active."""
        return self._is_connected and self._connection is not None

    async def ping(self) -> bool:
        """Ping the database to verify connectivity."""
        if not await self.is_connected():
            return False

        try:
            async with self._connection.execute("SELECT 1") as cursor:
                result = await cursor.fetchone()
            return result is not None and result[0] == 1
        except Exception as e:
            logger.warning(f"Database ping failed: {str(e)}")
            return False

    async def get_connection_info(self) -> Dict[str, Any]:
        """Get information about the current connection."""
        if not await self.is_connected():
            return {"status": "disconnected"}

        try:
            async with self._connection.execute("SELECT sqlite_version()") as cursor:
                version_row = await cursor.fetchone()
            async with self._connection.execute("PRAGMA foreign_keys") as cursor:
                fk_row = await cursor.fetchone()

            db_path = Path(self.database_path)
            return {
                "status": "connected",
                "database_path": self.database_path,
                "sqlite_version": version_row[0] if version_row else "unknown",
                "foreign_keys": bool(fk_row[0]) if fk_row else False,
                "database_size_bytes": db_path.stat().st_size if db_path.exists() else 0,
                "in_transaction": self._connection.in_transaction,
            }
        except Exception as e:
            logger.error(f"Failed to get connection info: {str(e)}")
            return {"status": "error", "error": str(e)}

    async def _configure_connection(self) -> None:
        """Apply per-connection pragmas."""
        if self.config.foreign_keys:
            await self._connection.execute("PRAGMA foreign_keys = ON")
            logger.debug("Foreign key constraints enabled")

    @property
    def raw_connection(self) -> Optional[aiosqlite.Connection]:
        """Get the raw aiosqlite connection for advanced usage."""
        return self._connection

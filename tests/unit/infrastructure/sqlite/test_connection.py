"""Tests for SQLite connection management."""

import sqlite3
from unittest.mock import patch

import pytest

from dryrun_store.config.schema import DatabaseConnectionConfig
from dryrun_store.domain.exceptions import ServerError
from dryrun_store.infrastructure.sqlite.connection import SQLiteConnection


class TestSQLiteConnection:
    """Test cases for SQLiteConnection."""

    @pytest.mark.asyncio
    async def test_connect_creates_parent_directory(self, tmp_path):
        db_path = tmp_path / "nested" / "store.sqlite"
        connection = SQLiteConnection(str(db_path))

        await connection.connect()
        try:
            assert db_path.parent.is_dir()
            assert await connection.is_connected() is True
            assert await connection.ping() is True
            assert connection.raw_connection is not None
        finally:
            await connection.disconnect()

    @pytest.mark.asyncio
    async def test_foreign_keys_enabled_per_connection(self, tmp_path):
        connection = SQLiteConnection(str(tmp_path / "store.sqlite"))
        await connection.connect()
        try:
            info = await connection.get_connection_info()
        finally:
            await connection.disconnect()

        assert info["status"] == "connected"
        assert info["foreign_keys"] is True
        assert info["in_transaction"] is False
        assert info["sqlite_version"].count(".") >= 1

    @pytest.mark.asyncio
    async def test_foreign_keys_can_be_disabled(self, tmp_path):
        config = DatabaseConnectionConfig(database_path=str(tmp_path / "store.sqlite"), foreign_keys=False)
        connection = SQLiteConnection(config.database_path, config)
        await connection.connect()
        try:
            info = await connection.get_connection_info()
        finally:
            await connection.disconnect()

        assert info["foreign_keys"] is False

    @pytest.mark.asyncio
    async def test_default_config(self, tmp_path):
        connection = SQLiteConnection(str(tmp_path / "store.sqlite"))

        assert connection.config.timeout == 5.0
        assert connection.config.foreign_keys is True

    @pytest.mark.asyncio
    async def test_disconnect(self, tmp_path):
        connection = SQLiteConnection(str(tmp_path / "store.sqlite"))
        await connection.connect()
        await connection.disconnect()

        assert await connection.is_connected() is False
        assert await connection.ping() is False
        assert await connection.get_connection_info() == {"status": "disconnected"}
        assert connection.raw_connection is None

    @pytest.mark.asyncio
    async def test_disconnect_without_connect_is_noop(self, tmp_path):
        connection = SQLiteConnection(str(tmp_path / "store.sqlite"))
        await connection.disconnect()
        assert await connection.is_connected() is False

    @pytest.mark.asyncio
    async def test_connect_failure_raises_server_error(self, tmp_path):
        connection = SQLiteConnection(str(tmp_path / "store.sqlite"))

        with patch(
            "dryrun_store.infrastructure.sqlite.connection.aiosqlite.connect",
            side_effect=sqlite3.OperationalError("unable to open database file"),
        ):
            with pytest.raises(ServerError) as exc_info:
                await connection.connect()

        assert exc_info.value.message == "Failed to connect to database"
        assert exc_info.value.raw == "unable to open database file"
        assert await connection.is_connected() is False

    @pytest.mark.asyncio
    async def test_memory_database(self):
        connection = SQLiteConnection(":memory:")
        await connection.connect()
        try:
            assert await connection.ping() is True
        finally:
            await connection.disconnect()

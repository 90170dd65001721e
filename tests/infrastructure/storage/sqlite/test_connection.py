"""Tests for the SQLite connection pool."""

import asyncio
from pathlib import Path
from unittest.mock import MagicMock, patch

import aiosqlite
import pytest

import src.infrastructure.storage.sqlite.connection as conn_module
from src.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)


async def _customer_count(pool: ConnectionPool) -> int:
    async with pool.acquire() as conn:
        cursor = await conn.execute("SELECT COUNT(*) FROM customers")
        row = await cursor.fetchone()
    return row[0]


class TestConnectionPool:
    async def test_initialize_opens_every_connection(self, tmp_path: Path):
        db_path = tmp_path / "data" / "pos.db"
        pool = ConnectionPool(db_path, pool_size=3)

        await pool.initialize()
        try:
            assert db_path.parent.exists()
            assert pool.initialized
            assert pool._pool.qsize() == 3
        finally:
            await pool.close()

        assert not pool.initialized

    async def test_connection_pragmas(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, pool_size=1)
        try:
            async with pool.acquire() as conn:
                cursor = await conn.execute("PRAGMA journal_mode")
                assert (await cursor.fetchone())[0].lower() == "wal"
                cursor = await conn.execute("PRAGMA foreign_keys")
                assert (await cursor.fetchone())[0] == 1
                assert conn.row_factory is aiosqlite.Row
        finally:
            await pool.close()

    async def test_acquire_blocks_when_exhausted(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, pool_size=1)
        try:
            async with pool.acquire():
                with pytest.raises(asyncio.TimeoutError):
                    async with asyncio.timeout(0.1):
                        async with pool.acquire():
                            pass
            assert pool._pool.qsize() == 1
        finally:
            await pool.close()

    async def test_in_use_counts_checked_out_connections(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, pool_size=2)
        try:
            async with pool.acquire():
                assert pool.in_use == 1
            assert pool.in_use == 0
        finally:
            await pool.close()

    async def test_transaction_commits(self, initialized_db: Path):
        pool = ConnectionPool(initialized_db, pool_size=1)
        try:
            async with pool.transaction() as conn:
                await conn.execute(
                    "INSERT INTO customers (id, name) VALUES (?, ?)",
                    ("cust-1", "Ama Mensah"),
                )
            assert await _customer_count(pool) == 1
        finally:
            await pool.close()

    async def test_transaction_rolls_back_on_error(self, initialized_db: Path):
        pool = ConnectionPool(initialized_db, pool_size=1)
        try:
            with pytest.raises(ValueError):
                async with pool.transaction() as conn:
                    await conn.execute(
                        "INSERT INTO customers (id, name) VALUES (?, ?)",
                        ("cust-1", "Ama Mensah"),
                    )
                    raise ValueError("abort")
            assert await _customer_count(pool) == 0
        finally:
            await pool.close()

    async def test_ping_reports_latency(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, pool_size=1)
        try:
            latency = await pool.ping()
        finally:
            await pool.close()

        assert latency >= 0


class TestGlobalPool:
    async def test_get_pool_is_a_singleton(self, mock_settings: MagicMock):
        conn_module._pool = None
        with patch.object(conn_module, "get_settings", return_value=mock_settings):
            try:
                first = await get_pool()
                second = await get_pool()
                assert first is second
                assert first.db_path == mock_settings.storage.db_path
                assert first.pool_size == 2
            finally:
                await close_pool()

        assert conn_module._pool is None

    async def test_close_pool_without_pool(self):
        conn_module._pool = None
        await close_pool()

    async def test_module_level_helpers(
        self, initialized_db: Path, mock_settings: MagicMock
    ):
        conn_module._pool = None
        with patch.object(conn_module, "get_settings", return_value=mock_settings):
            try:
                async with get_transaction() as conn:
                    await conn.execute(
                        "INSERT INTO customers (id, name) VALUES (?, ?)",
                        ("cust-1", "Ama Mensah"),
                    )
                async with get_connection() as conn:
                    cursor = await conn.execute("SELECT name FROM customers")
                    row = await cursor.fetchone()
                assert row["name"] == "Ama Mensah"
            finally:
                await close_pool()

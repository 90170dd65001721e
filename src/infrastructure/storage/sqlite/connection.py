"""
aiosqlite connection pool for the POS database.

The persistence adapter writes snapshots from background sync tasks while
the health route pings, so a small fixed set of connections is shared
through a queue. There is one pool per process, built from
``StorageSettings``.
"""

import asyncio
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import aiosqlite

from src.config import get_logger, get_settings

logger = get_logger(__name__)

# Applied to every connection; busy_timeout is added per pool
_PRAGMAS = (
    "PRAGMA journal_mode=WAL",
    "PRAGMA synchronous=NORMAL",
    "PRAGMA foreign_keys=ON",
)


async def _open(db_path: Path, busy_timeout: int) -> aiosqlite.Connection:
    conn = await aiosqlite.connect(db_path)
    for pragma in (*_PRAGMAS, f"PRAGMA busy_timeout={busy_timeout}"):
        await conn.execute(pragma)
    conn.row_factory = aiosqlite.Row
    return conn


class ConnectionPool:
    """
    Fixed-size pool of SQLite connections.

    Nothing is opened until ``initialize()`` or the first ``acquire()``.
    A caller waits in ``acquire()`` while every connection is checked out.
    """

    def __init__(
        self,
        db_path: Path,
        pool_size: int = 5,
        busy_timeout: int = 30000,
    ):
        self.db_path = db_path
        self.pool_size = pool_size
        self.busy_timeout = busy_timeout

        self._pool: asyncio.Queue[aiosqlite.Connection] = asyncio.Queue(maxsize=pool_size)
        self._opened: list[aiosqlite.Connection] = []
        self._setup_lock = asyncio.Lock()

    @property
    def initialized(self) -> bool:
        return bool(self._opened)

    @property
    def in_use(self) -> int:
        """Connections currently checked out."""
        return len(self._opened) - self._pool.qsize()

    async def initialize(self) -> None:
        async with self._setup_lock:
            if self._opened:
                return

            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            self._opened = [
                await _open(self.db_path, self.busy_timeout) for _ in range(self.pool_size)
            ]
            for conn in self._opened:
                self._pool.put_nowait(conn)

            logger.info(
                "connection_pool_initialized",
                db_path=str(self.db_path),
                pool_size=self.pool_size,
            )

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[aiosqlite.Connection]:
        """Check out a connection for the duration of the block."""
        if not self._opened:
            await self.initialize()

        conn = await self._pool.get()
        try:
            yield conn
        finally:
            self._pool.put_nowait(conn)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        """Like ``acquire()``, but commit on exit and roll back on error."""
        async with self.acquire() as conn:
            try:
                yield conn
            except Exception:
                await conn.rollback()
                raise
            await conn.commit()

    async def ping(self) -> float:
        """Milliseconds for a ``SELECT 1`` round trip, waiting included."""
        start = time.perf_counter()
        async with self.acquire() as conn:
            await conn.execute("SELECT 1")
        return (time.perf_counter() - start) * 1000

    async def close(self) -> None:
        async with self._setup_lock:
            opened, self._opened = self._opened, []
            for conn in opened:
                await conn.close()
            self._pool = asyncio.Queue(maxsize=self.pool_size)
            if opened:
                logger.info("connection_pool_closed", db_path=str(self.db_path))


_pool: ConnectionPool | None = None


async def get_pool() -> ConnectionPool:
    """Process-wide pool, created from settings on first use."""
    global _pool
    if _pool is None:
        storage = get_settings().storage
        _pool = ConnectionPool(
            db_path=storage.db_path,
            pool_size=storage.pool_size,
            busy_timeout=storage.busy_timeout,
        )
        await _pool.initialize()
    return _pool


async def close_pool() -> None:
    global _pool
    pool, _pool = _pool, None
    if pool is not None:
        await pool.close()


@asynccontextmanager
async def get_connection() -> AsyncIterator[aiosqlite.Connection]:
    async with (await get_pool()).acquire() as conn:
        yield conn


@asynccontextmanager
async def get_transaction() -> AsyncIterator[aiosqlite.Connection]:
    async with (await get_pool()).transaction() as conn:
        yield conn

"""Async SQLite connection pool.

Wraps `aiosqlite` connections in a bounded pool that is opened lazily on first
use. Callers never manage connections themselves: :meth:`ConnectionPool.execute`
acquires one, runs a single parameterized statement and returns it to the pool.
"""

from __future__ import annotations

import asyncio
import logging
import sqlite3
import time
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, AsyncIterator, List, Optional, Sequence, Union

import aiosqlite

from docstore.errors import ConnectivityError

if TYPE_CHECKING:
    from docstore.config import DatabaseSettings

MEMORY_PATH = ":memory:"
MEMORY_POOL_CAPACITY = 10

logger = logging.getLogger(__name__)

Result = Union[List[aiosqlite.Row], int]


class ConnectionPool:
    """A bounded pool of reusable `aiosqlite` connections.

    ``size`` caps the number of concurrent connections. Callers beyond that
    wait in FIFO order for a connection to be returned; with ``timeout`` set
    they give up after that many seconds with :class:`ConnectivityError`.
    """

    def __init__(
        self,
        path: str = MEMORY_PATH,
        *,
        size: int = 5,
        timeout: Optional[float] = None,
        busy_timeout: float = 30.0,
    ) -> None:
        if size < 1:
            raise ValueError("Pool size must be positive")
        self.path = path
        self.size = size
        self.timeout = timeout
        self.busy_timeout = busy_timeout

        self._pool: Optional[asyncio.Queue[aiosqlite.Connection]] = None
        self._connections: List[aiosqlite.Connection] = []
        self._lock = asyncio.Lock()
        self._initialized = False

    @classmethod
    def from_settings(cls, settings: DatabaseSettings) -> ConnectionPool:
        return cls(
            settings.path,
            size=settings.pool_size,
            timeout=settings.pool_timeout,
            busy_timeout=settings.busy_timeout,
        )

    @property
    def is_open(self) -> bool:
        return self._initialized

    async def _connect(self) -> aiosqlite.Connection:
        try:
            conn = await aiosqlite.connect(
                self.path,
                timeout=self.busy_timeout,
                cached_statements=128,
            )
        except (sqlite3.Error, OSError) as e:
            logger.exception("Error opening database connection to %s: %s", self.path, e)
            raise ConnectivityError(f"Cannot open database {self.path!r}") from e
        conn.row_factory = aiosqlite.Row
        return conn

    async def _initialize(self) -> None:
        """Open the connections and populate the queue."""
        # A ":memory:" database is private to the connection that opened it,
        # so every slot of the pool hands out the same connection.
        if self.path == MEMORY_PATH:
            conn = await self._connect()
            self._connections = [conn]
            q: asyncio.Queue[aiosqlite.Connection] = asyncio.Queue(maxsize=MEMORY_POOL_CAPACITY)
            for _ in range(MEMORY_POOL_CAPACITY):
                q.put_nowait(conn)
            self._pool = q
            self._initialized = True
            logger.info(
                "Database connection pool initialized with a shared in-memory connection (capacity: %d)",
                MEMORY_POOL_CAPACITY,
            )
            return

        q = asyncio.Queue(maxsize=self.size)
        opened: List[aiosqlite.Connection] = []
        try:
            for i in range(self.size):
                conn = await self._connect()
                opened.append(conn)
                q.put_nowait(conn)
                logger.debug("Opened connection %d/%d", i + 1, self.size)
        except ConnectivityError:
            for conn in opened:
                await conn.close()
            raise
        self._connections = opened
        self._pool = q
        self._initialized = True
        logger.info("Database connection pool initialized with size %d", self.size)

    async def _validate(self, conn: aiosqlite.Connection) -> aiosqlite.Connection:
        """Return *conn*, or a fresh replacement if it no longer answers."""
        try:
            await conn.execute("SELECT 1;")
            return conn
        except (sqlite3.Error, ValueError) as e:
            logger.warning("Database connection is invalid, recreating new connection: %s", e)

        new_conn = await self._connect()
        try:
            await conn.close()
        except (sqlite3.Error, ValueError) as exc:
            logger.warning("Error closing invalid DB connection: %s", exc)

        if self.path == MEMORY_PATH:
            # Every slot must point at the same in-memory database.
            self._connections = [new_conn]
            pool = self._pool
            if pool is not None:
                queued = pool.qsize()
                for _ in range(queued):
                    pool.get_nowait()
                for _ in range(queued):
                    pool.put_nowait(new_conn)
        else:
            self._connections = [new_conn if c is conn else c for c in self._connections]
        return new_conn

    def _release(self, pool: asyncio.Queue[aiosqlite.Connection], conn: aiosqlite.Connection) -> None:
        if self.path == MEMORY_PATH and self._connections and conn is not self._connections[0]:
            conn = self._connections[0]
        pool.put_nowait(conn)
        logger.debug("Returned database connection to pool")

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[aiosqlite.Connection]:
        """
        Acquire a database connection from the pool.

        Usage:
            async with pool.acquire() as conn:
                await conn.execute(...)
                await conn.commit()
        """
        if not self._initialized:
            async with self._lock:
                if not self._initialized:
                    logger.info("Initializing database connection pool")
                    await self._initialize()

        pool = self._pool
        if pool is None:
            raise ConnectivityError("Connection pool is not initialized")
        try:
            if self.timeout is None:
                conn = await pool.get()
            else:
                conn = await asyncio.wait_for(pool.get(), timeout=self.timeout)
            logger.debug("Acquired database connection from pool")
        except asyncio.TimeoutError:
            logger.error("Timed out waiting for database connection")
            raise ConnectivityError("Database connection timeout") from None

        # The slot goes back even if validation fails or the caller is cancelled.
        try:
            conn = await self._validate(conn)
        except BaseException:
            self._release(pool, conn)
            raise

        start_time = time.monotonic()
        try:
            yield conn
        except Exception as e:
            logger.error("Database operation error: %s", e)
            raise
        finally:
            elapsed = time.monotonic() - start_time
            logger.debug("Database connection held for %.3f seconds", elapsed)
            self._release(pool, conn)

    async def execute(self, statement: str, parameters: Sequence[object] = ()) -> Result:
        """Run one parameterized statement.

        Returns the fetched rows for statements that produce a result set,
        otherwise commits and returns the number of affected rows.
        """
        async with self.acquire() as conn:
            async with conn.execute(statement, tuple(parameters)) as cursor:
                if cursor.description is not None:
                    return list(await cursor.fetchall())
                await conn.commit()
                return cursor.rowcount

    async def close(self) -> None:
        """Close all connections in the pool and reset its state."""
        if self._pool is None:
            return

        for conn in self._connections:
            try:
                await conn.close()
            except sqlite3.Error as exc:  # pragma: no cover - cleanup best effort
                logger.warning("Error closing DB connection: %s", exc)

        self._connections = []
        self._pool = None
        self._initialized = False
        logger.info("Database connection pool closed")

    async def __aenter__(self) -> ConnectionPool:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

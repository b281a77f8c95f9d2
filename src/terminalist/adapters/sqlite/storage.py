"""Lock-guarded access to the local cache connection.

The cache connection is the only shared mutable resource. It is wrapped in a
single ``asyncio.Lock`` and handed out through two scoped context managers:

- ``session()``: exclusive access for reads or single autocommit writes
- ``transaction()``: exclusive access plus BEGIN / COMMIT, with ROLLBACK on
  any exception raised inside the block

The lock is released on every exit path. Callers must not await a remote
backend call while holding it.
"""

from __future__ import annotations

import asyncio
import logging
import sqlite3
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from terminalist.adapters.sqlite.connection import get_connection, open_connection
from terminalist.exceptions import TransactionError

logger = logging.getLogger(__name__)


class LocalStorage:
    """Owns the cache connection and the lock guarding it."""

    def __init__(self, connection: sqlite3.Connection):
        self._connection = connection
        self._lock = asyncio.Lock()

    @classmethod
    def open(cls, db_path: str | Path) -> LocalStorage:
        """Open a dedicated connection (used by tests and tools)."""
        return cls(open_connection(db_path))

    @classmethod
    def shared(cls, db_path: str | Path | None = None) -> LocalStorage:
        """Wrap the process-wide connection."""
        return cls(get_connection(db_path))

    @property
    def locked(self) -> bool:
        return self._lock.locked()

    @asynccontextmanager
    async def session(self) -> AsyncIterator[sqlite3.Connection]:
        """Acquire exclusive access to the connection."""
        async with self._lock:
            yield self._connection

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[sqlite3.Connection]:
        """Acquire exclusive access and run the block in one transaction.

        Raises:
            TransactionError: If COMMIT fails (the transaction is rolled back)
        """
        async with self._lock:
            conn = self._connection
            conn.execute("BEGIN")
            try:
                yield conn
            except BaseException:
                self._rollback(conn)
                raise
            try:
                conn.execute("COMMIT")
            except sqlite3.Error as e:
                self._rollback(conn)
                raise TransactionError(f"Failed to commit local transaction: {e}") from e

    @staticmethod
    def _rollback(conn: sqlite3.Connection) -> None:
        if conn.in_transaction:
            conn.execute("ROLLBACK")
            logger.debug("local transaction rolled back")

    def close(self) -> None:
        self._connection.close()

"""Tests for LocalStorage locking and transaction scoping."""

from __future__ import annotations

import asyncio
import sqlite3

import pytest

from terminalist.adapters.sqlite import LocalStorage
from terminalist.exceptions import TransactionError


def _count_projects(storage: LocalStorage) -> int:
    return storage._connection.execute("SELECT COUNT(*) FROM projects").fetchone()[0]


def _insert_project(conn: sqlite3.Connection, remote_id: str) -> None:
    conn.execute(
        "INSERT INTO projects (uuid, backend_uuid, remote_id, name) "
        "VALUES (?, (SELECT uuid FROM backends LIMIT 1), ?, ?)",
        (f"uuid-{remote_id}", remote_id, f"Project {remote_id}"),
    )


# ---------------------------------------------------------------------------
# session()
# ---------------------------------------------------------------------------


class TestSession:
    @pytest.mark.asyncio
    async def test_holds_lock_inside_block(self, storage):
        assert not storage.locked
        async with storage.session():
            assert storage.locked
        assert not storage.locked

    @pytest.mark.asyncio
    async def test_releases_lock_on_exception(self, storage):
        with pytest.raises(RuntimeError):
            async with storage.session():
                raise RuntimeError("boom")
        assert not storage.locked

    @pytest.mark.asyncio
    async def test_serializes_concurrent_holders(self, storage):
        order: list[str] = []

        async def holder(name: str) -> None:
            async with storage.session():
                order.append(f"{name}-in")
                await asyncio.sleep(0.01)
                order.append(f"{name}-out")

        await asyncio.gather(holder("a"), holder("b"))

        assert order in (
            ["a-in", "a-out", "b-in", "b-out"],
            ["b-in", "b-out", "a-in", "a-out"],
        )


# ---------------------------------------------------------------------------
# transaction()
# ---------------------------------------------------------------------------


class TestTransaction:
    @pytest.mark.asyncio
    async def test_commits_on_success(self, storage):
        async with storage.transaction() as conn:
            _insert_project(conn, "1")
            _insert_project(conn, "2")

        assert _count_projects(storage) == 2
        assert not storage._connection.in_transaction

    @pytest.mark.asyncio
    async def test_rolls_back_everything_on_exception(self, storage):
        with pytest.raises(ValueError):
            async with storage.transaction() as conn:
                _insert_project(conn, "1")
                raise ValueError("failed halfway")

        assert _count_projects(storage) == 0
        assert not storage.locked

    @pytest.mark.asyncio
    async def test_rolls_back_on_sql_error(self, storage):
        with pytest.raises(sqlite3.IntegrityError):
            async with storage.transaction() as conn:
                _insert_project(conn, "1")
                _insert_project(conn, "1")

        assert _count_projects(storage) == 0

    @pytest.mark.asyncio
    async def test_commit_failure_raises_transaction_error(self, storage, mocker):
        conn = mocker.MagicMock()
        conn.in_transaction = True
        conn.execute.side_effect = [None, sqlite3.OperationalError("disk full"), None]
        failing = LocalStorage(conn)

        with pytest.raises(TransactionError, match="disk full"):
            async with failing.transaction():
                pass

        executed = [call.args[0] for call in conn.execute.call_args_list]
        assert executed == ["BEGIN", "COMMIT", "ROLLBACK"]
        assert not failing.locked

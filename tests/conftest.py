"""
Shared fixtures: an in-memory stand-in for the `records` table.

The fake replaces the repository functions and `core.db.transaction`, so the
service and HTTP layers run unchanged without PostgreSQL.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

import pytest
from fastapi.testclient import TestClient

from core import db
from records import repository


class FakeConnection:
    def __init__(self) -> None:
        self.committed = False
        self.rolled_back = False


class FakeRecordStore:
    """Dict-backed records table with snapshot/restore transactions."""

    def __init__(self) -> None:
        self.rows: dict[int, dict[str, Any]] = {}
        self.last_value = 0
        self.transactions: list[FakeConnection] = []
        self.fail_next: BaseException | None = None

    def seed(self, *titles: str) -> list[int]:
        ids = []
        for title in titles:
            ids.append(self._insert(title)["id"])
        return ids

    def _insert(self, title: str) -> dict[str, Any]:
        self.last_value += 1
        row = {"id": self.last_value, "title": title}
        self.rows[row["id"]] = row
        return dict(row)

    def _maybe_fail(self) -> None:
        if self.fail_next is not None:
            exc, self.fail_next = self.fail_next, None
            raise exc

    @asynccontextmanager
    async def transaction(self):
        # Like a sequence, last_value survives a rollback.
        snapshot = {k: dict(v) for k, v in self.rows.items()}
        conn = FakeConnection()
        self.transactions.append(conn)
        try:
            yield conn
        except BaseException:
            self.rows = snapshot
            conn.rolled_back = True
            raise
        conn.committed = True

    async def list_records(self, *, limit: int, offset: int) -> list[dict[str, Any]]:
        self._maybe_fail()
        ordered = [dict(self.rows[k]) for k in sorted(self.rows)]
        return ordered[offset : offset + limit]

    async def count_records(self) -> int:
        self._maybe_fail()
        return len(self.rows)

    async def get_record(self, record_id: int) -> dict[str, Any] | None:
        self._maybe_fail()
        row = self.rows.get(record_id)
        return dict(row) if row is not None else None

    async def insert_record(self, conn: FakeConnection, *, title: str) -> dict[str, Any]:
        assert isinstance(conn, FakeConnection)
        row = self._insert(title)
        self._maybe_fail()
        return row

    async def update_or_create_record(
        self,
        conn: FakeConnection,
        record_id: int,
        *,
        title: str,
    ) -> tuple[dict[str, Any], bool]:
        assert isinstance(conn, FakeConnection)
        created = record_id not in self.rows
        self.rows[record_id] = {"id": record_id, "title": title}
        if created:
            # setval(seq, GREATEST($1, last_value))
            self.last_value = max(record_id, self.last_value)
        self._maybe_fail()
        return dict(self.rows[record_id]), created

    async def delete_record(self, record_id: int) -> bool:
        self._maybe_fail()
        return self.rows.pop(record_id, None) is not None


@pytest.fixture
def store(monkeypatch) -> FakeRecordStore:
    fake = FakeRecordStore()
    monkeypatch.setattr(db, "transaction", fake.transaction)
    for name in (
        "list_records",
        "count_records",
        "get_record",
        "insert_record",
        "update_or_create_record",
        "delete_record",
    ):
        monkeypatch.setattr(repository, name, getattr(fake, name))
    return fake


@pytest.fixture
def client(store: FakeRecordStore) -> TestClient:
    # Not entered as a context manager: the lifespan (real pool) stays off.
    from main import app

    return TestClient(app)

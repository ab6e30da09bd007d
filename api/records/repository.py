"""
Record persistence (raw SQL).

Writes take an explicit connection: the caller owns the transaction
(see `core.db.transaction`).
"""

from __future__ import annotations

from typing import Any

import asyncpg

from core import db


async def list_records(*, limit: int, offset: int) -> list[dict[str, Any]]:
    return await db.fetch_all(
        """
        SELECT id, title
        FROM records
        ORDER BY id ASC
        LIMIT $1
        OFFSET $2
        """,
        limit,
        offset,
    )


async def count_records() -> int:
    total = await db.fetch_value("SELECT count(*) FROM records")
    return int(total or 0)


async def get_record(record_id: int) -> dict[str, Any] | None:
    return await db.fetch_one(
        """
        SELECT id, title
        FROM records
        WHERE id = $1
        """,
        record_id,
    )


async def insert_record(conn: asyncpg.Connection, *, title: str) -> dict[str, Any]:
    row = await db.fetch_one_in(
        conn,
        """
        INSERT INTO records (title)
        VALUES ($1)
        RETURNING id, title
        """,
        title,
    )
    if row is None:
        raise RuntimeError("Failed to insert record.")
    return row


async def update_or_create_record(
    conn: asyncpg.Connection,
    record_id: int,
    *,
    title: str,
) -> tuple[dict[str, Any], bool]:
    """
    Set the title of `record_id`, creating the row with that id if absent.

    Returns (row, created). `xmax = 0` holds only for a freshly inserted
    tuple, which tells an insert apart from a conflict update.
    """
    row = await db.fetch_one_in(
        conn,
        """
        INSERT INTO records (id, title)
        VALUES ($1, $2)
        ON CONFLICT (id) DO UPDATE
        SET title = EXCLUDED.title
        RETURNING id, title, (xmax = 0) AS created
        """,
        record_id,
        title,
    )
    if row is None:
        raise RuntimeError("Failed to upsert record.")

    created = bool(row.pop("created"))
    if created:
        # Explicit ids bypass the sequence; only ever move it forward.
        await conn.execute(
            """
            SELECT setval('records_id_seq', GREATEST($1, last_value))
            FROM records_id_seq
            """,
            record_id,
        )
    return row, created


async def delete_record(record_id: int) -> bool:
    """
    Delete a record. Returns False when no row had that id.
    """
    row = await db.fetch_one(
        """
        DELETE FROM records
        WHERE id = $1
        RETURNING id
        """,
        record_id,
    )
    return row is not None

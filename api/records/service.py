"""
Record business logic.

Every operation returns a ready-to-serialize envelope:
- success: {"status": <logical status>, "data": ...}
- failure: raises `errors.RecordError`, rendered by the app's exception handler
"""

from __future__ import annotations

import logging
import math
from typing import Any

from fastapi.datastructures import URL

from core import db, settings

from . import errors, repository, schemas

logger = logging.getLogger(__name__)


def _ok(status: int, data: Any) -> dict:
    return {"status": status, "data": data}


def _positive_int(raw: Any, default: int) -> int:
    """
    Lenient int parsing for query values: junk, zero and negatives fall back.
    """
    try:
        value = int(str(raw).strip())
    except (TypeError, ValueError):
        return default
    return value if value > 0 else default


def resolve_page_size(raw: Any) -> int:
    return min(_positive_int(raw, settings.default_page_size()), settings.max_page_size())


def resolve_page(raw: Any) -> int:
    return _positive_int(raw, 1)


def build_paginator(
    rows: list[dict],
    *,
    total: int,
    page: int,
    per_page: int,
    url: URL,
) -> dict:
    """
    Length-aware page payload with links to neighbouring pages.

    Links keep every other query parameter of `url` and replace `page`.
    """
    last_page = max(int(math.ceil(total / per_page)), 1)

    def page_url(n: int) -> str:
        return str(url.include_query_params(page=n))

    first_item = (page - 1) * per_page + 1 if rows else None
    last_item = first_item + len(rows) - 1 if first_item is not None else None

    paginator = schemas.Paginator(
        current_page=page,
        data=[schemas.RecordOut(**row) for row in rows],
        first_page_url=page_url(1),
        from_=first_item,
        last_page=last_page,
        last_page_url=page_url(last_page),
        next_page_url=page_url(page + 1) if page < last_page else None,
        path=str(url.replace(query="")),
        per_page=per_page,
        prev_page_url=page_url(page - 1) if page > 1 else None,
        to=last_item,
        total=total,
    )
    return paginator.model_dump(by_alias=True)


async def list_records(*, limit: Any = None, page: Any = None, url: URL) -> dict:
    per_page = resolve_page_size(limit)
    current = resolve_page(page)
    with errors.translated("index"):
        total = await repository.count_records()
        rows = await repository.list_records(limit=per_page, offset=(current - 1) * per_page)
    return _ok(200, build_paginator(rows, total=total, page=current, per_page=per_page, url=url))


async def create_record(payload: schemas.RecordWrite) -> dict:
    with errors.translated("store"):
        async with db.transaction() as conn:
            row = await repository.insert_record(conn, title=payload.title)
    logger.info("record_created id=%s", row["id"])
    return _ok(201, schemas.RecordOut(**row).model_dump())


async def get_record(record_id: int) -> dict:
    with errors.translated("show"):
        row = await repository.get_record(record_id)
        if row is None:
            raise errors.RecordNotFound(record_id, status=404)
    return _ok(200, schemas.RecordOut(**row).model_dump())


async def update_or_create_record(record_id: int, payload: schemas.RecordWrite) -> dict:
    """
    Update the title of `record_id`, creating the record with that id when it
    does not exist yet.
    """
    with errors.translated("update"):
        async with db.transaction() as conn:
            row, created = await repository.update_or_create_record(
                conn,
                record_id,
                title=payload.title,
            )
    logger.info("record_upserted id=%s created=%s", row["id"], created)
    return _ok(200, schemas.RecordOut(**row).model_dump())


async def delete_record(record_id: int) -> dict:
    with errors.translated("destroy"):
        deleted = await repository.delete_record(record_id)
        if not deleted:
            raise errors.RecordNotFound(record_id)
    logger.info("record_deleted id=%s", record_id)
    return _ok(200, [])

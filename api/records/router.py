"""
Record API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Path, Query, Request

from . import schemas, service

router = APIRouter()


@router.get("/records", summary="Get list of records", operation_id="index")
async def index(
    request: Request,
    limit: str | None = Query(default=None, description="page size"),
    page: str | None = Query(default=None, description="the page number"),
) -> dict:
    """
    List records (id, title) one page at a time.
    """
    return await service.list_records(limit=limit, page=page, url=request.url)


@router.post("/records", summary="Store record in DB", operation_id="store")
async def store(payload: schemas.RecordWrite) -> dict:
    return await service.create_record(payload)


@router.get("/records/{record_id}", summary="Get Record Detail", operation_id="show")
async def show(record_id: int = Path(..., ge=1, description="Id of Record")) -> dict:
    return await service.get_record(record_id)


@router.put("/records/{record_id}", summary="Update record in DB", operation_id="update")
async def update(
    payload: schemas.RecordWrite,
    record_id: int = Path(..., ge=1, description="Id of Record"),
) -> dict:
    """
    Update a record's title; creates the record with this id if it is missing.
    """
    return await service.update_or_create_record(record_id, payload)


@router.delete("/records/{record_id}", summary="Delete Record", operation_id="destroy")
async def destroy(record_id: int = Path(..., ge=1, description="Id of Record")) -> dict:
    return await service.delete_record(record_id)

"""
Pydantic schemas for record endpoints.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class RecordWrite(BaseModel):
    title: str = Field(..., examples=["Test Record Title"])


class RecordOut(BaseModel):
    id: int
    title: str | None


class Paginator(BaseModel):
    current_page: int
    data: list[RecordOut]
    first_page_url: str
    # `from` is a keyword; serialized under its public name.
    from_: int | None = Field(default=None, serialization_alias="from")
    last_page: int
    last_page_url: str
    next_page_url: str | None
    path: str
    per_page: int
    prev_page_url: str | None
    to: int | None
    total: int

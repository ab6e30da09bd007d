"""
Error kinds surfaced by the records API.

Every failure reaching a client is a `RecordError`. The message is kept
verbatim from the underlying exception; the `kind` tells callers what went
wrong without parsing the message.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import contextmanager
from typing import Iterator

import asyncpg

from core import db

logger = logging.getLogger(__name__)


class RecordError(Exception):
    kind = "datastore"
    status = 400

    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status is not None:
            self.status = status

    def envelope(self) -> dict:
        return {"status": self.status, "error": self.kind, "message": self.message}


class RecordInvalid(RecordError):
    kind = "invalid"


class RecordNotFound(RecordError):
    kind = "not_found"

    def __init__(self, record_id: int, *, status: int | None = None) -> None:
        super().__init__(f"Record {record_id} not found.", status=status)
        self.record_id = record_id


class RecordConflict(RecordError):
    kind = "conflict"


class DatastoreUnavailable(RecordError):
    kind = "unavailable"


class DatastoreError(RecordError):
    kind = "datastore"


_INVALID = (
    asyncpg.exceptions.NotNullViolationError,
    asyncpg.exceptions.CheckViolationError,
    asyncpg.exceptions.DataError,
)

_UNAVAILABLE = (
    asyncpg.exceptions.PostgresConnectionError,
    asyncpg.exceptions.InterfaceError,
    asyncpg.exceptions.TooManyConnectionsError,
    db.PoolNotInitialized,
    OSError,
    TimeoutError,
    asyncio.TimeoutError,
)


def _message(exc: BaseException) -> str:
    return str(exc) or exc.__class__.__name__


def from_exception(exc: BaseException) -> RecordError:
    """
    Map a datastore/runtime exception to its error kind.
    """
    if isinstance(exc, RecordError):
        return exc
    if isinstance(exc, asyncpg.exceptions.UniqueViolationError):
        return RecordConflict(_message(exc))
    if isinstance(exc, _INVALID):
        return RecordInvalid(_message(exc))
    if isinstance(exc, _UNAVAILABLE):
        return DatastoreUnavailable(_message(exc))
    return DatastoreError(_message(exc))


@contextmanager
def translated(operation: str) -> Iterator[None]:
    """
    Turn any exception raised inside the block into a `RecordError`.
    """
    try:
        yield
    except RecordError as exc:
        logger.warning("records_%s_failed kind=%s message=%s", operation, exc.kind, exc.message)
        raise
    except Exception as exc:
        error = from_exception(exc)
        if isinstance(error, DatastoreError):
            logger.exception("records_%s_failed kind=%s", operation, error.kind)
        else:
            logger.warning("records_%s_failed kind=%s message=%s", operation, error.kind, error.message)
        raise error from exc

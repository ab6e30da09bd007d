"""
Environment-driven settings.

Every value is read on call, so tests can override it with monkeypatch.setenv.
"""

from __future__ import annotations

import os

DEFAULT_PAGE_SIZE = 15
MAX_PAGE_SIZE = 100
DEFAULT_CORS_ORIGINS = (
    "http://localhost:5173",
    "http://127.0.0.1:5173",
)


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_list(name: str, default: tuple[str, ...]) -> list[str]:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return list(default)
    return [item.strip() for item in raw.split(",") if item.strip()]


def pool_min_size() -> int:
    return max(_env_int("DB_POOL_MIN_SIZE", 1), 0)


def pool_max_size() -> int:
    return max(_env_int("DB_POOL_MAX_SIZE", 5), 1)


def command_timeout() -> int:
    return _env_int("DB_COMMAND_TIMEOUT", 30)


def default_page_size() -> int:
    size = _env_int("RECORDS_DEFAULT_PAGE_SIZE", DEFAULT_PAGE_SIZE)
    return size if size > 0 else DEFAULT_PAGE_SIZE


def max_page_size() -> int:
    size = _env_int("RECORDS_MAX_PAGE_SIZE", MAX_PAGE_SIZE)
    return size if size > 0 else MAX_PAGE_SIZE


def cors_allow_origins() -> list[str]:
    return _env_list("CORS_ALLOW_ORIGINS", DEFAULT_CORS_ORIGINS)


def log_level() -> str:
    return os.environ.get("LOG_LEVEL", "INFO").strip().upper() or "INFO"

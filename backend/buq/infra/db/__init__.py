"""Database connection helpers."""

from __future__ import annotations

from contextlib import contextmanager
from functools import lru_cache
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Connection, Engine

from ...config import load_settings
from .tables import metadata

__all__ = ["get_engine", "metadata", "transaction"]


@lru_cache()
def get_engine() -> Engine:
    """Return the process-wide engine built from the active settings."""

    settings = load_settings()
    return create_engine(settings.database_url, echo=False, pool_pre_ping=True)


@contextmanager
def transaction(engine: Engine | None = None) -> Iterator[Connection]:
    """Scope one unit of work: commit on normal exit, roll back on error."""

    with (engine or get_engine()).begin() as conn:
        yield conn

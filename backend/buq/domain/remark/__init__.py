"""Remark domain package."""

from .repository import (
    InMemoryRemarkRepository,
    PostgresRemarkRepository,
    RemarkRepository,
)
from .search import QueryRemarkSearchParams, RemarkSearchParams
from .service import RemarkService
from .types import Remark

__all__ = [
    "InMemoryRemarkRepository",
    "PostgresRemarkRepository",
    "QueryRemarkSearchParams",
    "Remark",
    "RemarkRepository",
    "RemarkSearchParams",
    "RemarkService",
]

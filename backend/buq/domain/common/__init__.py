"""Building blocks shared by every BUQ domain package."""

from .base import BaseEntity, BaseExporter, BaseImporter
from .clock import as_utc, end_of_day, start_of_day, utcnow
from .errors import (
    BuqServiceError,
    ConcurrencyConflictError,
    NotFoundError,
    ProgrammingContractViolation,
    ValidationError,
)
from .pagination import Page, PageSpec, SortDirection, SortOrder, parse_sort
from .search import QueryParams, RawQueryParams

__all__ = [
    "BaseEntity",
    "BaseExporter",
    "BaseImporter",
    "BuqServiceError",
    "ConcurrencyConflictError",
    "NotFoundError",
    "Page",
    "PageSpec",
    "ProgrammingContractViolation",
    "QueryParams",
    "RawQueryParams",
    "SortDirection",
    "SortOrder",
    "ValidationError",
    "as_utc",
    "end_of_day",
    "parse_sort",
    "start_of_day",
    "utcnow",
]

"""Bottom-up quantification domain package."""

from .csv_export import HEADERS, REPORT_FILENAME, render_preparation_report
from .repository import (
    BottomUpQuantificationRepository,
    InMemoryBottomUpQuantificationRepository,
    PostgresBottomUpQuantificationRepository,
)
from .search import (
    BottomUpQuantificationSearchParams,
    QueryBottomUpQuantificationSearchParams,
)
from .service import BottomUpQuantificationService
from .types import (
    BottomUpQuantification,
    BottomUpQuantificationLineItem,
    BottomUpQuantificationStatus,
    BottomUpQuantificationStatusChange,
)

__all__ = [
    "HEADERS",
    "REPORT_FILENAME",
    "BottomUpQuantification",
    "BottomUpQuantificationLineItem",
    "BottomUpQuantificationRepository",
    "BottomUpQuantificationSearchParams",
    "BottomUpQuantificationService",
    "BottomUpQuantificationStatus",
    "BottomUpQuantificationStatusChange",
    "InMemoryBottomUpQuantificationRepository",
    "PostgresBottomUpQuantificationRepository",
    "QueryBottomUpQuantificationSearchParams",
    "render_preparation_report",
]

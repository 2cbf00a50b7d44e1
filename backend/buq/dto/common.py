"""Paging and audit envelopes shared by the routers."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Callable, Generic, TypeVar
from uuid import UUID

from pydantic import BaseModel, Field

from ..domain.audit import AuditLogEntry
from ..domain.common import Page

T = TypeVar("T")
S = TypeVar("S")


class PageDto(BaseModel, Generic[T]):
    """Paginated payload mirroring :class:`Page`."""

    content: list[T] = Field(default_factory=list)
    number: int = 0
    size: int = 0
    number_of_elements: int = 0
    total_elements: int = 0
    total_pages: int = 0
    first: bool = True
    last: bool = True

    @classmethod
    def from_page(cls, page: Page[S], mapper: Callable[[S], T]) -> "PageDto[T]":
        return cls(
            content=[mapper(item) for item in page.content],
            number=page.number,
            size=page.size,
            number_of_elements=page.number_of_elements,
            total_elements=page.total_elements,
            total_pages=page.total_pages,
            first=page.first,
            last=page.last,
        )


class AuditLogEntryDto(BaseModel):
    id: UUID
    commit_id: UUID
    author: str
    commit_date: datetime
    property_name: str
    left: Any = None
    right: Any = None

    @classmethod
    def from_entry(cls, entry: AuditLogEntry) -> "AuditLogEntryDto":
        return cls(
            id=entry.id,
            commit_id=entry.commit_id,
            author=entry.author,
            commit_date=entry.commit_date,
            property_name=entry.property_name,
            left=entry.left,
            right=entry.right,
        )

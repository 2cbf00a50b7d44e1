"""Audit trail domain types."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any
from uuid import UUID


@dataclass(frozen=True)
class AuditLogEntry:
    """One field-level change recorded for an entity.

    Entries written by the same save share a ``commit_id``. ``left`` is the
    value before the change and ``right`` the value after; both are plain
    JSON-compatible values.
    """

    id: UUID
    commit_id: UUID
    entity_type: str
    entity_id: UUID
    author: str
    commit_date: datetime
    property_name: str
    left: Any
    right: Any


@dataclass(frozen=True)
class AuditLogQuery:
    entity_type: str
    entity_id: UUID
    author: str | None = None
    property_name: str | None = None

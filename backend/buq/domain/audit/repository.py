"""Append-only persistence for audit log entries."""

from __future__ import annotations

from threading import RLock
from typing import Any, Iterable, Mapping, Protocol

from sqlalchemy import func, insert, select
from sqlalchemy.engine import Connection

from ...infra.db.tables import audit_log_entries
from ..common import Page, PageSpec, as_utc
from .types import AuditLogEntry, AuditLogQuery


class AuditLogRepository(Protocol):  # pragma: no cover - interface only
    """Persistence abstraction consumed by :class:`AuditTrail`."""

    def append(self, entries: Iterable[AuditLogEntry]) -> None: ...

    def search(self, query: AuditLogQuery, page_spec: PageSpec) -> Page[AuditLogEntry]: ...


class InMemoryAuditLogRepository(AuditLogRepository):
    """In-memory adapter primarily used for tests."""

    def __init__(self) -> None:
        self._lock = RLock()
        self._entries: list[AuditLogEntry] = []

    def append(self, entries: Iterable[AuditLogEntry]) -> None:
        with self._lock:
            self._entries.extend(entries)

    def search(self, query: AuditLogQuery, page_spec: PageSpec) -> Page[AuditLogEntry]:
        with self._lock:
            # Newest commit first; insertion order keeps the diff order within one commit.
            indexed = list(enumerate(self._entries))
        matches = [
            (index, entry)
            for index, entry in indexed
            if entry.entity_type == query.entity_type
            and entry.entity_id == query.entity_id
            and (not query.author or entry.author == query.author)
            and (not query.property_name or entry.property_name == query.property_name)
        ]
        matches.sort(key=lambda pair: (pair[1].commit_date, -pair[0]), reverse=True)
        return Page.slice([entry for _, entry in matches], page_spec)

    @property
    def entries(self) -> list[AuditLogEntry]:
        with self._lock:
            return list(self._entries)


class PostgresAuditLogRepository(AuditLogRepository):
    """SQLAlchemy-backed audit adapter bound to a request-scoped connection."""

    def __init__(self, connection: Connection) -> None:
        self._conn = connection

    def append(self, entries: Iterable[AuditLogEntry]) -> None:
        rows = [self._to_row(entry) for entry in entries]
        if rows:
            self._conn.execute(insert(audit_log_entries), rows)

    def search(self, query: AuditLogQuery, page_spec: PageSpec) -> Page[AuditLogEntry]:
        table = audit_log_entries
        conditions = [
            table.c.entity_type == query.entity_type,
            table.c.entity_id == query.entity_id,
        ]
        if query.author:
            conditions.append(table.c.author == query.author)
        if query.property_name:
            conditions.append(table.c.property_name == query.property_name)

        total = self._conn.execute(
            select(func.count()).select_from(table).where(*conditions)
        ).scalar_one()
        stmt = (
            select(table)
            .where(*conditions)
            .order_by(table.c.commit_date.desc(), table.c.property_name.asc())
            .offset(page_spec.offset)
            .limit(page_spec.size)
        )
        rows = self._conn.execute(stmt).mappings().all()
        return Page(
            content=[self._from_row(row) for row in rows],
            page_spec=page_spec,
            total_elements=int(total),
        )

    @staticmethod
    def _to_row(entry: AuditLogEntry) -> dict[str, Any]:
        return {
            "id": entry.id,
            "commit_id": entry.commit_id,
            "entity_type": entry.entity_type,
            "entity_id": entry.entity_id,
            "author": entry.author,
            "commit_date": entry.commit_date,
            "property_name": entry.property_name,
            "left_value": entry.left,
            "right_value": entry.right,
        }

    @staticmethod
    def _from_row(row: Mapping[str, Any]) -> AuditLogEntry:
        return AuditLogEntry(
            id=row["id"],
            commit_id=row["commit_id"],
            entity_type=row["entity_type"],
            entity_id=row["entity_id"],
            author=row["author"],
            commit_date=as_utc(row["commit_date"]),
            property_name=row["property_name"],
            left=row["left_value"],
            right=row["right_value"],
        )

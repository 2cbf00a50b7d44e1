"""Field-level change recording on top of :class:`AuditLogRepository`."""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from types import SimpleNamespace
from typing import Any, Dict, Mapping
from uuid import UUID, uuid4

from ...infra.logging import get_logger
from ..common import Page, PageSpec, utcnow
from .repository import AuditLogRepository, InMemoryAuditLogRepository
from .types import AuditLogEntry, AuditLogQuery

logger = get_logger(__name__)

IGNORED_PROPERTIES = frozenset({"id", "version"})


def to_jsonable(value: Any) -> Any:
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Mapping):
        return {str(key): to_jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(item) for item in value]
    return value


def export_snapshot(entity: Any) -> Dict[str, Any]:
    """Export ``entity`` into a plain namespace and return it as JSON data."""

    exporter = SimpleNamespace()
    entity.export(exporter)
    return {key: to_jsonable(value) for key, value in vars(exporter).items()}


class AuditTrail:
    """Diffs entity snapshots and stores one entry per changed property."""

    def __init__(self, repository: AuditLogRepository | None = None) -> None:
        self._repository = repository or InMemoryAuditLogRepository()

    def record(
        self,
        *,
        entity_type: str,
        entity_id: UUID,
        before: Mapping[str, Any] | None,
        after: Mapping[str, Any] | None,
        author: str,
    ) -> list[AuditLogEntry]:
        before = before or {}
        after = after or {}
        commit_id = uuid4()
        commit_date = utcnow()
        entries: list[AuditLogEntry] = []
        for key in sorted(set(before) | set(after)):
            if key in IGNORED_PROPERTIES:
                continue
            left = before.get(key)
            right = after.get(key)
            if left == right:
                continue
            entries.append(
                AuditLogEntry(
                    id=uuid4(),
                    commit_id=commit_id,
                    entity_type=entity_type,
                    entity_id=entity_id,
                    author=author,
                    commit_date=commit_date,
                    property_name=key,
                    left=left,
                    right=right,
                )
            )
        if entries:
            self._repository.append(entries)
            logger.debug(
                "audit_commit_recorded",
                extra={
                    "entity_type": entity_type,
                    "entity_id": str(entity_id),
                    "commit_id": str(commit_id),
                    "changed": [entry.property_name for entry in entries],
                },
            )
        return entries

    def search(
        self,
        *,
        entity_type: str,
        entity_id: UUID,
        author: str | None,
        property_name: str | None,
        page_spec: PageSpec,
    ) -> Page[AuditLogEntry]:
        query = AuditLogQuery(
            entity_type=entity_type,
            entity_id=entity_id,
            author=author or None,
            property_name=property_name or None,
        )
        return self._repository.search(query, page_spec)

"""Audit trail domain package."""

from .repository import (
    AuditLogRepository,
    InMemoryAuditLogRepository,
    PostgresAuditLogRepository,
)
from .trail import AuditTrail, export_snapshot, to_jsonable
from .types import AuditLogEntry, AuditLogQuery

__all__ = [
    "AuditLogEntry",
    "AuditLogQuery",
    "AuditLogRepository",
    "AuditTrail",
    "InMemoryAuditLogRepository",
    "PostgresAuditLogRepository",
    "export_snapshot",
    "to_jsonable",
]

"""Remark service orchestrating validation, persistence and audit."""

from __future__ import annotations

from typing import Dict
from uuid import UUID

from ...infra.logging import get_logger
from ...infra.metrics import MetricsClient, get_metrics_client
from ..audit import AuditLogEntry, AuditTrail, export_snapshot
from ..common import (
    ConcurrencyConflictError,
    NotFoundError,
    Page,
    PageSpec,
    ValidationError,
)
from .repository import RESOURCE, InMemoryRemarkRepository, RemarkRepository
from .search import RemarkSearchParams
from .types import Remark

logger = get_logger(__name__)

AUDIT_ENTITY_TYPE = "remark"


class RemarkService:
    """Validation + audit layer over remark persistence."""

    def __init__(
        self,
        *,
        repository: RemarkRepository | None = None,
        audit_trail: AuditTrail | None = None,
        metrics: MetricsClient | None = None,
    ) -> None:
        self._repository = repository or InMemoryRemarkRepository()
        self._audit_trail = audit_trail or AuditTrail()
        self._metrics = metrics or get_metrics_client()

    def search(self, params: RemarkSearchParams, page_spec: PageSpec) -> Page[Remark]:
        return self._repository.search(params, page_spec)

    def get(self, remark_id: UUID) -> Remark:
        remark = self._repository.find_by_id(remark_id)
        if remark is None:
            raise NotFoundError(RESOURCE, remark_id)
        return remark

    def create(self, importer: Remark.Importer, *, author: str) -> Remark:
        remark = Remark.new_instance(importer)
        self._ensure_valid(remark)
        saved = self._repository.save(remark)
        self._audit_trail.record(
            entity_type=AUDIT_ENTITY_TYPE,
            entity_id=saved.id,
            before=None,
            after=export_snapshot(saved),
            author=author,
        )
        self._metrics.increment("remark_created_total")
        logger.info("remark_created", extra={"id": str(saved.id), "author": author})
        return saved

    def update(
        self,
        remark_id: UUID,
        importer: Remark.Importer,
        *,
        author: str,
        expected_version: int | None = None,
    ) -> Remark:
        remark = self.get(remark_id)
        if importer.id is not None and importer.id != remark_id:
            raise ValidationError(
                "Remark id in the body does not match the path",
                fields={"id": f"expected {remark_id}, got {importer.id}"},
            )
        if expected_version is not None and expected_version != remark.version:
            raise ConcurrencyConflictError(
                RESOURCE,
                remark_id,
                expected_version=expected_version,
                actual_version=remark.version,
            )
        before = export_snapshot(remark)
        remark.update_from(importer)
        self._ensure_valid(remark)
        saved = self._repository.save(remark)
        self._audit_trail.record(
            entity_type=AUDIT_ENTITY_TYPE,
            entity_id=saved.id,
            before=before,
            after=export_snapshot(saved),
            author=author,
        )
        self._metrics.increment("remark_updated_total")
        logger.info(
            "remark_updated",
            extra={"id": str(remark_id), "version": saved.version, "author": author},
        )
        return saved

    def delete(self, remark_id: UUID, *, author: str) -> None:
        if not self._repository.exists_by_id(remark_id):
            raise NotFoundError(RESOURCE, remark_id)
        self._repository.delete_by_id(remark_id)
        self._metrics.increment("remark_deleted_total")
        logger.warning("remark_deleted", extra={"id": str(remark_id), "author": author})

    def audit_log(
        self,
        remark_id: UUID,
        *,
        author: str | None,
        property_name: str | None,
        page_spec: PageSpec,
    ) -> Page[AuditLogEntry]:
        if not self._repository.exists_by_id(remark_id):
            raise NotFoundError(RESOURCE, remark_id)
        return self._audit_trail.search(
            entity_type=AUDIT_ENTITY_TYPE,
            entity_id=remark_id,
            author=author,
            property_name=property_name,
            page_spec=page_spec,
        )

    @staticmethod
    def _ensure_valid(remark: Remark) -> None:
        problems: Dict[str, str] = remark.validate()
        if problems:
            raise ValidationError("Remark failed validation", fields=problems)

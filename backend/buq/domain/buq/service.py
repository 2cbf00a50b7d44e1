"""Bottom-up quantification service: workflow, persistence, audit and reports."""

from __future__ import annotations

from typing import Any, Dict
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
from ..remark import InMemoryRemarkRepository, RemarkRepository
from .csv_export import render_preparation_report
from .repository import (
    RESOURCE,
    BottomUpQuantificationRepository,
    InMemoryBottomUpQuantificationRepository,
)
from .search import BottomUpQuantificationSearchParams
from .types import BottomUpQuantification

logger = get_logger(__name__)

AUDIT_ENTITY_TYPE = "bottom_up_quantification"
LINE_ITEMS_GAUGE = "bottom_up_quantification_line_items"


def snapshot(buq: BottomUpQuantification) -> Dict[str, Any]:
    """Audit snapshot of ``buq`` including its line items.

    Line-item ids are left out; items are replaced wholesale on every save so
    their ids would show up as a change even when the figures did not.
    """

    data = export_snapshot(buq)
    items = []
    for item in buq.line_items:
        exported = export_snapshot(item)
        exported.pop("id", None)
        items.append(exported)
    data["line_items"] = items
    return data


class BottomUpQuantificationService:
    """Coordinates the quantification workflow over its repository."""

    def __init__(
        self,
        *,
        repository: BottomUpQuantificationRepository | None = None,
        remark_repository: RemarkRepository | None = None,
        audit_trail: AuditTrail | None = None,
        metrics: MetricsClient | None = None,
    ) -> None:
        self._repository = repository or InMemoryBottomUpQuantificationRepository()
        self._remarks = remark_repository or InMemoryRemarkRepository()
        self._audit_trail = audit_trail or AuditTrail()
        self._metrics = metrics or get_metrics_client()

    def search(
        self, params: BottomUpQuantificationSearchParams, page_spec: PageSpec
    ) -> Page[BottomUpQuantification]:
        return self._repository.search(params, page_spec)

    def get(self, buq_id: UUID) -> BottomUpQuantification:
        buq = self._repository.find_by_id(buq_id)
        if buq is None:
            raise NotFoundError(RESOURCE, buq_id)
        return buq

    def prepare(
        self,
        *,
        facility_id: UUID,
        program_id: UUID,
        processing_period_id: UUID,
        author: str,
    ) -> BottomUpQuantification:
        buq = BottomUpQuantification.prepare(
            facility_id=facility_id,
            program_id=program_id,
            processing_period_id=processing_period_id,
            author=author,
        )
        self._ensure_valid(buq)
        saved = self._repository.save(buq)
        self._audit_trail.record(
            entity_type=AUDIT_ENTITY_TYPE,
            entity_id=saved.id,
            before=None,
            after=snapshot(saved),
            author=author,
        )
        self._metrics.increment("bottom_up_quantification_prepared_total")
        self._metrics.gauge(LINE_ITEMS_GAUGE, len(saved.line_items))
        logger.info(
            "buq_prepared",
            extra={
                "id": str(saved.id),
                "facility_id": str(facility_id),
                "program_id": str(program_id),
                "processing_period_id": str(processing_period_id),
                "author": author,
            },
        )
        return saved

    def save(
        self,
        buq_id: UUID,
        importer: BottomUpQuantification.Importer,
        *,
        author: str,
        expected_version: int | None = None,
    ) -> BottomUpQuantification:
        """Apply ``importer`` to the stored quantification ``buq_id``."""

        buq = self.get(buq_id)
        if importer.id is not None and importer.id != buq_id:
            raise ValidationError(
                "Quantification id in the body does not match the path",
                fields={"id": f"expected {buq_id}, got {importer.id}"},
            )
        if expected_version is not None and expected_version != buq.version:
            raise ConcurrencyConflictError(
                RESOURCE,
                buq_id,
                expected_version=expected_version,
                actual_version=buq.version,
            )
        before = snapshot(buq)
        buq.update_from(importer)
        self._ensure_valid(buq)
        buq.touch()
        saved = self._repository.save(buq)
        entries = self._audit_trail.record(
            entity_type=AUDIT_ENTITY_TYPE,
            entity_id=saved.id,
            before=before,
            after=snapshot(saved),
            author=author,
        )
        self._metrics.increment("bottom_up_quantification_updated_total")
        self._metrics.gauge(LINE_ITEMS_GAUGE, len(saved.line_items))
        logger.info(
            "buq_updated",
            extra={
                "id": str(buq_id),
                "version": saved.version,
                "line_items": len(saved.line_items),
                "changed": [entry.property_name for entry in entries],
                "author": author,
            },
        )
        return saved

    def delete(self, buq_id: UUID, *, author: str) -> None:
        if not self._repository.exists_by_id(buq_id):
            raise NotFoundError(RESOURCE, buq_id)
        self._repository.delete_by_id(buq_id)
        self._metrics.increment("bottom_up_quantification_deleted_total")
        logger.warning("buq_deleted", extra={"id": str(buq_id), "author": author})

    def get_preparation_form_data(self, buq: BottomUpQuantification) -> bytes:
        remark_ids = {item.remark_id for item in buq.line_items if item.remark_id}
        names = {remark.id: remark.name for remark in self._remarks.find_by_ids(remark_ids)}
        data = render_preparation_report(buq, names)
        self._metrics.increment("bottom_up_quantification_report_total")
        logger.debug(
            "buq_report_rendered",
            extra={"id": str(buq.id), "rows": len(buq.line_items), "bytes": len(data)},
        )
        return data

    def audit_log(
        self,
        buq_id: UUID,
        *,
        author: str | None,
        property_name: str | None,
        page_spec: PageSpec,
    ) -> Page[AuditLogEntry]:
        if not self._repository.exists_by_id(buq_id):
            raise NotFoundError(RESOURCE, buq_id)
        return self._audit_trail.search(
            entity_type=AUDIT_ENTITY_TYPE,
            entity_id=buq_id,
            author=author,
            property_name=property_name,
            page_spec=page_spec,
        )

    @staticmethod
    def _ensure_valid(buq: BottomUpQuantification) -> None:
        problems = buq.validate()
        if problems:
            raise ValidationError("Quantification failed validation", fields=problems)

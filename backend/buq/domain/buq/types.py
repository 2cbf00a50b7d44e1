"""Bottom-up quantification aggregate and its import/export contract."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Dict, List, Protocol, Sequence
from uuid import UUID

from ..common import BaseEntity, BaseExporter, BaseImporter, utcnow
from ..common.errors import require


class BottomUpQuantificationStatus(str, Enum):
    DRAFT = "DRAFT"
    AUTHORIZED = "AUTHORIZED"
    IN_APPROVAL = "IN_APPROVAL"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class BottomUpQuantificationLineItem(BaseEntity):
    """Quantification figures for one orderable."""

    QUANTITY_FIELDS = (
        "annual_adjusted_consumption",
        "verified_annual_adjusted_consumption",
        "forecasted_demand",
    )

    def __init__(
        self,
        id: UUID | None = None,
        orderable_id: UUID | None = None,
        annual_adjusted_consumption: int | None = None,
        verified_annual_adjusted_consumption: int | None = None,
        forecasted_demand: int | None = None,
        remark_id: UUID | None = None,
    ) -> None:
        super().__init__(id=id)
        self.orderable_id = orderable_id
        self.annual_adjusted_consumption = annual_adjusted_consumption
        self.verified_annual_adjusted_consumption = verified_annual_adjusted_consumption
        self.forecasted_demand = forecasted_demand
        self.remark_id = remark_id

    class Importer(BaseImporter, Protocol):
        @property
        def orderable_id(self) -> UUID | None: ...

        @property
        def annual_adjusted_consumption(self) -> int | None: ...

        @property
        def verified_annual_adjusted_consumption(self) -> int | None: ...

        @property
        def forecasted_demand(self) -> int | None: ...

        @property
        def remark_id(self) -> UUID | None: ...

    class Exporter(BaseExporter, Protocol):
        orderable_id: UUID | None
        annual_adjusted_consumption: int | None
        verified_annual_adjusted_consumption: int | None
        forecasted_demand: int | None
        remark_id: UUID | None

    @classmethod
    def new_instance(
        cls, importer: "BottomUpQuantificationLineItem.Importer"
    ) -> "BottomUpQuantificationLineItem":
        require(importer, "importer")
        line_item = cls()
        line_item.id = importer.id
        line_item.update_from(importer)
        return line_item

    def update_from(self, importer: "BottomUpQuantificationLineItem.Importer") -> None:
        require(importer, "importer")
        self.orderable_id = importer.orderable_id
        self.annual_adjusted_consumption = importer.annual_adjusted_consumption
        self.verified_annual_adjusted_consumption = (
            importer.verified_annual_adjusted_consumption
        )
        self.forecasted_demand = importer.forecasted_demand
        self.remark_id = importer.remark_id

    def export(self, exporter: "BottomUpQuantificationLineItem.Exporter") -> None:
        require(exporter, "exporter")
        exporter.id = self.id
        exporter.orderable_id = self.orderable_id
        exporter.annual_adjusted_consumption = self.annual_adjusted_consumption
        exporter.verified_annual_adjusted_consumption = (
            self.verified_annual_adjusted_consumption
        )
        exporter.forecasted_demand = self.forecasted_demand
        exporter.remark_id = self.remark_id

    def validate(self) -> Dict[str, str]:
        problems: Dict[str, str] = {}
        if self.orderable_id is None:
            problems["orderable_id"] = "orderable_id is required"
        for name in self.QUANTITY_FIELDS:
            value = getattr(self, name)
            if value is not None and value < 0:
                problems[name] = f"{name} must not be negative"
        return problems


class BottomUpQuantificationStatusChange(BaseEntity):
    """Workflow history row; created by the service, never imported."""

    def __init__(
        self,
        id: UUID | None = None,
        status: BottomUpQuantificationStatus = BottomUpQuantificationStatus.DRAFT,
        author: str | None = None,
        occurred_date: datetime | None = None,
    ) -> None:
        super().__init__(id=id)
        self.status = status
        self.author = author
        self.occurred_date = occurred_date or utcnow()

    class Exporter(BaseExporter, Protocol):
        status: BottomUpQuantificationStatus
        author: str | None
        occurred_date: datetime

    def export(self, exporter: "BottomUpQuantificationStatusChange.Exporter") -> None:
        require(exporter, "exporter")
        exporter.id = self.id
        exporter.status = self.status
        exporter.author = self.author
        exporter.occurred_date = self.occurred_date


class BottomUpQuantification(BaseEntity):
    """Quantification of a facility's needs for one program and period.

    ``status``, the dates and ``status_changes`` are managed by the workflow
    and are exported but never imported. ``update_from`` replaces the line
    items wholesale with the importer's; the replacements start without an id
    and the repository assigns fresh ones on save.
    """

    def __init__(
        self,
        id: UUID | None = None,
        facility_id: UUID | None = None,
        program_id: UUID | None = None,
        processing_period_id: UUID | None = None,
        target_year: int | None = None,
        status: BottomUpQuantificationStatus = BottomUpQuantificationStatus.DRAFT,
        created_date: datetime | None = None,
        modified_date: datetime | None = None,
        line_items: Sequence[BottomUpQuantificationLineItem] | None = None,
        status_changes: Sequence[BottomUpQuantificationStatusChange] | None = None,
        version: int = 0,
    ) -> None:
        super().__init__(id=id, version=version)
        self.facility_id = facility_id
        self.program_id = program_id
        self.processing_period_id = processing_period_id
        self.target_year = target_year
        self.status = status
        self.created_date = created_date
        self.modified_date = modified_date
        self.line_items: List[BottomUpQuantificationLineItem] = list(line_items or [])
        self.status_changes: List[BottomUpQuantificationStatusChange] = list(
            status_changes or []
        )

    class Importer(BaseImporter, Protocol):
        @property
        def facility_id(self) -> UUID | None: ...

        @property
        def program_id(self) -> UUID | None: ...

        @property
        def processing_period_id(self) -> UUID | None: ...

        @property
        def target_year(self) -> int | None: ...

        @property
        def line_items(self) -> Sequence[BottomUpQuantificationLineItem.Importer]: ...

    class Exporter(BaseExporter, Protocol):
        version: int | None
        facility_id: UUID | None
        program_id: UUID | None
        processing_period_id: UUID | None
        target_year: int | None
        status: BottomUpQuantificationStatus
        created_date: datetime | None
        modified_date: datetime | None

    @classmethod
    def new_instance(
        cls, importer: "BottomUpQuantification.Importer"
    ) -> "BottomUpQuantification":
        require(importer, "importer")
        buq = cls()
        buq.id = importer.id
        buq.update_from(importer)
        return buq

    @classmethod
    def prepare(
        cls,
        *,
        facility_id: UUID,
        program_id: UUID,
        processing_period_id: UUID,
        author: str,
    ) -> "BottomUpQuantification":
        """Start a new draft quantification."""

        now = utcnow()
        buq = cls(
            facility_id=facility_id,
            program_id=program_id,
            processing_period_id=processing_period_id,
            status=BottomUpQuantificationStatus.DRAFT,
            created_date=now,
            modified_date=now,
        )
        buq.status_changes.append(
            BottomUpQuantificationStatusChange(
                status=BottomUpQuantificationStatus.DRAFT,
                author=author,
                occurred_date=now,
            )
        )
        return buq

    def update_from(self, importer: "BottomUpQuantification.Importer") -> None:
        require(importer, "importer")
        self.facility_id = importer.facility_id
        self.program_id = importer.program_id
        self.processing_period_id = importer.processing_period_id
        self.target_year = importer.target_year
        line_items = []
        for item in importer.line_items or []:
            line_item = BottomUpQuantificationLineItem.new_instance(item)
            line_item.id = None
            line_items.append(line_item)
        self.line_items = line_items

    def export(self, exporter: "BottomUpQuantification.Exporter") -> None:
        """Exports scalar fields; line items and status changes export themselves."""

        require(exporter, "exporter")
        exporter.id = self.id
        exporter.version = self.version
        exporter.facility_id = self.facility_id
        exporter.program_id = self.program_id
        exporter.processing_period_id = self.processing_period_id
        exporter.target_year = self.target_year
        exporter.status = self.status
        exporter.created_date = self.created_date
        exporter.modified_date = self.modified_date

    def touch(self) -> None:
        self.modified_date = utcnow()

    def validate(self) -> Dict[str, str]:
        problems: Dict[str, str] = {}
        for name in ("facility_id", "program_id", "processing_period_id"):
            if getattr(self, name) is None:
                problems[name] = f"{name} is required"
        if self.target_year is not None and self.target_year <= 0:
            problems["target_year"] = "target_year must be positive"
        for index, line_item in enumerate(self.line_items):
            for name, message in line_item.validate().items():
                problems[f"line_items[{index}].{name}"] = message
        return problems

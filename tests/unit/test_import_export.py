"""new_instance / update_from / export contracts of the entities."""

from __future__ import annotations

from types import SimpleNamespace
from uuid import uuid4

import pytest

from backend.buq.domain.buq import (
    BottomUpQuantification,
    BottomUpQuantificationLineItem,
    BottomUpQuantificationStatus,
)
from backend.buq.domain.common import ProgrammingContractViolation
from backend.buq.domain.remark import Remark
from backend.buq.dto import (
    BottomUpQuantificationDto,
    BottomUpQuantificationLineItemDto,
    RemarkDto,
)


def _line_item_dto(**overrides) -> BottomUpQuantificationLineItemDto:
    values = dict(
        id=uuid4(),
        orderable_id=uuid4(),
        annual_adjusted_consumption=120,
        verified_annual_adjusted_consumption=110,
        forecasted_demand=150,
        remark_id=None,
    )
    values.update(overrides)
    return BottomUpQuantificationLineItemDto(**values)


def test_remark_new_instance_round_trips_importer_values():
    importer = RemarkDto(id=uuid4(), name="Stockout", description="Out of stock")

    remark = Remark.new_instance(importer)
    exporter = RemarkDto()
    remark.export(exporter)

    assert exporter.id == importer.id
    assert exporter.name == "Stockout"
    assert exporter.description == "Out of stock"


def test_remark_export_writes_none_values():
    exporter = SimpleNamespace()
    Remark(name="Stockout").export(exporter)

    assert vars(exporter) == {
        "id": None,
        "version": 0,
        "name": "Stockout",
        "description": None,
    }


def test_remark_export_carries_version_into_dto():
    remark = Remark(id=uuid4(), name="Stockout", version=3)

    dto = RemarkDto()
    remark.export(dto)

    assert dto.version == 3
    assert RemarkDto.new_instance(remark).version == 3


def test_update_from_is_idempotent():
    importer = RemarkDto(name="Damaged", description="Arrived broken")
    once = Remark(id=uuid4())
    twice = Remark(id=once.id)

    once.update_from(importer)
    twice.update_from(importer)
    twice.update_from(importer)

    assert vars(once) == vars(twice)


def test_update_from_keeps_identity():
    remark = Remark(id=uuid4(), name="old")
    remark.update_from(RemarkDto(id=uuid4(), name="new"))

    assert remark.name == "new"
    assert remark.id is not None


@pytest.mark.parametrize(
    "call",
    [
        lambda: Remark.new_instance(None),
        lambda: Remark().update_from(None),
        lambda: Remark().export(None),
        lambda: BottomUpQuantification.new_instance(None),
        lambda: BottomUpQuantification().export(None),
        lambda: BottomUpQuantificationLineItem.new_instance(None),
    ],
)
def test_missing_collaborator_is_a_contract_violation(call):
    with pytest.raises(ProgrammingContractViolation):
        call()


def test_missing_required_values_are_left_to_validation():
    remark = Remark.new_instance(RemarkDto(name=None))

    assert remark.name is None
    assert remark.validate() == {"name": "name must not be blank"}


def test_buq_new_instance_imports_line_items_in_order():
    items = [_line_item_dto(), _line_item_dto(forecasted_demand=None)]
    importer = BottomUpQuantificationDto(
        id=uuid4(),
        facility_id=uuid4(),
        program_id=uuid4(),
        processing_period_id=uuid4(),
        target_year=2027,
        line_items=items,
    )

    buq = BottomUpQuantification.new_instance(importer)

    assert buq.id == importer.id
    assert buq.target_year == 2027
    assert [item.orderable_id for item in buq.line_items] == [
        item.orderable_id for item in items
    ]
    assert all(item.id is None for item in buq.line_items)
    assert buq.line_items[1].forecasted_demand is None


def test_buq_import_ignores_workflow_fields():
    buq = BottomUpQuantification(status=BottomUpQuantificationStatus.DRAFT)
    importer = BottomUpQuantificationDto(
        facility_id=uuid4(),
        program_id=uuid4(),
        processing_period_id=uuid4(),
        status=BottomUpQuantificationStatus.APPROVED,
    )

    buq.update_from(importer)

    assert buq.status is BottomUpQuantificationStatus.DRAFT
    assert buq.status_changes == []


def test_buq_update_from_replaces_line_items():
    buq = BottomUpQuantification(
        line_items=[BottomUpQuantificationLineItem(id=uuid4(), orderable_id=uuid4())]
    )
    replacement = _line_item_dto()

    buq.update_from(
        BottomUpQuantificationDto(
            facility_id=uuid4(),
            program_id=uuid4(),
            processing_period_id=uuid4(),
            line_items=[replacement],
        )
    )

    assert [item.orderable_id for item in buq.line_items] == [replacement.orderable_id]
    assert buq.line_items[0].id is None


def test_buq_validate_reports_every_problem():
    buq = BottomUpQuantification(
        target_year=0,
        line_items=[
            BottomUpQuantificationLineItem(annual_adjusted_consumption=-1),
        ],
    )

    problems = buq.validate()

    assert set(problems) == {
        "facility_id",
        "program_id",
        "processing_period_id",
        "target_year",
        "line_items[0].orderable_id",
        "line_items[0].annual_adjusted_consumption",
    }

"""DTO building with remark denormalization."""

from __future__ import annotations

from typing import Iterable
from uuid import UUID, uuid4

import pytest

from backend.buq.domain.buq import (
    BottomUpQuantification,
    BottomUpQuantificationLineItem,
    BottomUpQuantificationStatus,
)
from backend.buq.domain.common import ProgrammingContractViolation
from backend.buq.domain.remark import InMemoryRemarkRepository, Remark
from backend.buq.dto import BottomUpQuantificationDtoBuilder, RemarkDto


class CountingRemarkRepository(InMemoryRemarkRepository):
    def __init__(self) -> None:
        super().__init__()
        self.lookups: list[set[UUID]] = []

    def find_by_ids(self, remark_ids: Iterable[UUID]) -> list[Remark]:
        wanted = set(remark_ids)
        self.lookups.append(wanted)
        return super().find_by_ids(wanted)


def test_build_dto_resolves_remarks_with_one_lookup():
    repository = CountingRemarkRepository()
    stockout = repository.save(Remark.new_instance(RemarkDto(name="Stockout")))
    damaged = repository.save(Remark.new_instance(RemarkDto(name="Damaged")))
    buq = BottomUpQuantification.prepare(
        facility_id=uuid4(), program_id=uuid4(), processing_period_id=uuid4(), author="alice"
    )
    buq.id = uuid4()
    buq.line_items = [
        BottomUpQuantificationLineItem(id=uuid4(), orderable_id=uuid4(), remark_id=stockout.id),
        BottomUpQuantificationLineItem(id=uuid4(), orderable_id=uuid4(), remark_id=damaged.id),
        BottomUpQuantificationLineItem(id=uuid4(), orderable_id=uuid4(), remark_id=stockout.id),
        BottomUpQuantificationLineItem(id=uuid4(), orderable_id=uuid4()),
    ]

    dto = BottomUpQuantificationDtoBuilder(repository).build_dto(buq)

    assert repository.lookups == [{stockout.id, damaged.id}]
    assert dto.id == buq.id
    assert dto.status is BottomUpQuantificationStatus.DRAFT
    assert [item.remark.name if item.remark else None for item in dto.line_items] == [
        "Stockout",
        "Damaged",
        "Stockout",
        None,
    ]
    assert [item.id for item in dto.line_items] == [item.id for item in buq.line_items]
    assert dto.status_changes[0].author == "alice"


def test_unresolved_remark_leaves_remark_empty():
    repository = CountingRemarkRepository()
    dangling = uuid4()
    buq = BottomUpQuantification(
        id=uuid4(),
        line_items=[BottomUpQuantificationLineItem(orderable_id=uuid4(), remark_id=dangling)],
    )

    dto = BottomUpQuantificationDtoBuilder(repository).build_dto(buq)

    assert dto.line_items[0].remark_id == dangling
    assert dto.line_items[0].remark is None


def test_no_lookup_without_remarks():
    repository = CountingRemarkRepository()

    BottomUpQuantificationDtoBuilder(repository).build_dto(BottomUpQuantification(id=uuid4()))

    assert repository.lookups == []


def test_builder_keeps_no_state_between_calls():
    repository = CountingRemarkRepository()
    builder = BottomUpQuantificationDtoBuilder(repository)
    buq = BottomUpQuantification(
        id=uuid4(), line_items=[BottomUpQuantificationLineItem(orderable_id=uuid4())]
    )

    first = builder.build_dto(buq)
    second = builder.build_dto(buq)

    assert first is not second
    assert len(second.line_items) == 1


def test_build_dto_requires_entity():
    with pytest.raises(ProgrammingContractViolation):
        BottomUpQuantificationDtoBuilder(InMemoryRemarkRepository()).build_dto(None)

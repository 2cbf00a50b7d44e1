"""Builds response DTOs from bottom-up quantification entities."""

from __future__ import annotations

from ..domain.buq import BottomUpQuantification
from ..domain.common.errors import require
from ..domain.remark import RemarkRepository
from .buq import (
    BottomUpQuantificationDto,
    BottomUpQuantificationLineItemDto,
    BottomUpQuantificationStatusChangeDto,
)
from .remark import RemarkDto


class BottomUpQuantificationDtoBuilder:
    """Exports a quantification and resolves each line item's remark.

    Remarks are fetched with a single ``find_by_ids`` call per build. A
    ``remark_id`` that no longer resolves leaves ``remark`` empty.
    """

    def __init__(self, remark_repository: RemarkRepository) -> None:
        self._remarks = remark_repository

    def build_dto(self, buq: BottomUpQuantification) -> BottomUpQuantificationDto:
        require(buq, "buq")
        dto = BottomUpQuantificationDto()
        buq.export(dto)

        remark_ids = {item.remark_id for item in buq.line_items if item.remark_id}
        remarks = {
            remark.id: RemarkDto.new_instance(remark)
            for remark in (self._remarks.find_by_ids(remark_ids) if remark_ids else [])
        }

        for item in buq.line_items:
            item_dto = BottomUpQuantificationLineItemDto()
            item.export(item_dto)
            item_dto.remark = remarks.get(item.remark_id) if item.remark_id else None
            dto.line_items.append(item_dto)

        for change in buq.status_changes:
            change_dto = BottomUpQuantificationStatusChangeDto()
            change.export(change_dto)
            dto.status_changes.append(change_dto)
        return dto

    def build_dtos(
        self, buqs: list[BottomUpQuantification]
    ) -> list[BottomUpQuantificationDto]:
        return [self.build_dto(buq) for buq in buqs]

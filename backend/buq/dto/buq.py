"""Bottom-up quantification DTOs."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import Field

from ..domain.buq import BottomUpQuantificationStatus
from .base import BaseDto
from .remark import RemarkDto


class BottomUpQuantificationLineItemDto(BaseDto):
    """Line item as sent and received; ``remark`` is filled on output only."""

    orderable_id: UUID | None = None
    annual_adjusted_consumption: int | None = None
    verified_annual_adjusted_consumption: int | None = None
    forecasted_demand: int | None = None
    remark_id: UUID | None = None
    remark: RemarkDto | None = None


class BottomUpQuantificationStatusChangeDto(BaseDto):
    status: BottomUpQuantificationStatus | None = None
    author: str | None = None
    occurred_date: datetime | None = None


class BottomUpQuantificationDto(BaseDto):
    """Quantification with its line items and status history.

    ``status``, the dates and ``status_changes`` are ignored on input.
    ``version``, when sent on update, must match the stored revision.
    """

    version: int | None = None
    facility_id: UUID | None = None
    program_id: UUID | None = None
    processing_period_id: UUID | None = None
    target_year: int | None = None
    status: BottomUpQuantificationStatus | None = None
    created_date: datetime | None = None
    modified_date: datetime | None = None
    line_items: list[BottomUpQuantificationLineItemDto] = Field(default_factory=list)
    status_changes: list[BottomUpQuantificationStatusChangeDto] = Field(
        default_factory=list
    )

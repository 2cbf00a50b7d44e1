"""Typed search filter for bottom-up quantifications."""

from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import date
from typing import Any, ClassVar
from uuid import UUID

from ..common import QueryParams, RawQueryParams, ValidationError
from .types import BottomUpQuantification, BottomUpQuantificationStatus

FACILITY_ID = "facility_id"
PROGRAM_ID = "program_id"
PROCESSING_PERIOD_ID = "processing_period_id"
STATUS = "status"
CREATED_DATE_FROM = "created_date_from"
CREATED_DATE_TO = "created_date_to"


@dataclass(frozen=True, eq=False)
class BottomUpQuantificationSearchParams:
    """Filter over quantifications.

    Values inside one dimension are OR-ed, dimensions are AND-ed, and an
    empty dimension does not filter at all. The created-date bounds are
    inclusive calendar days (UTC).
    """

    RECOGNIZED_KEYS: ClassVar[frozenset[str]] = frozenset(
        {
            FACILITY_ID,
            PROGRAM_ID,
            PROCESSING_PERIOD_ID,
            STATUS,
            CREATED_DATE_FROM,
            CREATED_DATE_TO,
        }
    )

    facility_ids: tuple[UUID, ...] = ()
    program_ids: tuple[UUID, ...] = ()
    processing_period_ids: tuple[UUID, ...] = ()
    statuses: tuple[BottomUpQuantificationStatus, ...] = ()
    created_date_from: date | None = None
    created_date_to: date | None = None

    def _values(self) -> tuple[Any, ...]:
        return tuple(getattr(self, field.name) for field in fields(self))

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, BottomUpQuantificationSearchParams):
            return NotImplemented
        return self._values() == other._values()

    def __hash__(self) -> int:
        return hash(self._values())

    @property
    def is_empty(self) -> bool:
        return not (
            self.facility_ids
            or self.program_ids
            or self.processing_period_ids
            or self.statuses
            or self.created_date_from
            or self.created_date_to
        )

    def matches(self, buq: BottomUpQuantification) -> bool:
        if self.facility_ids and buq.facility_id not in self.facility_ids:
            return False
        if self.program_ids and buq.program_id not in self.program_ids:
            return False
        if (
            self.processing_period_ids
            and buq.processing_period_id not in self.processing_period_ids
        ):
            return False
        if self.statuses and buq.status not in self.statuses:
            return False
        if self.created_date_from or self.created_date_to:
            if buq.created_date is None:
                return False
            created = buq.created_date.date()
            if self.created_date_from and created < self.created_date_from:
                return False
            if self.created_date_to and created > self.created_date_to:
                return False
        return True


class QueryBottomUpQuantificationSearchParams(BottomUpQuantificationSearchParams):
    """Builds the filter from raw request query parameters.

    Every recognized key is parsed up front and all malformed keys are
    reported in a single :class:`ValidationError`.
    """

    def __init__(self, raw: RawQueryParams | None = None) -> None:
        params = QueryParams(raw)
        values = dict(
            facility_ids=params.get_uuids(FACILITY_ID),
            program_ids=params.get_uuids(PROGRAM_ID),
            processing_period_ids=params.get_uuids(PROCESSING_PERIOD_ID),
            statuses=params.get_enums(STATUS, BottomUpQuantificationStatus),
            created_date_from=params.get_date(CREATED_DATE_FROM),
            created_date_to=params.get_date(CREATED_DATE_TO),
        )
        params.raise_if_invalid()
        start, end = values["created_date_from"], values["created_date_to"]
        if start and end and start > end:
            raise ValidationError(
                "Invalid search parameters",
                fields={CREATED_DATE_FROM: f"must not be after {CREATED_DATE_TO}"},
            )
        super().__init__(**values)

"""Typed search filter for remarks."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, ClassVar
from uuid import UUID

from ..common import QueryParams, RawQueryParams
from .types import Remark

ID = "id"
NAME = "name"


@dataclass(frozen=True, eq=False)
class RemarkSearchParams:
    """Remark filter; an empty instance matches every remark."""

    RECOGNIZED_KEYS: ClassVar[frozenset[str]] = frozenset({ID, NAME})

    ids: tuple[UUID, ...] = ()
    name: str | None = None

    def _values(self) -> tuple[Any, ...]:
        return tuple(getattr(self, field.name) for field in fields(self))

    def __eq__(self, other: Any) -> bool:
        # Query-built filters compare equal to the plain filter they describe.
        if not isinstance(other, RemarkSearchParams):
            return NotImplemented
        return self._values() == other._values()

    def __hash__(self) -> int:
        return hash(self._values())

    @property
    def is_empty(self) -> bool:
        return not self.ids and self.name is None

    def matches(self, remark: Remark) -> bool:
        if self.ids and remark.id not in self.ids:
            return False
        if self.name is not None:
            if remark.name is None or self.name.casefold() not in remark.name.casefold():
                return False
        return True


class QueryRemarkSearchParams(RemarkSearchParams):
    """Builds :class:`RemarkSearchParams` from raw request query parameters."""

    def __init__(self, raw: RawQueryParams | None = None) -> None:
        params = QueryParams(raw)
        ids = params.get_uuids(ID)
        name = params.get_string(NAME)
        params.raise_if_invalid()
        super().__init__(ids=ids, name=name)

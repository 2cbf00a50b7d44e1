"""Page request / page result value types."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Generic, Iterable, Sequence, TypeVar

from .errors import ValidationError

T = TypeVar("T")
U = TypeVar("U")


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class SortOrder:
    property: str
    direction: SortDirection = SortDirection.ASC

    @property
    def descending(self) -> bool:
        return self.direction is SortDirection.DESC


@dataclass(frozen=True)
class PageSpec:
    """Zero-based page request with an ordered list of sort orders."""

    page: int = 0
    size: int = 20
    sort: tuple[SortOrder, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        problems: dict[str, str] = {}
        if self.page < 0:
            problems["page"] = "page must be zero or greater"
        if self.size < 1:
            problems["size"] = "size must be at least 1"
        if problems:
            raise ValidationError("Invalid page request", fields=problems)

    @property
    def offset(self) -> int:
        return self.page * self.size

    def ensure_sortable(self, allowed: Iterable[str]) -> None:
        allowed_set = set(allowed)
        unknown = [order.property for order in self.sort if order.property not in allowed_set]
        if unknown:
            raise ValidationError(
                "Unsupported sort property",
                fields={"sort": ", ".join(unknown)},
            )

    @classmethod
    def of(
        cls,
        page: int,
        size: int,
        sort: Sequence[str] | None = None,
        *,
        max_size: int | None = None,
    ) -> "PageSpec":
        """Build a spec from raw ``page``/``size``/``sort`` query values.

        Each sort value is ``property[,asc|desc]``; ``size`` is clamped to
        ``max_size`` when given.
        """

        if max_size is not None:
            size = min(size, max_size)
        return cls(page=page, size=size, sort=parse_sort(sort or ()))


def parse_sort(values: Iterable[str]) -> tuple[SortOrder, ...]:
    orders: list[SortOrder] = []
    for raw in values:
        if not raw or not raw.strip():
            continue
        prop, _, direction = raw.partition(",")
        prop = prop.strip()
        direction = direction.strip().lower() or SortDirection.ASC.value
        if not prop:
            raise ValidationError("Invalid sort value", fields={"sort": raw})
        try:
            orders.append(SortOrder(prop, SortDirection(direction)))
        except ValueError as exc:
            raise ValidationError(
                "sort direction must be 'asc' or 'desc'",
                fields={"sort": raw},
            ) from exc
    return tuple(orders)


def sort_in_memory(
    items: Iterable[T],
    orders: Sequence[SortOrder],
    key_funcs: dict[str, Callable[[T], object]],
) -> list[T]:
    """Stable multi-key sort honouring each order's direction; ``None`` sorts last."""

    result = list(items)
    for order in reversed(orders):
        key_func = key_funcs[order.property]

        def sort_key(item: T, _key=key_func) -> tuple[bool, object]:
            value = _key(item)
            return (value is None) != order.descending, value if value is not None else 0

        result.sort(key=sort_key, reverse=order.descending)
    return result


@dataclass(frozen=True)
class Page(Generic[T]):
    """A bounded slice of a result set plus the total matching count."""

    content: list[T]
    page_spec: PageSpec
    total_elements: int

    @property
    def number(self) -> int:
        return self.page_spec.page

    @property
    def size(self) -> int:
        return self.page_spec.size

    @property
    def number_of_elements(self) -> int:
        return len(self.content)

    @property
    def total_pages(self) -> int:
        if not self.total_elements:
            return 0
        return math.ceil(self.total_elements / self.page_spec.size)

    @property
    def first(self) -> bool:
        return self.page_spec.page == 0

    @property
    def last(self) -> bool:
        return self.page_spec.page + 1 >= self.total_pages

    def map(self, func: Callable[[T], U]) -> "Page[U]":
        return Page(
            content=[func(item) for item in self.content],
            page_spec=self.page_spec,
            total_elements=self.total_elements,
        )

    @classmethod
    def slice(cls, items: Sequence[T], page_spec: PageSpec) -> "Page[T]":
        """Cut one page out of an already filtered and sorted sequence."""

        start = page_spec.offset
        return cls(
            content=list(items[start : start + page_spec.size]),
            page_spec=page_spec,
            total_elements=len(items),
        )

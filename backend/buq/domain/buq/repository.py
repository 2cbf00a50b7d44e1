"""Persistence adapters for bottom-up quantifications."""

from __future__ import annotations

import copy
from collections import defaultdict
from threading import RLock
from typing import Any, Dict, Iterable, List, Mapping, MutableMapping, Protocol
from uuid import UUID, uuid4

from sqlalchemy import asc, delete, desc, func, insert, select, update
from sqlalchemy.engine import Connection

from ...infra.db.tables import bottom_up_quantifications, line_items, status_changes
from ..common import (
    ConcurrencyConflictError,
    Page,
    PageSpec,
    SortDirection,
    SortOrder,
    as_utc,
    end_of_day,
    start_of_day,
)
from ..common.pagination import sort_in_memory
from .search import BottomUpQuantificationSearchParams
from .types import (
    BottomUpQuantification,
    BottomUpQuantificationLineItem,
    BottomUpQuantificationStatus,
    BottomUpQuantificationStatusChange,
)

RESOURCE = "BottomUpQuantification"
SORTABLE_PROPERTIES = ("created_date", "modified_date", "target_year", "status")
DEFAULT_SORT = (SortOrder("created_date", SortDirection.DESC),)


class BottomUpQuantificationRepository(Protocol):  # pragma: no cover - interface only
    """Persistence abstraction consumed by :class:`BottomUpQuantificationService`."""

    def search(
        self, params: BottomUpQuantificationSearchParams, page_spec: PageSpec
    ) -> Page[BottomUpQuantification]: ...

    def find_by_id(self, buq_id: UUID) -> BottomUpQuantification | None: ...

    def exists_by_id(self, buq_id: UUID) -> bool: ...

    def delete_by_id(self, buq_id: UUID) -> None: ...

    def save(self, buq: BottomUpQuantification) -> BottomUpQuantification: ...


def _assign_child_ids(buq: BottomUpQuantification) -> None:
    for child in [*buq.line_items, *buq.status_changes]:
        if child.id is None:
            child.id = uuid4()


class InMemoryBottomUpQuantificationRepository(BottomUpQuantificationRepository):
    """In-memory adapter primarily used for tests."""

    def __init__(self) -> None:
        self._lock = RLock()
        self._store: MutableMapping[UUID, BottomUpQuantification] = {}

    def search(
        self, params: BottomUpQuantificationSearchParams, page_spec: PageSpec
    ) -> Page[BottomUpQuantification]:
        page_spec.ensure_sortable(SORTABLE_PROPERTIES)
        with self._lock:
            rows = [copy.deepcopy(row) for row in self._store.values()]
        rows = [row for row in rows if params.matches(row)]
        rows = sort_in_memory(
            rows,
            page_spec.sort or DEFAULT_SORT,
            {
                "created_date": lambda row: row.created_date,
                "modified_date": lambda row: row.modified_date,
                "target_year": lambda row: row.target_year,
                "status": lambda row: row.status.value,
            },
        )
        return Page.slice(rows, page_spec)

    def find_by_id(self, buq_id: UUID) -> BottomUpQuantification | None:
        with self._lock:
            row = self._store.get(buq_id)
            return copy.deepcopy(row) if row is not None else None

    def exists_by_id(self, buq_id: UUID) -> bool:
        with self._lock:
            return buq_id in self._store

    def delete_by_id(self, buq_id: UUID) -> None:
        with self._lock:
            self._store.pop(buq_id, None)

    def save(self, buq: BottomUpQuantification) -> BottomUpQuantification:
        with self._lock:
            if buq.id is None:
                buq.id = uuid4()
                buq.version = 0
            else:
                stored = self._store.get(buq.id)
                if stored is None:
                    buq.version = 0
                elif stored.version != buq.version:
                    raise ConcurrencyConflictError(
                        RESOURCE,
                        buq.id,
                        expected_version=buq.version,
                        actual_version=stored.version,
                    )
                else:
                    buq.version += 1
            _assign_child_ids(buq)
            self._store[buq.id] = copy.deepcopy(buq)
            return buq


class PostgresBottomUpQuantificationRepository(BottomUpQuantificationRepository):
    """SQLAlchemy-backed adapter bound to a request-scoped connection."""

    def __init__(self, connection: Connection) -> None:
        self._conn = connection

    def search(
        self, params: BottomUpQuantificationSearchParams, page_spec: PageSpec
    ) -> Page[BottomUpQuantification]:
        page_spec.ensure_sortable(SORTABLE_PROPERTIES)
        table = bottom_up_quantifications
        conditions = self._conditions(params)

        count_stmt = select(func.count()).select_from(table)
        stmt = select(table)
        if conditions:
            count_stmt = count_stmt.where(*conditions)
            stmt = stmt.where(*conditions)
        stmt = (
            stmt.order_by(*self._order_columns(page_spec.sort or DEFAULT_SORT))
            .offset(page_spec.offset)
            .limit(page_spec.size)
        )

        total = self._conn.execute(count_stmt).scalar_one()
        rows = self._conn.execute(stmt).mappings().all()
        return Page(
            content=self._hydrate(rows),
            page_spec=page_spec,
            total_elements=int(total),
        )

    def find_by_id(self, buq_id: UUID) -> BottomUpQuantification | None:
        table = bottom_up_quantifications
        rows = self._conn.execute(select(table).where(table.c.id == buq_id)).mappings().all()
        hydrated = self._hydrate(rows)
        return hydrated[0] if hydrated else None

    def exists_by_id(self, buq_id: UUID) -> bool:
        table = bottom_up_quantifications
        stmt = select(func.count()).select_from(table).where(table.c.id == buq_id)
        return bool(self._conn.execute(stmt).scalar_one())

    def delete_by_id(self, buq_id: UUID) -> None:
        self._delete_children(buq_id)
        table = bottom_up_quantifications
        self._conn.execute(delete(table).where(table.c.id == buq_id))

    def save(self, buq: BottomUpQuantification) -> BottomUpQuantification:
        table = bottom_up_quantifications
        if buq.id is None:
            buq.id = uuid4()
            stored_version = None
        else:
            stored_version = self._conn.execute(
                select(table.c.version).where(table.c.id == buq.id)
            ).scalar_one_or_none()

        if stored_version is None:
            buq.version = 0
            self._conn.execute(insert(table).values(**self._to_row(buq)))
        else:
            values = self._to_row(buq)
            values["version"] = buq.version + 1
            result = self._conn.execute(
                update(table)
                .where(table.c.id == buq.id, table.c.version == buq.version)
                .values(**values)
            )
            if result.rowcount != 1:
                raise ConcurrencyConflictError(
                    RESOURCE,
                    buq.id,
                    expected_version=buq.version,
                    actual_version=stored_version,
                )
            buq.version += 1
            self._delete_children(buq.id)

        _assign_child_ids(buq)
        self._insert_children(buq)
        return buq

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _conditions(params: BottomUpQuantificationSearchParams) -> list[Any]:
        table = bottom_up_quantifications
        conditions: list[Any] = []
        if params.facility_ids:
            conditions.append(table.c.facility_id.in_(params.facility_ids))
        if params.program_ids:
            conditions.append(table.c.program_id.in_(params.program_ids))
        if params.processing_period_ids:
            conditions.append(
                table.c.processing_period_id.in_(params.processing_period_ids)
            )
        if params.statuses:
            conditions.append(table.c.status.in_([s.value for s in params.statuses]))
        if params.created_date_from:
            conditions.append(
                table.c.created_date >= start_of_day(params.created_date_from)
            )
        if params.created_date_to:
            conditions.append(
                table.c.created_date <= end_of_day(params.created_date_to)
            )
        return conditions

    @staticmethod
    def _order_columns(orders: Iterable[SortOrder]) -> list[Any]:
        table = bottom_up_quantifications
        columns = [
            (desc if order.descending else asc)(table.c[order.property])
            for order in orders
        ]
        columns.append(table.c.id.asc())
        return columns

    def _delete_children(self, buq_id: UUID) -> None:
        self._conn.execute(
            delete(line_items).where(line_items.c.bottom_up_quantification_id == buq_id)
        )
        self._conn.execute(
            delete(status_changes).where(
                status_changes.c.bottom_up_quantification_id == buq_id
            )
        )

    def _insert_children(self, buq: BottomUpQuantification) -> None:
        line_item_rows = [
            {
                "id": item.id,
                "bottom_up_quantification_id": buq.id,
                "position": position,
                "orderable_id": item.orderable_id,
                "annual_adjusted_consumption": item.annual_adjusted_consumption,
                "verified_annual_adjusted_consumption": (
                    item.verified_annual_adjusted_consumption
                ),
                "forecasted_demand": item.forecasted_demand,
                "remark_id": item.remark_id,
            }
            for position, item in enumerate(buq.line_items)
        ]
        if line_item_rows:
            self._conn.execute(insert(line_items), line_item_rows)

        status_change_rows = [
            {
                "id": change.id,
                "bottom_up_quantification_id": buq.id,
                "position": position,
                "status": change.status.value,
                "author": change.author,
                "occurred_date": change.occurred_date,
            }
            for position, change in enumerate(buq.status_changes)
        ]
        if status_change_rows:
            self._conn.execute(insert(status_changes), status_change_rows)

    def _hydrate(self, rows: List[Mapping[str, Any]]) -> List[BottomUpQuantification]:
        if not rows:
            return []
        ids = [row["id"] for row in rows]

        items_by_parent: Dict[UUID, List[BottomUpQuantificationLineItem]] = defaultdict(list)
        item_rows = self._conn.execute(
            select(line_items)
            .where(line_items.c.bottom_up_quantification_id.in_(ids))
            .order_by(line_items.c.position)
        ).mappings()
        for row in item_rows:
            items_by_parent[row["bottom_up_quantification_id"]].append(
                BottomUpQuantificationLineItem(
                    id=row["id"],
                    orderable_id=row["orderable_id"],
                    annual_adjusted_consumption=row["annual_adjusted_consumption"],
                    verified_annual_adjusted_consumption=row[
                        "verified_annual_adjusted_consumption"
                    ],
                    forecasted_demand=row["forecasted_demand"],
                    remark_id=row["remark_id"],
                )
            )

        changes_by_parent: Dict[
            UUID, List[BottomUpQuantificationStatusChange]
        ] = defaultdict(list)
        change_rows = self._conn.execute(
            select(status_changes)
            .where(status_changes.c.bottom_up_quantification_id.in_(ids))
            .order_by(status_changes.c.position)
        ).mappings()
        for row in change_rows:
            changes_by_parent[row["bottom_up_quantification_id"]].append(
                BottomUpQuantificationStatusChange(
                    id=row["id"],
                    status=BottomUpQuantificationStatus(row["status"]),
                    author=row["author"],
                    occurred_date=as_utc(row["occurred_date"]),
                )
            )

        return [
            BottomUpQuantification(
                id=row["id"],
                version=int(row["version"]),
                facility_id=row["facility_id"],
                program_id=row["program_id"],
                processing_period_id=row["processing_period_id"],
                target_year=row["target_year"],
                status=BottomUpQuantificationStatus(row["status"]),
                created_date=as_utc(row["created_date"]),
                modified_date=as_utc(row["modified_date"]),
                line_items=items_by_parent.get(row["id"], []),
                status_changes=changes_by_parent.get(row["id"], []),
            )
            for row in rows
        ]

    @staticmethod
    def _to_row(buq: BottomUpQuantification) -> Dict[str, Any]:
        return {
            "id": buq.id,
            "version": buq.version,
            "facility_id": buq.facility_id,
            "program_id": buq.program_id,
            "processing_period_id": buq.processing_period_id,
            "target_year": buq.target_year,
            "status": buq.status.value,
            "created_date": buq.created_date,
            "modified_date": buq.modified_date,
        }

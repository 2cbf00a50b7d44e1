"""Persistence adapters for remarks."""

from __future__ import annotations

import copy
from threading import RLock
from typing import Any, Iterable, Mapping, MutableMapping, Protocol
from uuid import UUID, uuid4

from sqlalchemy import asc, delete, desc, func, insert, select, update
from sqlalchemy.engine import Connection

from ...infra.db.tables import remarks
from ..common import ConcurrencyConflictError, Page, PageSpec, SortOrder
from ..common.pagination import sort_in_memory
from .search import RemarkSearchParams
from .types import Remark

RESOURCE = "Remark"
SORTABLE_PROPERTIES = ("name", "description")
DEFAULT_SORT = (SortOrder("name"),)


class RemarkRepository(Protocol):  # pragma: no cover - interface only
    """Persistence abstraction consumed by :class:`RemarkService`."""

    def search(self, params: RemarkSearchParams, page_spec: PageSpec) -> Page[Remark]: ...

    def find_by_id(self, remark_id: UUID) -> Remark | None: ...

    def find_by_ids(self, remark_ids: Iterable[UUID]) -> list[Remark]: ...

    def exists_by_id(self, remark_id: UUID) -> bool: ...

    def delete_by_id(self, remark_id: UUID) -> None: ...

    def save(self, remark: Remark) -> Remark: ...


class InMemoryRemarkRepository(RemarkRepository):
    """In-memory adapter primarily used for tests."""

    def __init__(self) -> None:
        self._lock = RLock()
        self._store: MutableMapping[UUID, Remark] = {}

    def search(self, params: RemarkSearchParams, page_spec: PageSpec) -> Page[Remark]:
        page_spec.ensure_sortable(SORTABLE_PROPERTIES)
        with self._lock:
            rows = [copy.deepcopy(row) for row in self._store.values()]
        rows = [row for row in rows if params.matches(row)]
        rows = sort_in_memory(
            rows,
            page_spec.sort or DEFAULT_SORT,
            {
                "name": lambda row: (row.name or "").lower(),
                "description": lambda row: row.description,
            },
        )
        return Page.slice(rows, page_spec)

    def find_by_id(self, remark_id: UUID) -> Remark | None:
        with self._lock:
            row = self._store.get(remark_id)
            return copy.deepcopy(row) if row is not None else None

    def find_by_ids(self, remark_ids: Iterable[UUID]) -> list[Remark]:
        wanted = set(remark_ids)
        with self._lock:
            return [copy.deepcopy(row) for key, row in self._store.items() if key in wanted]

    def exists_by_id(self, remark_id: UUID) -> bool:
        with self._lock:
            return remark_id in self._store

    def delete_by_id(self, remark_id: UUID) -> None:
        with self._lock:
            self._store.pop(remark_id, None)

    def save(self, remark: Remark) -> Remark:
        with self._lock:
            if remark.id is None:
                remark.id = uuid4()
                remark.version = 0
            else:
                stored = self._store.get(remark.id)
                if stored is None:
                    remark.version = 0
                elif stored.version != remark.version:
                    raise ConcurrencyConflictError(
                        RESOURCE,
                        remark.id,
                        expected_version=remark.version,
                        actual_version=stored.version,
                    )
                else:
                    remark.version += 1
            self._store[remark.id] = copy.deepcopy(remark)
            return remark


class PostgresRemarkRepository(RemarkRepository):
    """SQLAlchemy-backed remark adapter bound to a request-scoped connection."""

    def __init__(self, connection: Connection) -> None:
        self._conn = connection

    def search(self, params: RemarkSearchParams, page_spec: PageSpec) -> Page[Remark]:
        page_spec.ensure_sortable(SORTABLE_PROPERTIES)
        conditions = []
        if params.ids:
            conditions.append(remarks.c.id.in_(params.ids))
        if params.name is not None:
            conditions.append(
                remarks.c.name.icontains(params.name, autoescape=True)
            )

        count_stmt = select(func.count()).select_from(remarks)
        stmt = select(remarks)
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
            content=[self._from_row(row) for row in rows],
            page_spec=page_spec,
            total_elements=int(total),
        )

    def find_by_id(self, remark_id: UUID) -> Remark | None:
        row = (
            self._conn.execute(select(remarks).where(remarks.c.id == remark_id))
            .mappings()
            .first()
        )
        return self._from_row(row) if row is not None else None

    def find_by_ids(self, remark_ids: Iterable[UUID]) -> list[Remark]:
        wanted = list(set(remark_ids))
        if not wanted:
            return []
        rows = (
            self._conn.execute(select(remarks).where(remarks.c.id.in_(wanted)))
            .mappings()
            .all()
        )
        return [self._from_row(row) for row in rows]

    def exists_by_id(self, remark_id: UUID) -> bool:
        stmt = select(func.count()).select_from(remarks).where(remarks.c.id == remark_id)
        return bool(self._conn.execute(stmt).scalar_one())

    def delete_by_id(self, remark_id: UUID) -> None:
        self._conn.execute(delete(remarks).where(remarks.c.id == remark_id))

    def save(self, remark: Remark) -> Remark:
        if remark.id is None:
            remark.id = uuid4()
            return self._insert(remark)

        stored_version = self._conn.execute(
            select(remarks.c.version).where(remarks.c.id == remark.id)
        ).scalar_one_or_none()
        if stored_version is None:
            return self._insert(remark)

        result = self._conn.execute(
            update(remarks)
            .where(remarks.c.id == remark.id, remarks.c.version == remark.version)
            .values(
                name=remark.name,
                description=remark.description,
                version=remark.version + 1,
            )
        )
        if result.rowcount != 1:
            raise ConcurrencyConflictError(
                RESOURCE,
                remark.id,
                expected_version=remark.version,
                actual_version=stored_version,
            )
        remark.version += 1
        return remark

    def _insert(self, remark: Remark) -> Remark:
        remark.version = 0
        self._conn.execute(
            insert(remarks).values(
                id=remark.id,
                version=remark.version,
                name=remark.name,
                description=remark.description,
            )
        )
        return remark

    @staticmethod
    def _order_columns(orders: Iterable[SortOrder]) -> list[Any]:
        columns = []
        for order in orders:
            direction = desc if order.descending else asc
            column = remarks.c[order.property]
            if order.property == "name":
                column = func.lower(column)
            columns.append(direction(column))
        # Tie-break on id for deterministic pagination
        columns.append(remarks.c.id.asc())
        return columns

    @staticmethod
    def _from_row(row: Mapping[str, Any]) -> Remark:
        return Remark(
            id=row["id"],
            name=row["name"],
            description=row.get("description"),
            version=int(row["version"]),
        )

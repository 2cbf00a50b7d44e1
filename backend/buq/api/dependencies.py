"""Shared API dependencies."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Iterator

from fastapi import Depends, Query, Request
from sqlalchemy.engine import Connection

from ..config import Settings, load_settings
from ..domain.audit import AuditTrail, PostgresAuditLogRepository
from ..domain.buq import (
    BottomUpQuantificationService,
    PostgresBottomUpQuantificationRepository,
)
from ..domain.common import BuqServiceError, PageSpec, RawQueryParams
from ..domain.remark import PostgresRemarkRepository, RemarkRepository, RemarkService
from ..dto import BottomUpQuantificationDtoBuilder
from ..infra.db import transaction
from .errors import to_http_exception

__all__ = [
    "ActorContext",
    "get_actor_context",
    "get_audit_trail",
    "get_buq_service",
    "get_connection",
    "get_dto_builder",
    "get_page_spec",
    "get_raw_query_params",
    "get_remark_repository",
    "get_remark_service",
    "get_settings",
]

ACTOR_ID_HEADER = "x-actor-id"
ACTOR_SOURCE_HEADER = "x-actor-source"


@dataclass(frozen=True)
class ActorContext:
    """Represents the operator initiating an API call."""

    actor_id: str
    actor_source: str


@lru_cache()
def _settings_singleton() -> Settings:
    return load_settings()


def get_settings() -> Settings:
    """Return the settings loaded at first use."""

    return _settings_singleton()


def get_actor_context(
    request: Request, settings: Settings = Depends(get_settings)
) -> ActorContext:
    """Extract actor metadata from request headers (defaults when missing)."""

    actor_id = (
        request.headers.get(ACTOR_ID_HEADER) or ""
    ).strip() or settings.actor.default_id
    actor_source = (
        request.headers.get(ACTOR_SOURCE_HEADER) or ""
    ).strip() or settings.actor.default_source
    return ActorContext(actor_id=actor_id, actor_source=actor_source)


def get_connection() -> Iterator[Connection]:
    """One transaction per request; rolled back when the handler raises."""

    with transaction() as conn:
        yield conn


def get_raw_query_params(request: Request) -> RawQueryParams:
    params = request.query_params
    return {key: params.getlist(key) for key in params.keys()}


def get_page_spec(
    page: int = Query(0),
    size: int | None = Query(None),
    sort: list[str] | None = Query(None),
    settings: Settings = Depends(get_settings),
) -> PageSpec:
    """Page request from ``page``/``size``/``sort`` with configured limits."""

    try:
        return PageSpec.of(
            page,
            size if size is not None else settings.pagination.default_page_size,
            sort,
            max_size=settings.pagination.max_page_size,
        )
    except BuqServiceError as exc:
        raise to_http_exception(exc) from exc


def get_audit_trail(conn: Connection = Depends(get_connection)) -> AuditTrail:
    return AuditTrail(PostgresAuditLogRepository(conn))


def get_remark_repository(
    conn: Connection = Depends(get_connection),
) -> RemarkRepository:
    return PostgresRemarkRepository(conn)


def get_remark_service(
    repository: RemarkRepository = Depends(get_remark_repository),
    audit_trail: AuditTrail = Depends(get_audit_trail),
) -> RemarkService:
    return RemarkService(repository=repository, audit_trail=audit_trail)


def get_buq_service(
    conn: Connection = Depends(get_connection),
    remark_repository: RemarkRepository = Depends(get_remark_repository),
    audit_trail: AuditTrail = Depends(get_audit_trail),
) -> BottomUpQuantificationService:
    return BottomUpQuantificationService(
        repository=PostgresBottomUpQuantificationRepository(conn),
        remark_repository=remark_repository,
        audit_trail=audit_trail,
    )


def get_dto_builder(
    remark_repository: RemarkRepository = Depends(get_remark_repository),
) -> BottomUpQuantificationDtoBuilder:
    return BottomUpQuantificationDtoBuilder(remark_repository)

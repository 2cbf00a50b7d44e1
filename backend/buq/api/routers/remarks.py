"""Remark endpoints."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status

from ...domain.common import BuqServiceError, PageSpec, RawQueryParams
from ...domain.remark import QueryRemarkSearchParams, RemarkService
from ...dto import AuditLogEntryDto, PageDto, RemarkDto
from ..dependencies import (
    ActorContext,
    get_actor_context,
    get_page_spec,
    get_raw_query_params,
    get_remark_service,
)
from ..errors import to_http_exception

router = APIRouter(prefix="/api/remarks", tags=["remarks"])


@router.get("", response_model=PageDto[RemarkDto], summary="Search Remarks")
def search_remarks(
    raw: RawQueryParams = Depends(get_raw_query_params),
    page_spec: PageSpec = Depends(get_page_spec),
    service: RemarkService = Depends(get_remark_service),
) -> PageDto[RemarkDto]:
    try:
        result = service.search(QueryRemarkSearchParams(raw), page_spec)
    except BuqServiceError as exc:
        raise to_http_exception(exc) from exc
    return PageDto[RemarkDto].from_page(result, RemarkDto.new_instance)


@router.post(
    "",
    response_model=RemarkDto,
    status_code=status.HTTP_201_CREATED,
    summary="Create Remark",
)
def create_remark(
    payload: RemarkDto,
    service: RemarkService = Depends(get_remark_service),
    actor: ActorContext = Depends(get_actor_context),
) -> RemarkDto:
    # Ids are always generated server-side on create.
    importer = payload.model_copy(update={"id": None})
    try:
        remark = service.create(importer, author=actor.actor_id)
    except BuqServiceError as exc:
        raise to_http_exception(exc) from exc
    return RemarkDto.new_instance(remark)


@router.get("/{remark_id}", response_model=RemarkDto, summary="Get Remark")
def get_remark(
    remark_id: UUID,
    service: RemarkService = Depends(get_remark_service),
) -> RemarkDto:
    try:
        remark = service.get(remark_id)
    except BuqServiceError as exc:
        raise to_http_exception(exc) from exc
    return RemarkDto.new_instance(remark)


@router.put("/{remark_id}", response_model=RemarkDto, summary="Update Remark")
def update_remark(
    remark_id: UUID,
    payload: RemarkDto,
    service: RemarkService = Depends(get_remark_service),
    actor: ActorContext = Depends(get_actor_context),
) -> RemarkDto:
    try:
        remark = service.update(
            remark_id,
            payload,
            author=actor.actor_id,
            expected_version=payload.version,
        )
    except BuqServiceError as exc:
        raise to_http_exception(exc) from exc
    return RemarkDto.new_instance(remark)


@router.delete(
    "/{remark_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Remark",
)
def delete_remark(
    remark_id: UUID,
    service: RemarkService = Depends(get_remark_service),
    actor: ActorContext = Depends(get_actor_context),
) -> Response:
    try:
        service.delete(remark_id, author=actor.actor_id)
    except BuqServiceError as exc:
        raise to_http_exception(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/{remark_id}/auditLog",
    response_model=PageDto[AuditLogEntryDto],
    summary="Remark Audit Log",
)
def remark_audit_log(
    remark_id: UUID,
    author: str | None = Query(None),
    changed_property_name: str | None = Query(None),
    page_spec: PageSpec = Depends(get_page_spec),
    service: RemarkService = Depends(get_remark_service),
) -> PageDto[AuditLogEntryDto]:
    try:
        result = service.audit_log(
            remark_id,
            author=author,
            property_name=changed_property_name,
            page_spec=page_spec,
        )
    except BuqServiceError as exc:
        raise to_http_exception(exc) from exc
    return PageDto[AuditLogEntryDto].from_page(result, AuditLogEntryDto.from_entry)

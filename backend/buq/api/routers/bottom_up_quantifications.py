"""Bottom-up quantification endpoints."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status

from ...domain.buq import (
    REPORT_FILENAME,
    BottomUpQuantificationService,
    QueryBottomUpQuantificationSearchParams,
)
from ...domain.common import BuqServiceError, PageSpec, RawQueryParams
from ...dto import (
    AuditLogEntryDto,
    BottomUpQuantificationDto,
    BottomUpQuantificationDtoBuilder,
    PageDto,
)
from ..dependencies import (
    ActorContext,
    get_actor_context,
    get_buq_service,
    get_dto_builder,
    get_page_spec,
    get_raw_query_params,
)
from ..errors import to_http_exception

router = APIRouter(
    prefix="/api/bottomUpQuantifications", tags=["bottom-up quantifications"]
)


@router.get(
    "",
    response_model=PageDto[BottomUpQuantificationDto],
    summary="Search Bottom-Up Quantifications",
)
def search_quantifications(
    raw: RawQueryParams = Depends(get_raw_query_params),
    page_spec: PageSpec = Depends(get_page_spec),
    service: BottomUpQuantificationService = Depends(get_buq_service),
    builder: BottomUpQuantificationDtoBuilder = Depends(get_dto_builder),
) -> PageDto[BottomUpQuantificationDto]:
    try:
        result = service.search(QueryBottomUpQuantificationSearchParams(raw), page_spec)
    except BuqServiceError as exc:
        raise to_http_exception(exc) from exc
    return PageDto[BottomUpQuantificationDto].from_page(result, builder.build_dto)


@router.post(
    "/prepare",
    response_model=BottomUpQuantificationDto,
    status_code=status.HTTP_201_CREATED,
    summary="Prepare Bottom-Up Quantification",
)
def prepare_quantification(
    facility_id: UUID = Query(...),
    program_id: UUID = Query(...),
    processing_period_id: UUID = Query(...),
    service: BottomUpQuantificationService = Depends(get_buq_service),
    builder: BottomUpQuantificationDtoBuilder = Depends(get_dto_builder),
    actor: ActorContext = Depends(get_actor_context),
) -> BottomUpQuantificationDto:
    try:
        buq = service.prepare(
            facility_id=facility_id,
            program_id=program_id,
            processing_period_id=processing_period_id,
            author=actor.actor_id,
        )
    except BuqServiceError as exc:
        raise to_http_exception(exc) from exc
    return builder.build_dto(buq)


@router.get(
    "/{buq_id}",
    response_model=BottomUpQuantificationDto,
    summary="Get Bottom-Up Quantification",
)
def get_quantification(
    buq_id: UUID,
    service: BottomUpQuantificationService = Depends(get_buq_service),
    builder: BottomUpQuantificationDtoBuilder = Depends(get_dto_builder),
) -> BottomUpQuantificationDto:
    try:
        buq = service.get(buq_id)
    except BuqServiceError as exc:
        raise to_http_exception(exc) from exc
    return builder.build_dto(buq)


@router.put(
    "/{buq_id}",
    response_model=BottomUpQuantificationDto,
    summary="Update Bottom-Up Quantification",
)
def update_quantification(
    buq_id: UUID,
    payload: BottomUpQuantificationDto,
    service: BottomUpQuantificationService = Depends(get_buq_service),
    builder: BottomUpQuantificationDtoBuilder = Depends(get_dto_builder),
    actor: ActorContext = Depends(get_actor_context),
) -> BottomUpQuantificationDto:
    try:
        buq = service.save(
            buq_id,
            payload,
            author=actor.actor_id,
            expected_version=payload.version,
        )
    except BuqServiceError as exc:
        raise to_http_exception(exc) from exc
    return builder.build_dto(buq)


@router.delete(
    "/{buq_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Bottom-Up Quantification",
)
def delete_quantification(
    buq_id: UUID,
    service: BottomUpQuantificationService = Depends(get_buq_service),
    actor: ActorContext = Depends(get_actor_context),
) -> Response:
    try:
        service.delete(buq_id, author=actor.actor_id)
    except BuqServiceError as exc:
        raise to_http_exception(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{buq_id}/download", summary="Download Preparation Report")
def download_preparation_report(
    buq_id: UUID,
    service: BottomUpQuantificationService = Depends(get_buq_service),
) -> Response:
    try:
        data = service.get_preparation_form_data(service.get(buq_id))
    except BuqServiceError as exc:
        raise to_http_exception(exc) from exc
    return Response(
        content=data,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{REPORT_FILENAME}"'},
    )


@router.get(
    "/{buq_id}/auditLog",
    response_model=PageDto[AuditLogEntryDto],
    summary="Bottom-Up Quantification Audit Log",
)
def quantification_audit_log(
    buq_id: UUID,
    author: str | None = Query(None),
    changed_property_name: str | None = Query(None),
    page_spec: PageSpec = Depends(get_page_spec),
    service: BottomUpQuantificationService = Depends(get_buq_service),
) -> PageDto[AuditLogEntryDto]:
    try:
        result = service.audit_log(
            buq_id,
            author=author,
            property_name=changed_property_name,
            page_spec=page_spec,
        )
    except BuqServiceError as exc:
        raise to_http_exception(exc) from exc
    return PageDto[AuditLogEntryDto].from_page(result, AuditLogEntryDto.from_entry)

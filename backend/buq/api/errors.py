"""Translation of domain errors into HTTP responses."""

from __future__ import annotations

from fastapi import HTTPException

from ..domain.common import BuqServiceError


def to_http_exception(exc: BuqServiceError) -> HTTPException:
    return HTTPException(
        status_code=int(exc.status_code),
        detail={
            "error_code": exc.error_code,
            "message": exc.message,
            "details": exc.details,
        },
    )

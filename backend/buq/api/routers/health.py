"""Liveness endpoint."""

from typing import Any

from fastapi import APIRouter, Depends

from ...config import Settings
from ..dependencies import get_settings

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health")
def healthcheck(settings: Settings = Depends(get_settings)) -> dict[str, Any]:
    """Return coarse-grained backend readiness information."""

    return {"status": "ok", "environment": settings.environment}

"""Error taxonomy shared by the BUQ domain services."""

from __future__ import annotations

from http import HTTPStatus
from typing import Any, Dict, Mapping


class BuqServiceError(Exception):
    """Domain exception propagated to API handlers."""

    def __init__(
        self,
        *,
        status_code: HTTPStatus,
        error_code: str,
        message: str,
        details: Dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.error_code = error_code
        self.message = message
        self.details = details or {}


class NotFoundError(BuqServiceError):
    def __init__(self, resource: str, resource_id: Any) -> None:
        super().__init__(
            status_code=HTTPStatus.NOT_FOUND,
            error_code="BUQ-NOT-FOUND",
            message=f"{resource} '{resource_id}' not found",
            details={"id": str(resource_id)},
        )


class ValidationError(BuqServiceError):
    """A field or query parameter failed its declared constraint.

    ``fields`` maps every offending field (or query key) to a message.
    """

    def __init__(self, message: str, *, fields: Mapping[str, str]) -> None:
        super().__init__(
            status_code=HTTPStatus.UNPROCESSABLE_ENTITY,
            error_code="BUQ-INVALID-REQUEST",
            message=message,
            details={"fields": dict(fields)},
        )
        self.fields = dict(fields)


class ConcurrencyConflictError(BuqServiceError):
    def __init__(
        self,
        resource: str,
        resource_id: Any,
        *,
        expected_version: int | None,
        actual_version: int | None,
    ) -> None:
        super().__init__(
            status_code=HTTPStatus.CONFLICT,
            error_code="BUQ-CONFLICT",
            message=(
                f"{resource} '{resource_id}' was modified concurrently; "
                "re-fetch and retry"
            ),
            details={
                "id": str(resource_id),
                "expected_version": expected_version,
                "actual_version": actual_version,
            },
        )


class ProgrammingContractViolation(TypeError):
    """Raised when a collaborator argument required by a contract is missing."""


def require(value: Any, name: str) -> None:
    if value is None:
        raise ProgrammingContractViolation(f"{name} must not be None")

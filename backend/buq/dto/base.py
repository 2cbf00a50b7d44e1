"""Base class for request/response DTOs."""

from __future__ import annotations

from typing import Any
from uuid import UUID

from pydantic import BaseModel


class BaseDto(BaseModel):
    """Pydantic model with the same id-based identity as the entities.

    Two DTOs are equal only when they are of the same type and share a
    non-null id; a DTO without an id equals only itself. A DTO never equals
    an entity, even one with the same id.
    """

    id: UUID | None = None

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, BaseDto):
            return NotImplemented
        if type(self) is not type(other):
            return False
        if self.id is None or other.id is None:
            return self is other
        return self.id == other.id

    def __hash__(self) -> int:
        if self.id is None:
            return object.__hash__(self)
        return hash(self.id)

    def __str__(self) -> str:
        fields = ", ".join(
            f"{name}={getattr(self, name, None)!r}" for name in type(self).model_fields
        )
        return f"{type(self).__name__}({fields})"

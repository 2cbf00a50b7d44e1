"""Read-only adapter over raw, possibly multi-valued query parameters."""

from __future__ import annotations

from datetime import date
from enum import Enum
from types import MappingProxyType
from typing import Iterable, Mapping, Sequence, Type, TypeVar
from uuid import UUID

from .errors import ValidationError

E = TypeVar("E", bound=Enum)

RawQueryParams = Mapping[str, "str | Sequence[str]"]


class QueryParams:
    """Immutable view over ``key -> values`` with typed accessors.

    Accessors return ``None`` (or an empty tuple for the multi-valued
    variants) when a key is absent or blank. Malformed values are not raised
    one at a time: they are collected in :attr:`errors` so the caller can
    report every offending key together via :meth:`raise_if_invalid`.
    """

    def __init__(self, raw: RawQueryParams | None = None) -> None:
        normalized: dict[str, tuple[str, ...]] = {}
        for key, value in (raw or {}).items():
            values = (value,) if isinstance(value, str) else tuple(value)
            cleaned = tuple(item.strip() for item in values if item and item.strip())
            if cleaned:
                normalized[key] = cleaned
        self._params = MappingProxyType(normalized)
        self._errors: dict[str, str] = {}

    @property
    def errors(self) -> Mapping[str, str]:
        return MappingProxyType(self._errors)

    def contains_key(self, key: str) -> bool:
        return key in self._params

    def keys(self) -> Iterable[str]:
        return self._params.keys()

    def get_all(self, key: str) -> tuple[str, ...]:
        return self._params.get(key, ())

    def get_string(self, key: str) -> str | None:
        values = self.get_all(key)
        return values[0] if values else None

    def get_uuid(self, key: str) -> UUID | None:
        values = self.get_uuids(key)
        return values[0] if values else None

    def get_uuids(self, key: str) -> tuple[UUID, ...]:
        parsed: list[UUID] = []
        for raw in self._split(key):
            try:
                parsed.append(UUID(raw))
            except ValueError:
                self._errors[key] = f"'{raw}' is not a valid UUID"
                return ()
        return tuple(parsed)

    def get_enums(self, key: str, enum_type: Type[E]) -> tuple[E, ...]:
        parsed: list[E] = []
        for raw in self._split(key):
            try:
                parsed.append(enum_type(raw.upper()))
            except ValueError:
                allowed = ", ".join(member.value for member in enum_type)
                self._errors[key] = f"'{raw}' is not one of: {allowed}"
                return ()
        return tuple(parsed)

    def get_date(self, key: str) -> date | None:
        raw = self.get_string(key)
        if raw is None:
            return None
        try:
            return date.fromisoformat(raw)
        except ValueError:
            self._errors[key] = f"'{raw}' is not an ISO-8601 date (YYYY-MM-DD)"
            return None

    def raise_if_invalid(self, message: str = "Invalid search parameters") -> None:
        if self._errors:
            raise ValidationError(message, fields=self._errors)

    def _split(self, key: str) -> list[str]:
        # Accept both repeated keys and comma-separated values.
        tokens: list[str] = []
        for chunk in self.get_all(key):
            tokens.extend(part.strip() for part in chunk.split(",") if part.strip())
        return tokens

    def __repr__(self) -> str:
        return f"{type(self).__name__}({dict(self._params)!r})"

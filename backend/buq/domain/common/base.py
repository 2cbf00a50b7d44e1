"""Identity base shared by every persisted BUQ entity."""

from __future__ import annotations

from typing import Any, Dict, Protocol
from uuid import UUID


class BaseImporter(Protocol):
    """Read side of the wire contract: every importer exposes an id."""

    @property
    def id(self) -> UUID | None: ...


class BaseExporter(Protocol):
    """Write side of the wire contract."""

    id: UUID | None


class BaseEntity:
    """Entity carrying an identifier and an optimistic-concurrency revision.

    Equality and hashing depend on the concrete type and ``id``. Entities of
    different types never compare equal, even when they share an id. An
    entity without an id (not yet persisted) is only ever equal to itself,
    so two unsaved entities with identical business fields stay distinct.

    ``version`` is owned by the repositories: it starts at ``0`` on insert
    and is bumped on each successful update. A write carrying a stale
    version is rejected with :class:`ConcurrencyConflictError`.
    """

    def __init__(self, id: UUID | None = None, version: int = 0) -> None:
        self.id = id
        self.version = version

    def validate(self) -> Dict[str, str]:
        """Return ``{field: message}`` for every violated constraint."""

        return {}

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, BaseEntity):
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

    def __repr__(self) -> str:
        fields = ", ".join(f"{key}={value!r}" for key, value in vars(self).items())
        return f"{type(self).__name__}({fields})"

"""Remark entity and its import/export contract."""

from __future__ import annotations

from typing import Dict, Protocol
from uuid import UUID

from ..common import BaseEntity, BaseExporter, BaseImporter
from ..common.errors import require


class Remark(BaseEntity):
    """Free-text remark that quantification line items can refer to."""

    def __init__(
        self,
        id: UUID | None = None,
        name: str | None = None,
        description: str | None = None,
        version: int = 0,
    ) -> None:
        super().__init__(id=id, version=version)
        self.name = name
        self.description = description

    class Importer(BaseImporter, Protocol):
        @property
        def name(self) -> str | None: ...

        @property
        def description(self) -> str | None: ...

    class Exporter(BaseExporter, Protocol):
        version: int | None
        name: str | None
        description: str | None

    @classmethod
    def new_instance(cls, importer: "Remark.Importer") -> "Remark":
        """Creates new instance based on data from the importer."""

        require(importer, "importer")
        remark = cls()
        remark.id = importer.id
        remark.update_from(importer)
        return remark

    def update_from(self, importer: "Remark.Importer") -> None:
        require(importer, "importer")
        self.name = importer.name
        self.description = importer.description

    def export(self, exporter: "Remark.Exporter") -> None:
        """Exports data to the exporter."""

        require(exporter, "exporter")
        exporter.id = self.id
        exporter.version = self.version
        exporter.name = self.name
        exporter.description = self.description

    def validate(self) -> Dict[str, str]:
        if self.name is None or not self.name.strip():
            return {"name": "name must not be blank"}
        return {}

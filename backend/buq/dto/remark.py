"""Remark DTO."""

from __future__ import annotations

from ..domain.common.errors import require
from ..domain.remark import Remark
from .base import BaseDto


class RemarkDto(BaseDto):
    """Wire form of a remark; doubles as its importer and exporter."""

    name: str | None = None
    description: str | None = None
    version: int | None = None

    @classmethod
    def new_instance(cls, remark: Remark) -> "RemarkDto":
        require(remark, "remark")
        dto = cls()
        remark.export(dto)
        return dto

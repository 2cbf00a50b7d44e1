"""Data transfer objects exchanged over the HTTP API."""

from .base import BaseDto
from .buq import (
    BottomUpQuantificationDto,
    BottomUpQuantificationLineItemDto,
    BottomUpQuantificationStatusChangeDto,
)
from .builder import BottomUpQuantificationDtoBuilder
from .common import AuditLogEntryDto, PageDto
from .remark import RemarkDto

__all__ = [
    "AuditLogEntryDto",
    "BaseDto",
    "BottomUpQuantificationDto",
    "BottomUpQuantificationDtoBuilder",
    "BottomUpQuantificationLineItemDto",
    "BottomUpQuantificationStatusChangeDto",
    "PageDto",
    "RemarkDto",
]

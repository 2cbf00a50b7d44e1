"""Config package exporting loader helpers."""

from .loader import ActorConfig, PaginationConfig, Settings, load_settings

__all__ = ["ActorConfig", "PaginationConfig", "Settings", "load_settings"]

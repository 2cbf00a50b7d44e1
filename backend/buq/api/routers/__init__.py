"""Router exports for FastAPI composition."""

from . import bottom_up_quantifications, health, remarks

__all__ = ["bottom_up_quantifications", "health", "remarks"]

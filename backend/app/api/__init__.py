"""API routers."""

from app.api import days, routine

__all__ = [
    "days",
    "routine",
]

"""API routers."""

from .health import router as health_router
from .sessions import router as sessions_router  # Imports from sessions/ package

__all__ = [
    "health_router",
    "sessions_router",
]

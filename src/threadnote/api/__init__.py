"""API routers for ThreadNote."""

from .errors import register_exception_handlers
from .health import router as health_router
from .notes import router as notes_router

__all__ = ["notes_router", "health_router", "register_exception_handlers"]

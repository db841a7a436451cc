"""Receipt analyzer API package."""

from .error_handlers import register_exception_handlers
from .health import router as health_router
from .routes import router as main_router

__all__ = ["health_router", "main_router", "register_exception_handlers"]

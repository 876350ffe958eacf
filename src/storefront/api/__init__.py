"""HTTP tool endpoints called by the WhatsApp agent."""

from storefront.api.errors import register_exception_handlers
from storefront.api.routes import router

__all__ = ["router", "register_exception_handlers"]

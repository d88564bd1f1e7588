"""Commerce domain API package."""

from commerce.api.errors import register_error_handlers
from commerce.api.routes import cart_router, order_router

__all__ = ["cart_router", "order_router", "register_error_handlers"]

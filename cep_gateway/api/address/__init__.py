from .routes import get_address_service, router

__all__ = ["router", "get_address_service"]

from .service import AddressService, create_address_service

__all__ = ["AddressService", "create_address_service"]

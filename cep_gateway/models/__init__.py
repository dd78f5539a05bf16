from .address import AddressRecord, ErrorResponse
from .failure import ProviderFailure

__all__ = ["AddressRecord", "ErrorResponse", "ProviderFailure"]

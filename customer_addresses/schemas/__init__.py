from .address import (
    Identity,
    Address,
    AddressCreate,
    AddressUpdate,
    AddressListResponse,
)

__all__ = [
    "Identity",
    "Address",
    "AddressCreate",
    "AddressUpdate",
    "AddressListResponse",
]

"""
Address API endpoints

Saved delivery addresses of the signed-in customer.
"""

import uuid
from typing import Optional
from fastapi import APIRouter, Depends, Response, status

from customer_addresses.dependencies import get_address_service
from customer_addresses.middleware.auth import get_current_identity
from customer_addresses.schemas.address import (
    Address,
    AddressCreate,
    AddressListResponse,
    AddressUpdate,
    Identity,
)
from customer_addresses.services.address_service import AddressService


router = APIRouter(prefix="/v1/addresses", tags=["Addresses"])


@router.get("", response_model=AddressListResponse)
async def list_addresses(
    identity: Identity = Depends(get_current_identity),
    service: AddressService = Depends(get_address_service),
):
    """
    List saved addresses

    The default address comes first, the rest newest first.
    """
    addresses = await service.list_addresses(identity)
    return AddressListResponse(addresses=addresses)


@router.get("/default", response_model=Optional[Address])
async def get_default_address(
    identity: Identity = Depends(get_current_identity),
    service: AddressService = Depends(get_address_service),
):
    """
    Address to preselect at checkout

    null means the customer has no saved addresses and should type one.
    """
    return await service.get_default_address(identity)


@router.post("", status_code=status.HTTP_201_CREATED, response_model=Address)
async def create_address(
    request: AddressCreate,
    identity: Identity = Depends(get_current_identity),
    service: AddressService = Depends(get_address_service),
):
    """
    Save a new address

    With is_default set, the customer's previous default is cleared first.
    """
    return await service.create_address(identity, request)


@router.patch("/{address_id}", response_model=Address)
async def update_address(
    address_id: uuid.UUID,
    request: AddressUpdate,
    identity: Identity = Depends(get_current_identity),
    service: AddressService = Depends(get_address_service),
):
    """Edit an address; omitted fields keep their value"""
    return await service.update_address(identity, address_id, request)


@router.delete("/{address_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_address(
    address_id: uuid.UUID,
    identity: Identity = Depends(get_current_identity),
    service: AddressService = Depends(get_address_service),
):
    """
    Delete an address

    Repeating the request for an already deleted address also returns 204.
    """
    await service.delete_address(identity, address_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{address_id}/set-default", response_model=Address)
async def set_default_address(
    address_id: uuid.UUID,
    identity: Identity = Depends(get_current_identity),
    service: AddressService = Depends(get_address_service),
):
    """Make this the customer's default address"""
    return await service.set_default_address(identity, address_id)

"""
Address schemas

Pydantic models for rows read from the store and for create/update input.
Field checks that must fail before any remote call (blank full_address, ward
numbers) live in the service so they surface as ValidationError.
"""

import uuid
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class Identity(BaseModel):
    """Authenticated user on whose behalf an operation runs"""

    model_config = ConfigDict(frozen=True)

    id: uuid.UUID
    email: Optional[str] = None
    role: Optional[str] = None


class Address(BaseModel):
    """Saved delivery address as persisted in customer_addresses"""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: uuid.UUID
    address_label: Optional[str] = "Home"
    full_address: str
    landmark: Optional[str] = None
    panchayat_id: Optional[uuid.UUID] = None
    ward_number: Optional[int] = None
    is_default: bool = False
    created_at: datetime
    updated_at: datetime


class AddressCreate(BaseModel):
    """New address form"""

    address_label: Optional[str] = Field(None, max_length=50, description="Home, Work, Other")
    full_address: str = Field(..., description="House name, street, area")
    landmark: Optional[str] = Field(None, description="Nearby landmark")
    panchayat_id: Optional[uuid.UUID] = None
    ward_number: Optional[int] = None
    is_default: bool = False


class AddressUpdate(BaseModel):
    """Partial address edit; only fields that were set are written"""

    address_label: Optional[str] = Field(None, max_length=50)
    full_address: Optional[str] = None
    landmark: Optional[str] = None
    panchayat_id: Optional[uuid.UUID] = None
    ward_number: Optional[int] = None
    is_default: Optional[bool] = None


class AddressListResponse(BaseModel):
    addresses: list[Address]

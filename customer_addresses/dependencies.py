"""
FastAPI dependencies

Builds the table store selected by STORE_BACKEND and the address service on
top of it, one per request.
"""

from typing import AsyncGenerator, Optional

from fastapi import Depends

from customer_addresses.config import get_settings
from customer_addresses.middleware.auth import get_access_token
from customer_addresses.models.base import open_session
from customer_addresses.services.address_service import AddressService
from customer_addresses.stores import (
    PostgRESTTableStore,
    RemoteTableStore,
    SQLAlchemyTableStore,
)


async def get_table_store(
    token: Optional[str] = Depends(get_access_token),
) -> AsyncGenerator[RemoteTableStore, None]:
    """
    Store for the current request

    The PostgREST store forwards the caller's token so row-level security is
    evaluated as that user.
    """
    settings = get_settings()

    if settings.STORE_BACKEND == "postgrest":
        async with PostgRESTTableStore(
            settings.rest_url,
            settings.SUPABASE_ANON_KEY,
            access_token=token,
            timeout=settings.REST_TIMEOUT_SECONDS,
        ) as store:
            yield store
    else:
        async with open_session() as session:
            yield SQLAlchemyTableStore(session)


async def get_address_service(
    store: RemoteTableStore = Depends(get_table_store),
) -> AddressService:
    return AddressService(store)

"""
Address book session

The view of a user's addresses that a checkout screen works against. The
list held here is a read-only working copy: after every successful mutation
it is thrown away and fetched again, and after a failure it is left exactly
as it was.
"""

import uuid
from collections import Counter
from contextlib import asynccontextmanager
from typing import List, Optional

from customer_addresses.schemas.address import (
    Address,
    AddressCreate,
    AddressUpdate,
)
from customer_addresses.middleware.auth import IdentityProvider
from customer_addresses.services.address_selection import derive_initial_selection
from customer_addresses.services.address_service import AddressService
from customer_addresses.services.notifications import (
    LoggingNotifier,
    Notification,
    Notifier,
)
from customer_addresses.utils.exceptions import AppException
from customer_addresses.utils.logging import get_logger


logger = get_logger(__name__)


class AddressBook:
    """
    Address operations bound to the signed-in user

    Args:
        service: address service over a store
        identity_provider: supplies the current identity
        notifier: receives success and failure messages
    """

    def __init__(
        self,
        service: AddressService,
        identity_provider: IdentityProvider,
        notifier: Optional[Notifier] = None,
    ):
        self.service = service
        self.identity_provider = identity_provider
        self.notifier = notifier or LoggingNotifier()
        self.addresses: List[Address] = []
        self.error: Optional[AppException] = None
        self._pending: Counter = Counter()

    # Advisory busy flags for disabling buttons

    @property
    def is_loading(self) -> bool:
        return self._pending["load"] > 0

    @property
    def is_creating(self) -> bool:
        return self._pending["create"] > 0

    @property
    def is_updating(self) -> bool:
        return self._pending["update"] > 0

    @property
    def is_deleting(self) -> bool:
        return self._pending["delete"] > 0

    @property
    def default_address(self) -> Optional[Address]:
        return derive_initial_selection(self.addresses)

    @asynccontextmanager
    async def _busy(self, flag: str):
        self._pending[flag] += 1
        try:
            yield
        finally:
            self._pending[flag] -= 1

    async def reload(self) -> List[Address]:
        """Invalidate the working copy and fetch it again"""
        async with self._busy("load"):
            try:
                addresses = await self.service.list_addresses(
                    self.identity_provider.current_user()
                )
            except AppException as e:
                self.error = e
                raise
        self.addresses = addresses
        self.error = None
        return addresses

    async def create_address(self, data: AddressCreate) -> Address:
        async with self._busy("create"):
            address = await self._mutate(
                self.service.create_address(self.identity_provider.current_user(), data),
                success="Address saved",
                failure="Failed to save address",
            )
        await self.reload()
        return address

    async def update_address(self, address_id: uuid.UUID, data: AddressUpdate) -> Address:
        async with self._busy("update"):
            address = await self._mutate(
                self.service.update_address(
                    self.identity_provider.current_user(), address_id, data
                ),
                success="Address updated",
                failure="Failed to update address",
            )
        await self.reload()
        return address

    async def delete_address(self, address_id: uuid.UUID) -> None:
        async with self._busy("delete"):
            await self._mutate(
                self.service.delete_address(self.identity_provider.current_user(), address_id),
                success="Address removed",
                failure="Failed to delete address",
            )
        await self.reload()

    async def set_default_address(self, address_id: uuid.UUID) -> Address:
        async with self._busy("update"):
            address = await self._mutate(
                self.service.set_default_address(
                    self.identity_provider.current_user(), address_id
                ),
                success="Default address updated",
                failure="Failed to update default address",
            )
        await self.reload()
        return address

    async def _mutate(self, awaitable, success: str, failure: str):
        try:
            result = await awaitable
        except AppException as e:
            logger.info(f"{failure}: {e.message}", extra={"error_code": e.error_code})
            self.notifier.notify(
                Notification(title=failure, description=e.message, variant="destructive")
            )
            raise
        self.notifier.notify(Notification(title=success))
        return result

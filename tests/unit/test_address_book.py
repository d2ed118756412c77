"""
AddressBook unit tests

Working copy reloads, busy flags and notifications.
"""

import asyncio
import pytest
from uuid import uuid4

from customer_addresses.middleware.auth import StaticIdentityProvider
from customer_addresses.schemas.address import AddressCreate, AddressUpdate
from customer_addresses.services.address_book import AddressBook
from customer_addresses.utils.exceptions import (
    NotFoundError,
    PersistenceError,
    UnauthenticatedError,
    ValidationError,
)


@pytest.fixture
def address_book(address_service, owner, notifier) -> AddressBook:
    return AddressBook(address_service, StaticIdentityProvider(owner), notifier)


@pytest.mark.asyncio
class TestAddressBook:
    """AddressBook"""

    async def test_reload_signed_out_is_empty(self, address_service, notifier):
        book = AddressBook(address_service, StaticIdentityProvider(None), notifier)
        assert await book.reload() == []
        assert book.default_address is None

    async def test_create_reloads_working_copy(self, address_book, notifier):
        created = await address_book.create_address(
            AddressCreate(full_address="12 Palm Rd", is_default=True)
        )

        assert [a.id for a in address_book.addresses] == [created.id]
        assert address_book.default_address.id == created.id
        assert notifier.titles == ["Address saved"]

    async def test_failed_create_keeps_working_copy(
        self, address_book, notifier, recording_store
    ):
        await address_book.create_address(AddressCreate(full_address="12 Palm Rd"))
        before = list(address_book.addresses)
        recording_store.fail_on("insert", occurrence=2, message="duplicate key value")

        with pytest.raises(PersistenceError):
            await address_book.create_address(AddressCreate(full_address="14 Palm Rd"))

        assert address_book.addresses == before
        failure = notifier.notifications[-1]
        assert failure.title == "Failed to save address"
        assert failure.description == "duplicate key value"
        assert failure.variant == "destructive"
        assert address_book.is_creating is False

    async def test_validation_failure_notifies(self, address_book, notifier):
        with pytest.raises(ValidationError):
            await address_book.create_address(AddressCreate(full_address=" "))
        assert notifier.titles == ["Failed to save address"]

    async def test_update_and_set_default(self, address_book, notifier):
        home = await address_book.create_address(
            AddressCreate(full_address="Home", is_default=True)
        )
        work = await address_book.create_address(
            AddressCreate(address_label="Work", full_address="Office")
        )

        await address_book.update_address(work.id, AddressUpdate(landmark="Opposite bus stand"))
        await address_book.set_default_address(work.id)

        assert address_book.default_address.id == work.id
        assert [a.id for a in address_book.addresses] == [work.id, home.id]
        assert notifier.titles[-2:] == ["Address updated", "Default address updated"]

    async def test_delete_twice(self, address_book, notifier):
        address = await address_book.create_address(AddressCreate(full_address="12 Palm Rd"))

        await address_book.delete_address(address.id)
        await address_book.delete_address(address.id)

        assert address_book.addresses == []
        assert notifier.titles[-2:] == ["Address removed", "Address removed"]

    async def test_set_default_unknown(self, address_book, notifier):
        with pytest.raises(NotFoundError):
            await address_book.set_default_address(uuid4())
        assert notifier.titles == ["Failed to update default address"]

    async def test_signed_out_mutation(self, address_service, notifier):
        book = AddressBook(address_service, StaticIdentityProvider(None), notifier)
        with pytest.raises(UnauthenticatedError):
            await book.delete_address(uuid4())
        assert notifier.notifications[0].variant == "destructive"

    async def test_busy_flag_raised_while_in_flight(self, address_book, recording_store):
        gate = asyncio.Event()
        observed = {}
        original_insert = recording_store.insert

        async def slow_insert(table, row):
            observed["is_creating"] = address_book.is_creating
            await gate.wait()
            return await original_insert(table, row)

        recording_store.insert = slow_insert

        task = asyncio.create_task(
            address_book.create_address(AddressCreate(full_address="12 Palm Rd"))
        )
        await asyncio.sleep(0)
        gate.set()
        await task

        assert observed["is_creating"] is True
        assert address_book.is_creating is False
        assert address_book.is_loading is False

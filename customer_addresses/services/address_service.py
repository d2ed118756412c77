"""
Address Service

Saved delivery addresses for the current user, with at most one default
address per user.

Default promotion is two separate store calls: clear is_default on the
owner's rows, then set it on the target row. The second call is issued only
after the first completes. If the second call fails after the first succeeded
the owner is left with no default address; nothing is rolled back.
"""

import uuid
from typing import List, Optional

from customer_addresses.models.base import utcnow
from customer_addresses.models.address import DEFAULT_ADDRESS_LABEL
from customer_addresses.schemas.address import (
    Address,
    AddressCreate,
    AddressUpdate,
    Identity,
)
from customer_addresses.services.address_selection import derive_initial_selection
from customer_addresses.stores.base import (
    Condition,
    OrderBy,
    RemoteStoreError,
    RemoteTableStore,
)
from customer_addresses.utils.exceptions import (
    AddressNotFoundException,
    PersistenceError,
    UnauthenticatedError,
    ValidationError,
)
from customer_addresses.utils.logging import get_logger, audit_logger


logger = get_logger(__name__)

TABLE = "customer_addresses"

LIST_ORDER = (
    OrderBy("is_default", descending=True),
    OrderBy("created_at", descending=True),
)


class AddressService:
    """Customer address service"""

    def __init__(self, store: RemoteTableStore):
        self.store = store

    async def list_addresses(self, owner: Optional[Identity]) -> List[Address]:
        """
        Saved addresses of owner

        Args:
            owner: current identity, or None when nobody is signed in

        Returns:
            Addresses, default first then newest first. Empty when owner is None.
        """
        if owner is None:
            return []

        rows = await self._call(
            "select",
            self.store.select(TABLE, [Condition.eq("user_id", owner.id)], LIST_ORDER),
        )
        return [Address.model_validate(row) for row in rows]

    async def get_address(
        self, owner: Optional[Identity], address_id: uuid.UUID
    ) -> Optional[Address]:
        """
        Address by id, only if owned by owner
        """
        owner = self._require_owner(owner)
        rows = await self._call(
            "select",
            self.store.select(TABLE, self._owned(owner, address_id)),
        )
        return Address.model_validate(rows[0]) if rows else None

    async def get_default_address(self, owner: Optional[Identity]) -> Optional[Address]:
        """Address checkout should start with, or None for manual entry"""
        return derive_initial_selection(await self.list_addresses(owner))

    async def create_address(
        self, owner: Optional[Identity], data: AddressCreate
    ) -> Address:
        """
        Save a new address

        Args:
            owner: current identity
            data: address form

        Returns:
            The persisted address including id and timestamps

        Raises:
            UnauthenticatedError: no identity
            ValidationError: blank full_address or bad ward number; nothing is sent
            PersistenceError: the store rejected a call
        """
        owner = self._require_owner(owner)
        full_address = self._clean_full_address(data.full_address)
        self._check_ward_number(data.ward_number)

        if data.is_default:
            await self._clear_defaults(owner)

        row = await self._call(
            "insert",
            self.store.insert(
                TABLE,
                {
                    "user_id": owner.id,
                    "address_label": self._clean_label(data.address_label),
                    "full_address": full_address,
                    "landmark": data.landmark or None,
                    "panchayat_id": data.panchayat_id,
                    "ward_number": data.ward_number,
                    "is_default": bool(data.is_default),
                },
            ),
        )
        address = Address.model_validate(row)

        audit_logger.log_event(
            "address.created",
            user_id=str(owner.id),
            resource_type="address",
            resource_id=str(address.id),
            action="create",
            details={"is_default": address.is_default},
        )
        return address

    async def update_address(
        self,
        owner: Optional[Identity],
        address_id: uuid.UUID,
        data: AddressUpdate,
    ) -> Address:
        """
        Edit an address

        Only fields present in data are written. Promoting to default clears
        the flag on the owner's other addresses first, never on this one.

        Raises:
            UnauthenticatedError: no identity
            ValidationError: a supplied field failed local checks
            NotFoundError: address_id is not one of owner's addresses
            PersistenceError: the store rejected a call
        """
        owner = self._require_owner(owner)
        patch = data.model_dump(exclude_unset=True)

        if "full_address" in patch:
            patch["full_address"] = self._clean_full_address(patch["full_address"])
        if "ward_number" in patch:
            self._check_ward_number(patch["ward_number"])
        if "address_label" in patch:
            patch["address_label"] = self._clean_label(patch["address_label"])
        if "landmark" in patch:
            patch["landmark"] = patch["landmark"] or None
        if "is_default" in patch and patch["is_default"] is None:
            del patch["is_default"]

        if await self.get_address(owner, address_id) is None:
            raise AddressNotFoundException(str(address_id))

        if patch.get("is_default"):
            await self._clear_defaults(owner, exclude_id=address_id)

        patch["updated_at"] = utcnow()
        rows = await self._call(
            "update",
            self.store.update(TABLE, patch, self._owned(owner, address_id)),
        )
        if not rows:
            # Deleted between the ownership check and the update
            raise AddressNotFoundException(str(address_id))
        address = Address.model_validate(rows[0])

        audit_logger.log_event(
            "address.updated",
            user_id=str(owner.id),
            resource_type="address",
            resource_id=str(address_id),
            action="update",
            details={"fields": sorted(patch)},
        )
        return address

    async def delete_address(
        self, owner: Optional[Identity], address_id: uuid.UUID
    ) -> None:
        """
        Remove an address

        Deleting an id that is already gone succeeds silently.
        """
        owner = self._require_owner(owner)
        await self._call(
            "delete",
            self.store.delete(TABLE, self._owned(owner, address_id)),
        )

        audit_logger.log_event(
            "address.deleted",
            user_id=str(owner.id),
            resource_type="address",
            resource_id=str(address_id),
            action="delete",
        )

    async def set_default_address(
        self, owner: Optional[Identity], address_id: uuid.UUID
    ) -> Address:
        """
        Make address_id the owner's only default address

        Clears every default of the owner, then flags the target and refreshes
        its updated_at.

        Raises:
            UnauthenticatedError: no identity
            NotFoundError: address_id is not one of owner's addresses
            PersistenceError: the store rejected a call
        """
        owner = self._require_owner(owner)

        if await self.get_address(owner, address_id) is None:
            raise AddressNotFoundException(str(address_id))

        await self._clear_defaults(owner)

        rows = await self._call(
            "update",
            self.store.update(
                TABLE,
                {"is_default": True, "updated_at": utcnow()},
                self._owned(owner, address_id),
            ),
        )
        if not rows:
            raise AddressNotFoundException(str(address_id))

        audit_logger.log_event(
            "address.default_changed",
            user_id=str(owner.id),
            resource_type="address",
            resource_id=str(address_id),
            action="set_default",
        )
        return Address.model_validate(rows[0])

    async def _clear_defaults(
        self, owner: Identity, exclude_id: Optional[uuid.UUID] = None
    ) -> None:
        filters = [Condition.eq("user_id", owner.id)]
        if exclude_id is not None:
            filters.append(Condition.neq("id", exclude_id))
        await self._call(
            "update",
            self.store.update(TABLE, {"is_default": False}, filters),
        )

    @staticmethod
    def _owned(owner: Identity, address_id: uuid.UUID) -> List[Condition]:
        return [Condition.eq("id", address_id), Condition.eq("user_id", owner.id)]

    @staticmethod
    def _require_owner(owner: Optional[Identity]) -> Identity:
        if owner is None:
            raise UnauthenticatedError()
        return owner

    @staticmethod
    def _clean_full_address(value: Optional[str]) -> str:
        cleaned = (value or "").strip()
        if not cleaned:
            raise ValidationError("Please enter your delivery address", field="full_address")
        return cleaned

    @staticmethod
    def _clean_label(value: Optional[str]) -> str:
        return (value or "").strip() or DEFAULT_ADDRESS_LABEL

    @staticmethod
    def _check_ward_number(value: Optional[int]) -> None:
        if value is not None and value < 1:
            raise ValidationError("Ward number must be a positive number", field="ward_number")

    @staticmethod
    async def _call(operation: str, awaitable):
        try:
            return await awaitable
        except RemoteStoreError as e:
            logger.warning(
                f"Address store {operation} failed: {e.message}",
                extra={"operation": operation},
            )
            raise PersistenceError(e.message, operation=operation) from e

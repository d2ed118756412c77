"""
Checkout address selection

Which saved address (or free-text entry) the current checkout will deliver
to. The state is ephemeral and never persisted.
"""

import uuid
from typing import Callable, Optional, Sequence

from customer_addresses.schemas.address import Address, AddressCreate


def derive_initial_selection(addresses: Sequence[Address]) -> Optional[Address]:
    """
    Address checkout should start with

    The first default-flagged address, else the first address (the newest,
    given the listing order), else None meaning manual entry.
    """
    for address in addresses:
        if address.is_default:
            return address
    return addresses[0] if addresses else None


class AddressSelection:
    """
    Selection state for one checkout

    Args:
        on_address_change: receives the delivery address text whenever it changes
        on_address_select: receives the saved address when one is picked
    """

    def __init__(
        self,
        on_address_change: Optional[Callable[[str], None]] = None,
        on_address_select: Optional[Callable[[Address], None]] = None,
    ):
        self.on_address_change = on_address_change
        self.on_address_select = on_address_select
        self.addresses: list[Address] = []
        self.selected_address_id: Optional[uuid.UUID] = None
        self.manual_entry = False
        self.manual_text = ""
        self._manual_chosen = False

    @property
    def selected_address(self) -> Optional[Address]:
        if self.manual_entry or self.selected_address_id is None:
            return None
        return next(
            (a for a in self.addresses if a.id == self.selected_address_id), None
        )

    @property
    def delivery_address(self) -> str:
        """Text handed to the order"""
        selected = self.selected_address
        if selected is not None:
            return selected.full_address
        return self.manual_text

    @property
    def can_save_manual_entry(self) -> bool:
        return self.manual_entry and bool(self.manual_text.strip())

    def sync(self, addresses: Sequence[Address]) -> Optional[Address]:
        """
        Take a freshly loaded address list

        Keeps the current choice when it still exists. Otherwise picks the
        initial selection, or falls back to manual entry when the list is
        empty.

        Returns:
            The selected address, if any
        """
        self.addresses = list(addresses)

        if not self.addresses:
            self.selected_address_id = None
            self.manual_entry = True
            return None

        if self._manual_chosen:
            return None

        if self.selected_address is not None:
            return self.selected_address

        initial = derive_initial_selection(self.addresses)
        self._choose(initial)
        return initial

    def select(self, address_id: uuid.UUID) -> Address:
        """
        Pick a saved address

        Raises:
            KeyError: address_id is not in the loaded list
        """
        address = next((a for a in self.addresses if a.id == address_id), None)
        if address is None:
            raise KeyError(address_id)
        self._choose(address)
        return address

    def choose_manual_entry(self) -> None:
        """Switch to typing a new address"""
        self.manual_entry = True
        self._manual_chosen = True
        self.selected_address_id = None
        self._notify_change(self.manual_text)

    def set_manual_text(self, text: str) -> None:
        self.manual_text = text
        if self.manual_entry:
            self._notify_change(text)

    def manual_entry_draft(
        self, address_label: Optional[str] = None, is_default: bool = False
    ) -> AddressCreate:
        """Form pre-filled from the typed address, for "save this address" """
        return AddressCreate(
            address_label=address_label,
            full_address=self.manual_text,
            is_default=is_default,
        )

    def _choose(self, address: Address) -> None:
        self.manual_entry = False
        self._manual_chosen = False
        self.selected_address_id = address.id
        self._notify_change(address.full_address)
        if self.on_address_select is not None:
            self.on_address_select(address)

    def _notify_change(self, text: str) -> None:
        if self.on_address_change is not None:
            self.on_address_change(text)

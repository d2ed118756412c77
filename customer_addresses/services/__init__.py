"""
Address services
"""

from .address_selection import AddressSelection, derive_initial_selection
from .address_service import AddressService
from .address_book import AddressBook
from .notifications import LoggingNotifier, Notification, Notifier

__all__ = [
    "AddressSelection",
    "derive_initial_selection",
    "AddressService",
    "AddressBook",
    "LoggingNotifier",
    "Notification",
    "Notifier",
]

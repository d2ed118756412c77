"""
Shared utilities

Logging, exceptions and JWT helpers.
"""

from customer_addresses.utils.logging import (
    setup_logging,
    get_logger,
    AuditLogger,
    audit_logger,
)

from customer_addresses.utils.exceptions import (
    AppException,
    ValidationException,
    NotFoundException,
    UnauthenticatedException,
    PersistenceException,
    AddressNotFoundException,
    ValidationError,
    NotFoundError,
    UnauthenticatedError,
    PersistenceError,
)

from customer_addresses.utils.security import JWTManager

__all__ = [
    # logging
    "setup_logging",
    "get_logger",
    "AuditLogger",
    "audit_logger",
    # exceptions
    "AppException",
    "ValidationException",
    "NotFoundException",
    "UnauthenticatedException",
    "PersistenceException",
    "AddressNotFoundException",
    "ValidationError",
    "NotFoundError",
    "UnauthenticatedError",
    "PersistenceError",
    # security
    "JWTManager",
]

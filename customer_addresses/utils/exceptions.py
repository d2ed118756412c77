"""
Custom exception classes

Every failure raised by the address service derives from AppException so the
API layer can render it uniformly.
"""

from typing import Optional, Any
from fastapi import status


class AppException(Exception):
    """
    Base application exception

    All custom exceptions inherit from this class.
    """

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        error_code: str = "app_error",
        details: Optional[dict[str, Any]] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


class ValidationException(AppException):
    """
    Input failed a local check

    Raised before any remote call is issued.
    """

    def __init__(
        self,
        message: str = "Input data is invalid.",
        field: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        if field:
            details = details or {}
            details["field"] = field

        super().__init__(
            message=message,
            status_code=status.HTTP_400_BAD_REQUEST,
            error_code="validation_error",
            details=details,
        )


class NotFoundException(AppException):
    """
    Resource does not exist or is not owned by the caller
    """

    def __init__(
        self,
        resource: str = "Resource",
        resource_id: Optional[str] = None,
        message: Optional[str] = None,
    ):
        if message is None:
            if resource_id:
                message = f"{resource} not found (ID: {resource_id})"
            else:
                message = f"{resource} not found."

        super().__init__(
            message=message,
            status_code=status.HTTP_404_NOT_FOUND,
            error_code="not_found",
            details={"resource": resource, "resource_id": resource_id},
        )


class UnauthenticatedException(AppException):
    """
    No resolved identity (401 Unauthorized)
    """

    def __init__(self, message: str = "User not authenticated"):
        super().__init__(
            message=message,
            status_code=status.HTTP_401_UNAUTHORIZED,
            error_code="unauthenticated",
        )


class PersistenceException(AppException):
    """
    Remote store failure

    Network errors, authorization denials and constraint violations all end up
    here. The underlying message is kept for display.
    """

    def __init__(
        self,
        message: str = "The address store request failed.",
        operation: Optional[str] = None,
    ):
        details = {}
        if operation:
            details["operation"] = operation

        super().__init__(
            message=message,
            status_code=status.HTTP_502_BAD_GATEWAY,
            error_code="persistence_error",
            details=details,
        )


class AddressNotFoundException(NotFoundException):
    """Address missing or owned by someone else"""

    def __init__(self, address_id: str):
        super().__init__(resource="Address", resource_id=address_id)


# Alias names used throughout the service layer
ValidationError = ValidationException
NotFoundError = NotFoundException
UnauthenticatedError = UnauthenticatedException
PersistenceError = PersistenceException

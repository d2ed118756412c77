"""
Identity resolution

Turns the bearer token issued by the authentication provider into an
Identity. Nothing here reads global session state: callers hand the resolved
identity to every service operation.
"""

import uuid
from typing import Optional, Protocol

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from customer_addresses.schemas.address import Identity
from customer_addresses.utils.exceptions import UnauthenticatedError
from customer_addresses.utils.logging import get_logger
from customer_addresses.utils.security import JWTManager


logger = get_logger(__name__)

# Authorization: Bearer <token>; missing headers are handled below, not by FastAPI
security = HTTPBearer(auto_error=False)


class IdentityProvider(Protocol):
    def current_user(self) -> Optional[Identity]: ...


class StaticIdentityProvider:
    """Always returns the identity it was created with (None means signed out)"""

    def __init__(self, identity: Optional[Identity] = None):
        self.identity = identity

    def current_user(self) -> Optional[Identity]:
        return self.identity


class BearerIdentityProvider:
    """
    Identity carried by a JWT access token

    Invalid or expired tokens resolve to no user rather than raising, the same
    way a signed-out session does.
    """

    def __init__(self, token: Optional[str]):
        self.token = token
        self._identity = identity_from_token(token) if token else None

    def current_user(self) -> Optional[Identity]:
        return self._identity


def identity_from_token(token: str) -> Optional[Identity]:
    """
    Decode token into an Identity

    Returns:
        Identity, or None when the token is invalid or has no usable subject
    """
    try:
        payload = JWTManager.decode_token(token)
    except ValueError as e:
        logger.info(f"Rejected access token: {e}")
        return None

    subject = payload.get("sub")
    try:
        user_id = uuid.UUID(str(subject))
    except ValueError:
        logger.info("Access token subject is not a user id")
        return None

    return Identity(id=user_id, email=payload.get("email"), role=payload.get("role"))


async def get_access_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[str]:
    return credentials.credentials if credentials else None


async def get_optional_identity(
    token: Optional[str] = Depends(get_access_token),
) -> Optional[Identity]:
    """Identity of the caller, or None when signed out"""
    return BearerIdentityProvider(token).current_user()


async def get_current_identity(
    identity: Optional[Identity] = Depends(get_optional_identity),
) -> Identity:
    """
    Identity of the caller

    Raises:
        UnauthenticatedError: no valid bearer token

    Example:
        ```python
        @router.get("/me")
        async def me(identity: Identity = Depends(get_current_identity)):
            return {"id": str(identity.id)}
        ```
    """
    if identity is None:
        raise UnauthenticatedError()
    return identity

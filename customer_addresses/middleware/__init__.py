from .auth import (
    IdentityProvider,
    StaticIdentityProvider,
    BearerIdentityProvider,
    identity_from_token,
    get_access_token,
    get_optional_identity,
    get_current_identity,
)

__all__ = [
    "IdentityProvider",
    "StaticIdentityProvider",
    "BearerIdentityProvider",
    "identity_from_token",
    "get_access_token",
    "get_optional_identity",
    "get_current_identity",
]

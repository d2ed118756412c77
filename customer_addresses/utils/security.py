"""
JWT helpers

Tokens are issued by the authentication provider; this module only needs to
decode them. Token creation is kept for local development and tests.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt

from customer_addresses.config import get_settings


class JWTManager:
    """
    JWT encoding and decoding
    """

    @staticmethod
    def create_access_token(
        data: dict,
        expires_delta: Optional[timedelta] = None,
    ) -> str:
        """
        Issue an access token

        Args:
            data: claims to embed (sub, email, role)
            expires_delta: lifetime (defaults to ACCESS_TOKEN_EXPIRE_MINUTES)

        Returns:
            str: encoded JWT

        Example:
            >>> token = JWTManager.create_access_token({"sub": "6f1c..."})
        """
        settings = get_settings()
        to_encode = data.copy()
        if expires_delta is None:
            expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

        to_encode["exp"] = datetime.now(timezone.utc) + expires_delta
        if settings.JWT_AUDIENCE and "aud" not in to_encode:
            to_encode["aud"] = settings.JWT_AUDIENCE
        return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)

    @staticmethod
    def decode_token(token: str) -> dict:
        """
        Decode and verify a JWT

        Args:
            token: encoded JWT

        Returns:
            dict: payload

        Raises:
            ValueError: token is malformed, expired or has the wrong audience
        """
        settings = get_settings()
        try:
            return jwt.decode(
                token,
                settings.SECRET_KEY,
                algorithms=[settings.JWT_ALGORITHM],
                audience=settings.JWT_AUDIENCE,
                options={"verify_aud": settings.JWT_AUDIENCE is not None},
            )
        except JWTError as e:
            raise ValueError(f"Invalid token: {str(e)}")

"""
Authentication utilities for JWT token management.
Provides JWT token generation and validation with user-type claims.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
from jose import ExpiredSignatureError, JWTError, jwt
from property_finder.config import settings
from property_finder.models.user import UserType


class TokenPayload:
    """JWT token payload structure."""

    def __init__(self, user_id: int, email: str, user_type: Optional[str], exp: datetime):
        self.user_id = user_id
        self.email = email
        self.user_type = user_type
        self.exp = exp

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TokenPayload":
        """Create TokenPayload from dictionary."""
        return cls(
            user_id=int(data["sub"]),
            email=data["email"],
            user_type=data.get("user_type"),  # Absent on refresh tokens
            exp=datetime.fromtimestamp(data["exp"], tz=timezone.utc)
        )


def _encode(claims: Dict[str, Any], expire: datetime) -> str:
    to_encode = {
        **claims,
        "exp": expire,
        "iat": datetime.now(timezone.utc),
    }
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def create_access_token(
    user_id: int,
    email: str,
    user_type: UserType,
    expires_delta: Optional[timedelta] = None
) -> str:
    """
    Create JWT access token with user claims.

    Args:
        user_id: User's id
        email: User's email address
        user_type: User's account kind
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token string
    """
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    return _encode(
        {
            "sub": str(user_id),
            "email": email,
            "user_type": user_type.value,
            "type": "access",
        },
        expire,
    )


def create_refresh_token(
    user_id: int,
    email: str,
    expires_delta: Optional[timedelta] = None
) -> str:
    """
    Create JWT refresh token.

    Args:
        user_id: User's id
        email: User's email address
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT refresh token string
    """
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(days=settings.jwt_refresh_token_expire_days)
    )
    return _encode(
        {
            "sub": str(user_id),
            "email": email,
            "type": "refresh",
        },
        expire,
    )


def verify_token(token: str, token_type: str = "access") -> TokenPayload:
    """
    Verify and decode JWT token.

    Args:
        token: JWT token string
        token_type: Expected token type ("access" or "refresh")

    Returns:
        TokenPayload for a valid token

    Raises:
        JWTError: If token is invalid or expired
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm]
        )
    except ExpiredSignatureError:
        raise JWTError("Token has expired")

    if payload.get("type") != token_type:
        raise JWTError(f"Invalid token type. Expected {token_type}")

    if not payload.get("sub") or not payload.get("email"):
        raise JWTError("Invalid token payload")

    try:
        return TokenPayload.from_dict(payload)
    except (KeyError, ValueError) as e:
        raise JWTError(f"Token validation error: {str(e)}")

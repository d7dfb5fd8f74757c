"""
Authentication service for registration, login and token management.
Handles JWT token generation and validation and resolves the current user.
"""

from typing import Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from property_finder.repositories.user import UserRepository
from property_finder.models.user import User
from property_finder.schemas.user import UserCreate
from property_finder.utils.auth import (
    create_access_token,
    create_refresh_token,
    verify_token,
)
from property_finder.utils.exceptions import (
    InvalidCredentialsError,
    InvalidTokenError,
    TokenExpiredError,
    InactiveUserError,
    ValidationError,
)
from jose import JWTError
import logging

logger = logging.getLogger(__name__)


class AuthService:
    """
    Authentication service for managing user accounts and tokens.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.user_repo = UserRepository(db_session)

    async def register(self, user_data: UserCreate) -> User:
        """
        Register a new user account.

        Args:
            user_data: Registration payload

        Returns:
            Created user

        Raises:
            DuplicateResourceError: If the username or email is taken
            ValidationError: If the email or password is rejected
        """
        try:
            user = await self.user_repo.create_user(user_data.model_dump())
        except ValueError as e:
            raise ValidationError(str(e))

        logger.info(f"Registered user {user.username} ({user.user_type.value})")
        return user

    async def authenticate_user(self, email: str, password: str) -> User:
        """
        Authenticate user with email and password.

        Args:
            email: User's email address
            password: Plain text password

        Returns:
            Authenticated User object

        Raises:
            InvalidCredentialsError: If credentials are invalid
            InactiveUserError: If user account is inactive
        """
        user = await self.user_repo.authenticate_user(email, password)

        if not user:
            logger.warning(f"Failed authentication attempt for email: {email}")
            raise InvalidCredentialsError()

        if not user.is_active:
            raise InactiveUserError()

        return user

    def create_tokens(self, user: User) -> Tuple[str, str]:
        """
        Create access and refresh tokens for user.

        Args:
            user: User object

        Returns:
            Tuple of (access_token, refresh_token)
        """
        access_token = create_access_token(
            user_id=user.id,
            email=user.email,
            user_type=user.user_type
        )
        refresh_token = create_refresh_token(
            user_id=user.id,
            email=user.email
        )
        return access_token, refresh_token

    async def login(self, email: str, password: str) -> Tuple[User, str, str]:
        """
        Authenticate user and create tokens.

        Returns:
            Tuple of (user, access_token, refresh_token)
        """
        user = await self.authenticate_user(email, password)
        access_token, refresh_token = self.create_tokens(user)
        return user, access_token, refresh_token

    async def refresh_access_token(self, refresh_token: str) -> str:
        """
        Create new access token from refresh token.

        Args:
            refresh_token: Valid refresh token

        Returns:
            New access token

        Raises:
            InvalidTokenError: If refresh token is invalid
            TokenExpiredError: If refresh token is expired
            InactiveUserError: If user account is inactive
        """
        user = await self._user_from_token(refresh_token, "refresh")
        return create_access_token(
            user_id=user.id,
            email=user.email,
            user_type=user.user_type
        )

    async def get_current_user(self, token: str) -> User:
        """
        Get current user from access token.

        Raises:
            InvalidTokenError: If token is invalid or the user no longer exists
            TokenExpiredError: If token is expired
            InactiveUserError: If user account is inactive
        """
        return await self._user_from_token(token, "access")

    async def _user_from_token(self, token: str, token_type: str) -> User:
        try:
            token_payload = verify_token(token, token_type=token_type)
        except JWTError as e:
            if "expired" in str(e).lower():
                raise TokenExpiredError()
            raise InvalidTokenError(str(e))

        user = await self.user_repo.get_by_id(token_payload.user_id)
        if not user:
            raise InvalidTokenError("Token subject no longer exists")
        if not user.is_active:
            raise InactiveUserError()
        return user

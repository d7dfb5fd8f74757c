"""
User repository for authentication and user management operations.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, or_
from property_finder.repositories.base import BaseRepository
from property_finder.models.user import User, UserType
from property_finder.utils.exceptions import DuplicateResourceError
from typing import Optional, Dict, Any
import logging

logger = logging.getLogger(__name__)


class UserRepository(BaseRepository[User]):
    """
    Repository for user accounts.
    Handles registration with password hashing and credential checks.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(User, db)

    async def create_user(self, user_data: Dict[str, Any]) -> User:
        """
        Create a new user with email validation and password hashing.

        Args:
            user_data: Dictionary containing user information
                      Must include: username, email, password
                      Optional: first_name, last_name, phone_number, user_type

        Returns:
            Created user instance

        Raises:
            DuplicateResourceError: If the username or email is taken
            ValueError: If validation fails
        """
        try:
            email = User.validate_email_format(user_data["email"])
            username = user_data["username"].strip()

            existing = await self.db.execute(
                select(User).where(or_(User.email == email, User.username == username))
            )
            existing_user = existing.scalars().first()
            if existing_user:
                if existing_user.email == email:
                    raise DuplicateResourceError("User", email)
                raise DuplicateResourceError("User", username)

            password = user_data.pop("password")
            create_data = {
                **user_data,
                "username": username,
                "email": email,
                "hashed_password": User.hash_password(password),
                "user_type": user_data.get("user_type", UserType.OWNER),
                "is_active": user_data.get("is_active", True),
            }

            created_user = await self.create(create_data)
            logger.info(f"Created user: {created_user.email} (ID: {created_user.id})")
            return created_user
        except (ValueError, DuplicateResourceError) as e:
            logger.error(f"User validation failed: {e}")
            raise
        except Exception as e:
            logger.error(f"Failed to create user: {e}")
            raise

    async def get_by_email(self, email: str) -> Optional[User]:
        """
        Get user by email address.

        Args:
            email: Email address to search for

        Returns:
            User instance if found, None otherwise
        """
        return await self.get_by_field("email", email.lower().strip())

    async def authenticate_user(self, email: str, password: str) -> Optional[User]:
        """
        Authenticate user with email and password.

        Args:
            email: User's email address
            password: Plain text password

        Returns:
            User instance if authentication successful, None otherwise
        """
        try:
            user = await self.get_by_email(email)

            if not user:
                logger.debug(f"Authentication failed: user {email} not found")
                return None

            if not user.verify_password(password):
                logger.debug(f"Authentication failed: invalid password for {email}")
                return None

            logger.info(f"User authenticated successfully: {email}")
            return user
        except Exception as e:
            logger.error(f"Failed to authenticate user {email}: {e}")
            raise

"""
Authentication service for login, token management and identity lookup.
Sellers and admins log in through separate endpoints backed by the same flow.
"""

from typing import Optional, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from realty.config import settings
from realty.repositories.user import UserRepository
from realty.models.user import User, UserRole
from realty.utils.auth import (
    create_access_token,
    create_refresh_token,
    verify_token,
)
from realty.utils.exceptions import (
    APIException,
    InvalidCredentialsError,
    InvalidTokenError,
    TokenExpiredError,
    SellerDeletedError,
    BadRequestError,
)
from jose import JWTError, ExpiredSignatureError
import uuid
import logging

logger = logging.getLogger(__name__)


class AuthService:
    """
    Authentication service for managing user authentication and tokens.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.user_repo = UserRepository(db_session)

    async def authenticate_user(self, email: str, password: str, role: UserRole) -> User:
        """
        Authenticate a user of the given role with email and password.

        Raises:
            InvalidCredentialsError: If credentials are invalid or the role differs
            SellerDeletedError: If the seller account was soft-deleted
        """
        try:
            user = await self.user_repo.get_by_email(email)

            if not user or user.role != role or not user.verify_password(password):
                logger.warning(f"Failed {role.value} login attempt for email: {email}")
                raise InvalidCredentialsError()

            if user.is_deleted:
                logger.warning(f"Login refused for deleted seller: {email}")
                raise SellerDeletedError()

            logger.info(f"{role.value.capitalize()} authenticated successfully: {user.email}")
            return user

        except APIException:
            raise
        except Exception as e:
            logger.error(f"Authentication error for {email}: {e}")
            raise InvalidCredentialsError()

    def create_tokens(self, user: User) -> Tuple[str, str]:
        """
        Create access and refresh tokens for user.

        Returns:
            Tuple of (access_token, refresh_token)
        """
        access_token = create_access_token(user_id=user.id, email=user.email, role=user.role)
        refresh_token = create_refresh_token(user_id=user.id, email=user.email, role=user.role)
        return access_token, refresh_token

    @staticmethod
    def access_token_lifetime() -> int:
        """Access token lifetime in seconds."""
        return settings.access_token_expire_minutes * 60

    async def login(self, email: str, password: str, role: UserRole) -> Tuple[User, str, str]:
        """
        Authenticate user and create tokens.

        Returns:
            Tuple of (user, access_token, refresh_token)
        """
        user = await self.authenticate_user(email, password, role)
        access_token, refresh_token = self.create_tokens(user)
        return user, access_token, refresh_token

    async def refresh_access_token(self, refresh_token: str) -> str:
        """
        Create new access token from refresh token.

        Raises:
            InvalidTokenError: If refresh token is invalid or its user is gone
            TokenExpiredError: If refresh token is expired
        """
        user = await self._user_from_token(refresh_token, "refresh")
        return create_access_token(user_id=user.id, email=user.email, role=user.role)

    async def get_current_user(self, token: str) -> User:
        """
        Get current user from access token.

        Raises:
            InvalidTokenError: If token is invalid or its user no longer exists
            TokenExpiredError: If token is expired
            SellerDeletedError: If the seller was soft-deleted after the token was issued
        """
        return await self._user_from_token(token, "access")

    async def _user_from_token(self, token: str, token_type: str) -> User:
        try:
            payload = verify_token(token, token_type=token_type)
            user_id = uuid.UUID(payload.user_id)
        except ExpiredSignatureError:
            raise TokenExpiredError()
        except (JWTError, ValueError) as e:
            raise InvalidTokenError(str(e) or "Invalid token")

        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            raise InvalidTokenError("User no longer exists")
        if user.is_deleted:
            raise SellerDeletedError()
        return user

    async def ensure_admin(self, email: str, password: str, full_name: str) -> Tuple[Optional[User], bool]:
        """
        Create the bootstrap admin unless an admin already exists.

        Returns:
            Tuple of (admin user or None, created flag)
        """
        if await self.user_repo.admin_exists():
            logger.info("Admin account already present, nothing to seed")
            return None, False

        try:
            admin = await self.user_repo.create_user({
                "email": email,
                "password": password,
                "full_name": full_name,
                "role": UserRole.ADMIN,
                "is_active": True,
            })
        except ValueError as e:
            raise BadRequestError(str(e))

        logger.info(f"Seeded admin account {admin.email}")
        return admin, True

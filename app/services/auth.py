"""
Authentication service for registration, login, email verification and password reset.
Handles session token generation and validation and the one-time token flows.
"""

from typing import Optional, Tuple
from datetime import timedelta
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from app.config import Settings, settings as default_settings
from app.database import utcnow
from app.repositories.user import UserRepository
from app.models.user import User, UserRole
from app.schemas.auth import RegisterRequest
from app.services.email import EmailService
from app.utils.auth import (
    create_access_token,
    generate_one_time_token,
    verify_token
)
from app.utils.exceptions import (
    ConflictError,
    EmailDeliveryError,
    ForbiddenError,
    InternalServerError,
    InvalidCredentialsError,
    InvalidTokenError,
    TokenExpiredError,
    UnauthorizedError,
    ValidationError
)
from jose import JWTError, ExpiredSignatureError
import uuid
import logging

logger = logging.getLogger(__name__)


class AuthService:
    """
    Authentication service for account lifecycle and session tokens.
    """

    def __init__(
        self,
        db_session: AsyncSession,
        email_service: Optional[EmailService] = None,
        settings: Optional[Settings] = None
    ):
        self.db = db_session
        self.user_repo = UserRepository(db_session)
        self.settings = settings or default_settings
        self.email_service = email_service or EmailService(self.settings)

    def create_token(self, user: User) -> str:
        """Issue a session token for the user."""
        return create_access_token(
            user_id=user.id,
            email=user.email,
            role=user.role,
            expires_delta=timedelta(minutes=self.settings.access_token_expire_minutes)
        )

    async def register(self, user_data: RegisterRequest) -> Tuple[User, str]:
        """
        Register a new account and send the verification email.

        Args:
            user_data: Registration payload

        Returns:
            Tuple of (created user, session token)

        Raises:
            ForbiddenError: If the admin role is requested
            ConflictError: If the email is already registered
            ValidationError: If the data is invalid
        """
        role = user_data.role or UserRole.PROPERTY_SEEKER
        if role == UserRole.ADMIN:
            logger.warning(f"Rejected self-registration as admin for {user_data.email}")
            raise ForbiddenError("Admin accounts cannot be self-registered")

        if await self.user_repo.get_by_email(user_data.email):
            raise ConflictError("User already exists")

        verification_token = generate_one_time_token()

        try:
            user = await self.user_repo.create_user({
                "name": user_data.name,
                "email": user_data.email,
                "password": user_data.password,
                "role": role,
                "verification_token": verification_token,
                "verification_token_expiry": utcnow() + timedelta(
                    hours=self.settings.verification_token_expire_hours
                ),
            })
        except IntegrityError:
            raise ConflictError("User already exists")
        except ValueError as e:
            raise ValidationError(str(e))

        logger.info(f"User registered: {user.email} ({user.role.value})")

        try:
            await self.email_service.send_verification_email(user.email, verification_token)
        except EmailDeliveryError as e:
            logger.warning(f"Verification email to {user.email} failed: {e}")

        return user, self.create_token(user)

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
        """
        user = await self.user_repo.get_by_email(email)

        if not user or not user.verify_password(password):
            logger.warning(f"Failed authentication attempt for email: {email}")
            raise InvalidCredentialsError()

        logger.info(f"User authenticated successfully: {user.email}")
        return user

    async def login(self, email: str, password: str) -> Tuple[User, str]:
        """
        Authenticate user and issue a session token.

        Returns:
            Tuple of (user, session token)
        """
        user = await self.authenticate_user(email, password)
        return user, self.create_token(user)

    async def verify_email(self, token: str) -> User:
        """
        Mark the account holding a valid verification token as verified.

        Args:
            token: Verification token from the emailed link

        Returns:
            Verified user

        Raises:
            ValidationError: If the token is unknown or expired
        """
        user = await self.user_repo.get_by_verification_token(token)

        if not user or not user.has_valid_verification_token:
            raise ValidationError("Invalid or expired verification token")

        user.is_verified = True
        user.verification_token = None
        user.verification_token_expiry = None
        user = await self.user_repo.save(user)

        logger.info(f"Email verified for user {user.email}")
        return user

    async def forgot_password(self, email: str) -> None:
        """
        Issue a password reset token and email it.
        Unknown addresses are ignored so callers cannot probe for accounts.

        Args:
            email: Account email address

        Raises:
            InternalServerError: If the reset email cannot be sent
        """
        user = await self.user_repo.get_by_email(email)
        if not user:
            logger.info("Password reset requested for unknown email")
            return

        reset_token = generate_one_time_token()
        user.reset_password_token = reset_token
        user.reset_password_expiry = utcnow() + timedelta(
            minutes=self.settings.reset_token_expire_minutes
        )
        user = await self.user_repo.save(user)

        try:
            await self.email_service.send_password_reset_email(user.email, reset_token)
        except EmailDeliveryError as e:
            logger.error(f"Password reset email to {user.email} failed: {e}")
            user.reset_password_token = None
            user.reset_password_expiry = None
            await self.user_repo.save(user)
            raise InternalServerError("Failed to send email")

        logger.info(f"Password reset issued for user {user.email}")

    async def reset_password(self, token: str, password: str) -> str:
        """
        Set a new password using a reset token. The token is single use.

        Args:
            token: Reset token from the emailed link
            password: New plain text password

        Returns:
            Fresh session token

        Raises:
            ValidationError: If the token is unknown or expired or the password is invalid
        """
        user = await self.user_repo.get_by_reset_token(token)

        if not user or not user.has_valid_reset_token:
            raise ValidationError("Invalid or expired reset token")

        try:
            user.set_password(password)
        except ValueError as e:
            raise ValidationError(str(e))

        user.reset_password_token = None
        user.reset_password_expiry = None
        user = await self.user_repo.save(user)

        logger.info(f"Password reset completed for user {user.email}")
        return self.create_token(user)

    async def get_current_user(self, token: str) -> User:
        """
        Get current user from a session token.

        Args:
            token: JWT session token

        Returns:
            Current User object

        Raises:
            TokenExpiredError: If token is expired
            InvalidTokenError: If token is invalid
            UnauthorizedError: If the user no longer exists
        """
        try:
            token_payload = verify_token(token, token_type="access")
            user_id = uuid.UUID(token_payload.user_id)
        except ExpiredSignatureError:
            raise TokenExpiredError()
        except (JWTError, ValueError) as e:
            logger.debug(f"Rejected session token: {e}")
            raise InvalidTokenError()

        user = await self.user_repo.get_by_id(user_id)
        if not user:
            raise UnauthorizedError("User no longer exists")

        return user

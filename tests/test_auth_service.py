"""
Tests for AuthService and the authentication utilities.
Covers registration, login, email verification, password reset and token validation.
"""

import pytest
import uuid
from datetime import timedelta

from app.database import utcnow
from app.models.user import User, UserRole
from app.repositories.user import UserRepository
from app.schemas.auth import RegisterRequest
from app.services.auth import AuthService
from app.utils.auth import (
    create_access_token,
    generate_one_time_token,
    is_allowed,
    verify_token
)
from app.utils.exceptions import (
    ConflictError,
    ForbiddenError,
    InternalServerError,
    InvalidCredentialsError,
    InvalidTokenError,
    TokenExpiredError,
    UnauthorizedError,
    ValidationError
)
from tests.conftest import TEST_PASSWORD, FakeEmailService


class TestAuthUtils:
    """Test token and role helpers."""

    def test_access_token_claims(self):
        user_id = uuid.uuid4()
        token = create_access_token(user_id, "ama@example.com", UserRole.PROPERTY_OWNER)
        payload = verify_token(token)

        assert payload.user_id == str(user_id)
        assert payload.email == "ama@example.com"
        assert payload.role == "property_owner"

    def test_one_time_tokens_are_random_hex(self):
        first, second = generate_one_time_token(), generate_one_time_token()
        assert len(first) == 64
        int(first, 16)
        assert first != second

    @pytest.mark.parametrize("role,allowed,expected", [
        (UserRole.ADMIN, [UserRole.ADMIN], True),
        (UserRole.PROPERTY_OWNER, [UserRole.ADMIN, UserRole.PROPERTY_OWNER], True),
        (UserRole.PROPERTY_SEEKER, [UserRole.ADMIN, UserRole.PROPERTY_OWNER], False),
        ("property_seeker", [UserRole.PROPERTY_SEEKER], True),
        (UserRole.ADMIN, [], False),
    ])
    def test_is_allowed(self, role, allowed, expected):
        assert is_allowed(role, allowed) is expected


class TestRegistration:
    """Test account registration."""

    async def test_register_defaults_to_seeker(self, auth_service: AuthService, email_service: FakeEmailService):
        user, token = await auth_service.register(
            RegisterRequest(name="Ama", email="Ama@Example.com", password="secret123")
        )

        assert user.email == "ama@example.com"
        assert user.role == UserRole.PROPERTY_SEEKER
        assert user.is_verified is False
        assert user.has_valid_verification_token
        assert verify_token(token).user_id == str(user.id)

        assert len(email_service.sent) == 1
        to, subject, body = email_service.sent[0]
        assert to == "ama@example.com"
        assert f"/verify-email?token={user.verification_token}" in body

    async def test_register_owner(self, auth_service: AuthService):
        user, _ = await auth_service.register(
            RegisterRequest(name="Kofi", email="kofi@example.com", password="secret123",
                            role=UserRole.PROPERTY_OWNER)
        )
        assert user.role == UserRole.PROPERTY_OWNER

    async def test_register_admin_forbidden(self, auth_service: AuthService, user_repository: UserRepository):
        with pytest.raises(ForbiddenError):
            await auth_service.register(
                RegisterRequest(name="Eve", email="eve@example.com", password="secret123", role=UserRole.ADMIN)
            )
        assert await user_repository.get_by_email("eve@example.com") is None

    async def test_register_duplicate_email(self, auth_service: AuthService, test_seeker: User):
        with pytest.raises(ConflictError, match="User already exists"):
            await auth_service.register(
                RegisterRequest(name="Again", email="seeker@example.com", password="secret123")
            )

    async def test_register_survives_email_failure(self, db_session):
        service = AuthService(db_session, email_service=FakeEmailService(fail=True))
        user, token = await service.register(
            RegisterRequest(name="Ama", email="ama@example.com", password="secret123")
        )
        assert user.id is not None
        assert token


class TestLogin:
    """Test credential checks."""

    async def test_login_success(self, auth_service: AuthService, test_owner: User):
        user, token = await auth_service.login("owner@example.com", TEST_PASSWORD)
        assert user.id == test_owner.id
        assert verify_token(token).role == "property_owner"

    async def test_login_wrong_password(self, auth_service: AuthService, test_owner: User):
        with pytest.raises(InvalidCredentialsError, match="Invalid credentials"):
            await auth_service.login("owner@example.com", "wrong-password")

    async def test_login_unknown_email(self, auth_service: AuthService):
        with pytest.raises(InvalidCredentialsError, match="Invalid credentials"):
            await auth_service.login("nobody@example.com", TEST_PASSWORD)


class TestEmailVerification:
    """Test the verification token flow."""

    async def test_verify_email(self, auth_service: AuthService):
        user, _ = await auth_service.register(
            RegisterRequest(name="Ama", email="ama@example.com", password="secret123")
        )
        token = user.verification_token

        verified = await auth_service.verify_email(token)
        assert verified.is_verified is True
        assert verified.verification_token is None
        assert verified.verification_token_expiry is None

        with pytest.raises(ValidationError, match="Invalid or expired verification token"):
            await auth_service.verify_email(token)

    async def test_verify_email_expired(
        self,
        auth_service: AuthService,
        user_repository: UserRepository,
        test_seeker: User
    ):
        test_seeker.verification_token = "expired-token"
        test_seeker.verification_token_expiry = utcnow() - timedelta(minutes=1)
        await user_repository.save(test_seeker)

        with pytest.raises(ValidationError):
            await auth_service.verify_email("expired-token")

    async def test_verify_email_unknown(self, auth_service: AuthService):
        with pytest.raises(ValidationError):
            await auth_service.verify_email("no-such-token")


class TestPasswordReset:
    """Test the forgot/reset password flow."""

    async def test_forgot_password_unknown_email_is_silent(
        self,
        auth_service: AuthService,
        email_service: FakeEmailService
    ):
        await auth_service.forgot_password("nobody@example.com")
        assert email_service.sent == []

    async def test_forgot_and_reset_password(
        self,
        auth_service: AuthService,
        user_repository: UserRepository,
        email_service: FakeEmailService,
        test_seeker: User
    ):
        seeker_id = test_seeker.id
        await auth_service.forgot_password("seeker@example.com")

        user = await user_repository.get_by_id(seeker_id)
        reset_token = user.reset_password_token
        assert user.has_valid_reset_token
        assert f"/reset-password?token={reset_token}" in email_service.sent[-1][2]

        session_token = await auth_service.reset_password(reset_token, "brand-new-pass")
        assert verify_token(session_token).user_id == str(seeker_id)

        user = await user_repository.get_by_id(seeker_id)
        assert user.reset_password_token is None
        assert user.verify_password("brand-new-pass")
        assert not user.verify_password(TEST_PASSWORD)

        with pytest.raises(ValidationError, match="Invalid or expired reset token"):
            await auth_service.reset_password(reset_token, "another-pass")

    async def test_reset_password_expired_token(
        self,
        auth_service: AuthService,
        user_repository: UserRepository,
        test_seeker: User
    ):
        test_seeker.reset_password_token = "stale"
        test_seeker.reset_password_expiry = utcnow() - timedelta(seconds=5)
        await user_repository.save(test_seeker)

        with pytest.raises(ValidationError):
            await auth_service.reset_password("stale", "brand-new-pass")

    async def test_reset_password_too_short(
        self,
        auth_service: AuthService,
        user_repository: UserRepository,
        test_seeker: User
    ):
        test_seeker.reset_password_token = "fresh"
        test_seeker.reset_password_expiry = utcnow() + timedelta(minutes=5)
        await user_repository.save(test_seeker)

        with pytest.raises(ValidationError, match="at least 6 characters"):
            await auth_service.reset_password("fresh", "123")

    async def test_forgot_password_email_failure_clears_token(
        self,
        db_session,
        user_repository: UserRepository,
        test_seeker: User
    ):
        seeker_id = test_seeker.id
        service = AuthService(db_session, email_service=FakeEmailService(fail=True))

        with pytest.raises(InternalServerError, match="Failed to send email"):
            await service.forgot_password("seeker@example.com")

        user = await user_repository.get_by_id(seeker_id)
        assert user.reset_password_token is None
        assert user.reset_password_expiry is None


class TestCurrentUser:
    """Test session token resolution."""

    async def test_get_current_user(self, auth_service: AuthService, test_owner: User):
        token = auth_service.create_token(test_owner)
        user = await auth_service.get_current_user(token)
        assert user.id == test_owner.id

    async def test_expired_token(self, auth_service: AuthService, test_owner: User):
        token = create_access_token(
            test_owner.id, test_owner.email, test_owner.role, expires_delta=timedelta(seconds=-1)
        )
        with pytest.raises(TokenExpiredError):
            await auth_service.get_current_user(token)

    async def test_malformed_token(self, auth_service: AuthService):
        with pytest.raises(InvalidTokenError):
            await auth_service.get_current_user("not.a.jwt")

    async def test_deleted_user(self, auth_service: AuthService):
        token = create_access_token(uuid.uuid4(), "ghost@example.com", UserRole.PROPERTY_SEEKER)
        with pytest.raises(UnauthorizedError, match="User no longer exists"):
            await auth_service.get_current_user(token)

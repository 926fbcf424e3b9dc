"""
Pydantic schemas for authentication requests and responses.
Handles registration, login, email verification and password reset payloads.
"""

from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional
from app.models.user import UserRole
from app.schemas.user import UserResponse
from app.utils.auth import MIN_PASSWORD_LENGTH


class RegisterRequest(BaseModel):
    """Registration request schema."""

    name: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="User's display name",
        examples=["Ama Mensah"]
    )
    email: EmailStr = Field(
        ...,
        description="User's email address",
        examples=["owner@example.com"]
    )
    password: str = Field(
        ...,
        min_length=MIN_PASSWORD_LENGTH,
        max_length=128,
        description=f"Password (minimum {MIN_PASSWORD_LENGTH} characters)",
        examples=["securepassword123"]
    )
    role: Optional[UserRole] = Field(
        None,
        description="Requested role; defaults to property_seeker",
        examples=["property_owner"]
    )

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        """Validate and clean name."""
        if not v or not v.strip():
            raise ValueError("Name is required")
        return v.strip()

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v):
        """Normalize email to lowercase."""
        return v.lower().strip()


class LoginRequest(BaseModel):
    """Login request schema."""

    email: EmailStr = Field(
        ...,
        description="User's email address",
        examples=["owner@example.com"]
    )
    password: str = Field(
        ...,
        min_length=1,
        max_length=128,
        description="User's password"
    )

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v):
        """Normalize email to lowercase."""
        return v.lower().strip()


class VerifyEmailRequest(BaseModel):
    """Email verification request schema."""

    token: str = Field(
        ...,
        min_length=1,
        description="Verification token from the emailed link"
    )


class ForgotPasswordRequest(BaseModel):
    """Password reset request schema."""

    email: EmailStr = Field(
        ...,
        description="Email address of the account",
        examples=["owner@example.com"]
    )

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v):
        """Normalize email to lowercase."""
        return v.lower().strip()


class ResetPasswordRequest(BaseModel):
    """Password reset confirmation schema."""

    token: str = Field(
        ...,
        min_length=1,
        description="Reset token from the emailed link"
    )
    password: str = Field(
        ...,
        min_length=MIN_PASSWORD_LENGTH,
        max_length=128,
        description=f"New password (minimum {MIN_PASSWORD_LENGTH} characters)"
    )


class AuthResponse(BaseModel):
    """Authenticated user together with a session token."""

    user: UserResponse
    token: str = Field(
        ...,
        description="JWT session token",
        examples=["eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9..."]
    )


class TokenResponse(BaseModel):
    """Session token issued after a password reset."""

    token: str = Field(
        ...,
        description="JWT session token",
        examples=["eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9..."]
    )

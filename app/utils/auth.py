"""
Authentication utilities for JWT token management and password hashing.
Provides session token generation, validation, one-time tokens and role checks.
"""

from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Optional, Dict, Any, Iterable, Union
from jose import JWTError, jwt
from passlib.context import CryptContext
from app.config import settings
import secrets
import uuid


# Password hashing context
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.bcrypt_rounds
)

MIN_PASSWORD_LENGTH = 6


class TokenPayload:
    """JWT token payload structure."""

    def __init__(self, user_id: str, email: str, role: Optional[str], exp: datetime):
        self.user_id = user_id
        self.email = email
        self.role = role
        self.exp = exp

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TokenPayload":
        """Create TokenPayload from dictionary."""
        return cls(
            user_id=data["sub"],
            email=data["email"],
            role=data.get("role"),
            exp=datetime.fromtimestamp(data["exp"], tz=timezone.utc)
        )


def _role_value(role: Union[str, Enum]) -> str:
    return role.value if isinstance(role, Enum) else str(role)


def create_access_token(
    user_id: uuid.UUID,
    email: str,
    role: Union[str, Enum],
    expires_delta: Optional[timedelta] = None
) -> str:
    """
    Create JWT session token with user claims.

    Args:
        user_id: User's UUID
        email: User's email address
        role: User's role
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token string
    """
    now = datetime.now(timezone.utc)
    if expires_delta:
        expire = now + expires_delta
    else:
        expire = now + timedelta(minutes=settings.access_token_expire_minutes)

    to_encode = {
        "sub": str(user_id),  # Subject (user ID)
        "email": email,
        "role": _role_value(role),
        "exp": expire,
        "iat": now,
        "type": "access"
    }

    return jwt.encode(
        to_encode,
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm
    )


def verify_token(token: str, token_type: str = "access") -> TokenPayload:
    """
    Verify and decode JWT token.

    Args:
        token: JWT token string
        token_type: Expected token type

    Returns:
        TokenPayload if valid

    Raises:
        JWTError: If token is invalid or expired
    """
    try:
        # jose validates "exp" and raises ExpiredSignatureError (a JWTError)
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm]
        )

        if payload.get("type") != token_type:
            raise JWTError(f"Invalid token type. Expected {token_type}")

        if not payload.get("sub") or not payload.get("email") or not payload.get("exp"):
            raise JWTError("Invalid token payload")

        return TokenPayload.from_dict(payload)

    except JWTError:
        raise
    except Exception as e:
        raise JWTError(f"Token validation error: {str(e)}")


def hash_password(password: str) -> str:
    """
    Hash password using bcrypt.

    Args:
        password: Plain text password

    Returns:
        Hashed password string

    Raises:
        ValueError: If password is too short
    """
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")

    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify password against hash.

    Args:
        plain_password: Plain text password
        hashed_password: Hashed password from database

    Returns:
        True if password matches, False otherwise
    """
    return pwd_context.verify(plain_password, hashed_password)


def generate_one_time_token() -> str:
    """Random hex token for email verification and password reset links."""
    return secrets.token_hex(32)


def is_allowed(role: Union[str, Enum], allowed_roles: Iterable[Union[str, Enum]]) -> bool:
    """
    Check whether a role belongs to an allowed set.

    Args:
        role: Role of the acting user
        allowed_roles: Roles permitted for the operation

    Returns:
        True if the role is allowed
    """
    return _role_value(role) in {_role_value(r) for r in allowed_roles}

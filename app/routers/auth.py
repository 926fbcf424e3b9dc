"""
Authentication API endpoints for registration, login, email verification and password reset.
"""

from fastapi import APIRouter, Depends, status
from app.models.user import User
from app.services.auth import AuthService
from app.schemas.auth import (
    RegisterRequest,
    LoginRequest,
    VerifyEmailRequest,
    ForgotPasswordRequest,
    ResetPasswordRequest,
    AuthResponse,
    TokenResponse
)
from app.schemas.common import APIResponse
from app.schemas.user import UserResponse
from app.schemas.error import get_error_responses
from app.utils.dependencies import get_auth_service, get_current_user


router = APIRouter(prefix="/auth", tags=["Authentication"])


def _auth_payload(user: User, token: str) -> AuthResponse:
    return AuthResponse(user=UserResponse.model_validate(user.to_dict()), token=token)


@router.post(
    "/register",
    response_model=APIResponse[AuthResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Register a new account",
    description="Create an account (property_seeker by default) and send a verification email.",
    responses=get_error_responses(400, 403, 500)
)
async def register(
    user_data: RegisterRequest,
    auth_service: AuthService = Depends(get_auth_service)
) -> APIResponse[AuthResponse]:
    """
    Register a new user.

    Raises:
        ConflictError: If the email is already registered
        ForbiddenError: If the admin role is requested
    """
    user, token = await auth_service.register(user_data)
    return APIResponse(
        message="User registered successfully. Please check your email to verify your account.",
        data=_auth_payload(user, token)
    )


@router.post(
    "/login",
    response_model=APIResponse[AuthResponse],
    summary="User login",
    description="Authenticate user with email and password, returns a JWT session token.",
    responses=get_error_responses(400, 401, 500)
)
async def login(
    login_data: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service)
) -> APIResponse[AuthResponse]:
    """
    Authenticate user and return a session token.

    Raises:
        InvalidCredentialsError: If credentials are invalid
    """
    user, token = await auth_service.login(
        email=login_data.email,
        password=login_data.password
    )
    return APIResponse(message="Login successful", data=_auth_payload(user, token))


@router.post(
    "/verify-email",
    response_model=APIResponse[UserResponse],
    summary="Verify email address",
    description="Consume the verification token sent at registration.",
    responses=get_error_responses(400, 500)
)
async def verify_email(
    verify_data: VerifyEmailRequest,
    auth_service: AuthService = Depends(get_auth_service)
) -> APIResponse[UserResponse]:
    user = await auth_service.verify_email(verify_data.token)
    return APIResponse(
        message="Email verified successfully",
        data=UserResponse.model_validate(user.to_dict())
    )


@router.post(
    "/forgot-password",
    response_model=APIResponse[None],
    summary="Request a password reset",
    description="Always answers with the same message whether or not the account exists.",
    responses=get_error_responses(400, 500)
)
async def forgot_password(
    request_data: ForgotPasswordRequest,
    auth_service: AuthService = Depends(get_auth_service)
) -> APIResponse[None]:
    await auth_service.forgot_password(request_data.email)
    return APIResponse(
        message="If an account exists with that email, a password reset link has been sent"
    )


@router.post(
    "/reset-password",
    response_model=APIResponse[TokenResponse],
    summary="Reset password",
    description="Set a new password with a reset token and receive a fresh session token.",
    responses=get_error_responses(400, 500)
)
async def reset_password(
    reset_data: ResetPasswordRequest,
    auth_service: AuthService = Depends(get_auth_service)
) -> APIResponse[TokenResponse]:
    token = await auth_service.reset_password(reset_data.token, reset_data.password)
    return APIResponse(
        message="Password reset successful",
        data=TokenResponse(token=token)
    )


@router.get(
    "/me",
    response_model=APIResponse[UserResponse],
    summary="Get current user",
    description="Profile of the authenticated user.",
    responses=get_error_responses(401, 500)
)
async def get_me(
    current_user: User = Depends(get_current_user)
) -> APIResponse[UserResponse]:
    return APIResponse(data=UserResponse.model_validate(current_user.to_dict()))

"""
Auth API endpoints.

Public endpoints for registration, verification, login and password
reset. Errors are raised as AuthAppError subclasses and rendered by
the application's exception handler.
"""

from fastapi import APIRouter, Depends, Query

from api.dependencies import get_auth_service

from .interfaces import IAuthService
from .models import (
    ForgotPasswordRequest,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    ResetPasswordRequest,
    SessionResponse,
    TwoFactorChallenge,
    VerifyTwoFactorRequest,
)

router = APIRouter()


@router.post("/register", response_model=MessageResponse, status_code=201)
async def register(
    request: RegisterRequest,
    service: IAuthService = Depends(get_auth_service),
) -> MessageResponse:
    """Create an account and send a verification email."""
    return await service.register(request)


@router.get("/verify_email", response_model=MessageResponse)
async def verify_email(
    token: str = Query(default="", description="Verification token from the email link"),
    service: IAuthService = Depends(get_auth_service),
) -> MessageResponse:
    """Redeem an email verification link."""
    return await service.verify_email(token)


@router.post("/login", response_model=SessionResponse | TwoFactorChallenge)
async def login(
    request: LoginRequest,
    service: IAuthService = Depends(get_auth_service),
) -> SessionResponse | TwoFactorChallenge:
    """
    Log in with email and password.

    Returns a session token, or `two_factor_required: true` when the
    account has two-factor login enabled and a code has been emailed.
    """
    return await service.login(request)


@router.post("/verify_2fa", response_model=SessionResponse)
async def verify_two_factor(
    request: VerifyTwoFactorRequest,
    service: IAuthService = Depends(get_auth_service),
) -> SessionResponse:
    """Complete a two-factor login with the emailed code."""
    return await service.verify_two_factor(request)


@router.post("/forgot_password", response_model=MessageResponse)
async def forgot_password(
    request: ForgotPasswordRequest,
    service: IAuthService = Depends(get_auth_service),
) -> MessageResponse:
    """Request a password reset email. Always answers the same way."""
    return await service.forgot_password(request.email)


@router.post("/reset_password", response_model=MessageResponse)
async def reset_password(
    request: ResetPasswordRequest,
    service: IAuthService = Depends(get_auth_service),
) -> MessageResponse:
    """Set a new password using a reset token."""
    return await service.reset_password(request)

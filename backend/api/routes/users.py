"""
User-related endpoints.

Provides endpoints for the signed-in user's profile and account settings.
"""

from fastapi import APIRouter, Depends

from modules.auth.interfaces import IAuthService
from modules.auth.models import TwoFactorStatus, UserProfile
from shared.models import AuthenticatedUser

from ..dependencies import get_auth_service
from ..middleware.auth import get_current_user

router = APIRouter()


@router.get("/me", response_model=UserProfile)
async def get_current_user_profile(
    user: AuthenticatedUser = Depends(get_current_user),
    service: IAuthService = Depends(get_auth_service),
) -> UserProfile:
    """
    Get the current user's profile.

    Requires authentication.
    """
    return await service.get_profile(user.id)


@router.post("/toggle_2fa", response_model=TwoFactorStatus)
async def toggle_two_factor(
    user: AuthenticatedUser = Depends(get_current_user),
    service: IAuthService = Depends(get_auth_service),
) -> TwoFactorStatus:
    """Turn emailed two-factor codes on or off for the current user."""
    return await service.toggle_two_factor(user.id)

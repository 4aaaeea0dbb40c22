from typing import Optional

from fastapi import APIRouter, Depends

from ...schemas.user import UserResponse
from ...schemas.auth import GuardDecision, Principal
from ...schemas.result import Result
from ...dependencies import get_current_user, get_optional_principal
from ...core.ui_guard import navigation_for
from app.models.user import User, UserRole

router = APIRouter()


@router.get("/me", response_model=Result[UserResponse])
async def get_current_user_profile(current_user: User = Depends(get_current_user)):
    """
    Get current authenticated user's profile.

    Requires valid access token in Authorization header.

    Returns:
        Result[UserResponse]: Success result with current user data
    """
    return Result.successful(data=UserResponse.model_validate(current_user))


@router.get("/guard", response_model=Result[GuardDecision])
async def check_navigation(
    required_role: Optional[UserRole] = None,
    principal: Optional[Principal] = Depends(get_optional_principal),
):
    """
    Advisory route-guard decision for the client.

    Mirrors the role floor only. Every endpoint still performs its own check,
    so a 'render' outcome here grants nothing.
    """
    return Result.successful(data=navigation_for(principal, required_role))

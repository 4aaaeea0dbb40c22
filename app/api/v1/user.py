from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from ...database import get_db
from ...dependencies import get_current_user, require_role
from app.models.user import User, UserRole
from ...schemas.user import UserResponse, RoleChange, MembershipResponse
from ...schemas.result import Result
from ...services.userService import UserService
from ...core.exception import ResourceNotFoundException

router = APIRouter()


@router.get("/me", response_model=Result[UserResponse])
async def get_my_profile(current_user: User = Depends(get_current_user)):
    """Get current user's profile."""
    return Result.successful(data=UserResponse.model_validate(current_user))


@router.get("/me/membership", response_model=Result[MembershipResponse])
async def get_my_membership(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Get the association the current user belongs to.

    ``association_id`` is null when the user holds no approved application.
    """
    user_service = UserService(db)
    association_id = user_service.get_current_association(current_user.id)
    return Result.successful(
        data=MembershipResponse(user_id=current_user.id, association_id=association_id)
    )


@router.get("", response_model=Result[List[UserResponse]])
async def list_users(
    skip: int = 0,
    limit: int = 100,
    current_user: User = Depends(require_role(UserRole.PLATFORM_ADMIN)),
    db: Session = Depends(get_db),
):
    """List active users (platform admin only)."""
    user_service = UserService(db)
    users = user_service.get_all_users(skip=skip, limit=limit)
    return Result.successful(data=[UserResponse.model_validate(u) for u in users])


@router.get("/{user_id}", response_model=Result[UserResponse])
async def get_user(
    user_id: int,
    current_user: User = Depends(require_role(UserRole.PLATFORM_ADMIN)),
    db: Session = Depends(get_db),
):
    """Get any user by ID (platform admin only)."""
    user_service = UserService(db)
    user = user_service.get_user_by_id(user_id)
    if user is None:
        raise ResourceNotFoundException("User", user_id)
    return Result.successful(data=UserResponse.model_validate(user))


@router.put("/{user_id}/role", response_model=Result[UserResponse])
async def change_user_role(
    user_id: int,
    role_data: RoleChange,
    current_user: User = Depends(require_role(UserRole.PLATFORM_ADMIN)),
    db: Session = Depends(get_db),
):
    """Change a user's platform-wide role (platform admin only)."""
    user_service = UserService(db)
    user = user_service.change_role(user_id, role_data.role)
    return Result.successful(data=UserResponse.model_validate(user))


@router.post("/{user_id}/deactivate", response_model=Result[UserResponse])
async def deactivate_user(
    user_id: int,
    current_user: User = Depends(require_role(UserRole.PLATFORM_ADMIN)),
    db: Session = Depends(get_db),
):
    """Blacklist a user (platform admin only). Their tokens stop working immediately."""
    user_service = UserService(db)
    user = user_service.deactivate_account(user_id)
    return Result.successful(data=UserResponse.model_validate(user))

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from app.database import get_db
from app.dependencies import (
    get_current_user,
    require_role,
    require_association_admin,
    require_association_member,
)
from app.models.user import User, UserRole
from app.schemas.association import (
    AssociationCreate,
    AssociationUpdate,
    AssociationResponse,
    AssociationPublicResponse,
    AdminAppointment,
    AdminAssignmentByEmail,
)
from app.schemas.event import EventResponse
from app.schemas.user import UserSummary
from app.schemas.result import Result
from app.services.association_service import AssociationService

router = APIRouter()


@router.post("", response_model=Result[AssociationResponse], status_code=status.HTTP_201_CREATED)
async def create_association(
    association_data: AssociationCreate,
    current_user: User = Depends(require_role(UserRole.PLATFORM_ADMIN)),
    db: Session = Depends(get_db)
):
    """Create an association (platform admin only)."""
    service = AssociationService(db)
    association = service.create_association(association_data)
    return Result.successful(data=AssociationResponse.model_validate(association))


@router.get("", response_model=Result[List[AssociationResponse]])
async def list_associations(
    skip: int = 0,
    limit: int = 100,
    current_user: User = Depends(require_role(UserRole.PLATFORM_ADMIN)),
    db: Session = Depends(get_db)
):
    """List all associations (platform admin only)."""
    service = AssociationService(db)
    associations = service.list_associations(skip=skip, limit=limit)
    return Result.successful(data=[AssociationResponse.model_validate(a) for a in associations])


@router.get("/{association_id}/public", response_model=Result[AssociationPublicResponse])
async def get_public_association(
    association_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Limited association details for any signed-in user."""
    service = AssociationService(db)
    association = service.get_association(association_id)
    return Result.successful(data=AssociationPublicResponse.model_validate(association))


@router.get("/{association_id}", response_model=Result[AssociationResponse])
async def get_association(
    association_id: int,
    current_user: User = Depends(require_association_member),
    db: Session = Depends(get_db)
):
    """Full association details (members only)."""
    service = AssociationService(db)
    association = service.get_association(association_id)
    return Result.successful(data=AssociationResponse.model_validate(association))


@router.get("/{association_id}/events", response_model=Result[List[EventResponse]])
async def get_association_events(
    association_id: int,
    current_user: User = Depends(require_association_member),
    db: Session = Depends(get_db)
):
    """Upcoming events of an association (members only)."""
    service = AssociationService(db)
    events = service.get_upcoming_events(association_id)
    return Result.successful(data=[EventResponse.model_validate(e) for e in events])


@router.get("/{association_id}/members", response_model=Result[List[UserSummary]])
async def get_members(
    association_id: int,
    current_user: User = Depends(require_association_admin),
    db: Session = Depends(get_db)
):
    """Members with an approved application (admins only)."""
    service = AssociationService(db)
    members = service.get_members(association_id)
    return Result.successful(data=[UserSummary.model_validate(m) for m in members])


@router.put("/{association_id}", response_model=Result[AssociationResponse])
async def update_association(
    association_id: int,
    association_data: AssociationUpdate,
    current_user: User = Depends(require_association_admin),
    db: Session = Depends(get_db)
):
    """Update association details (admins only)."""
    service = AssociationService(db)
    association = service.update_association(association_id, association_data)
    return Result.successful(data=AssociationResponse.model_validate(association))


@router.post("/{association_id}/deactivate", response_model=Result[AssociationResponse])
async def deactivate_association(
    association_id: int,
    current_user: User = Depends(require_role(UserRole.PLATFORM_ADMIN)),
    db: Session = Depends(get_db)
):
    """Deactivate an association (platform admin only)."""
    service = AssociationService(db)
    association = service.deactivate_association(association_id)
    return Result.successful(data=AssociationResponse.model_validate(association))


@router.get("/{association_id}/admins", response_model=Result[List[UserSummary]])
async def get_admins(
    association_id: int,
    current_user: User = Depends(require_association_admin),
    db: Session = Depends(get_db)
):
    """Appointed admins (admins only)."""
    service = AssociationService(db)
    admins = service.get_admins(association_id)
    return Result.successful(data=[UserSummary.model_validate(a) for a in admins])


@router.post("/{association_id}/admins", response_model=Result[AssociationResponse])
async def add_admin(
    association_id: int,
    appointment: AdminAppointment,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Appoint an admin (owner or platform admin only)."""
    service = AssociationService(db)
    association = service.add_admin(association_id, current_user, appointment.user_id)
    return Result.successful(data=AssociationResponse.model_validate(association))


@router.post("/{association_id}/admins/by-email", response_model=Result[AssociationResponse])
async def assign_admin_by_email(
    association_id: int,
    assignment: AdminAssignmentByEmail,
    current_user: User = Depends(require_role(UserRole.PLATFORM_ADMIN)),
    db: Session = Depends(get_db)
):
    """Appoint an admin by email (platform admin only)."""
    service = AssociationService(db)
    association = service.assign_admin_by_email(association_id, current_user, assignment.admin_email)
    return Result.successful(data=AssociationResponse.model_validate(association))


@router.delete("/{association_id}/admins/{user_id}", response_model=Result[AssociationResponse])
async def remove_admin(
    association_id: int,
    user_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Revoke an admin appointment (owner or platform admin only)."""
    service = AssociationService(db)
    association = service.remove_admin(association_id, current_user, user_id)
    return Result.successful(data=AssociationResponse.model_validate(association))

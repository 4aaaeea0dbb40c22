from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List, Optional

from app.database import get_db
from app.dependencies import get_current_user, require_association_admin
from app.models.application import ApplicationStatus
from app.models.user import User
from app.schemas.application import ApplicationCreate, ApplicationInvite, ApplicationResponse
from app.schemas.result import Result
from app.services.application_service import ApplicationService, ApplicationAction

router = APIRouter()


@router.post("", response_model=Result[ApplicationResponse], status_code=status.HTTP_201_CREATED)
async def apply(
    application_data: ApplicationCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Apply to join an association."""
    service = ApplicationService(db)
    application = service.apply(
        current_user.id, application_data.association_id, application_data.motivation
    )
    return Result.successful(data=ApplicationResponse.model_validate(application))


@router.get("/mine", response_model=Result[List[ApplicationResponse]])
async def get_my_applications(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get the current user's applications, newest first."""
    service = ApplicationService(db)
    applications = service.get_user_applications(current_user.id)
    return Result.successful(data=[ApplicationResponse.model_validate(a) for a in applications])


@router.get("/association/{association_id}", response_model=Result[List[ApplicationResponse]])
async def get_association_applications(
    association_id: int,
    application_status: Optional[ApplicationStatus] = None,
    current_user: User = Depends(require_association_admin),
    db: Session = Depends(get_db)
):
    """List applications to an association (admins only)."""
    service = ApplicationService(db)
    applications = service.get_association_applications(
        association_id, current_user.id, application_status
    )
    return Result.successful(data=[ApplicationResponse.model_validate(a) for a in applications])


@router.post("/invite", response_model=Result[ApplicationResponse], status_code=status.HTTP_201_CREATED)
async def invite(
    invite_data: ApplicationInvite,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Invite a user into an association (admins only)."""
    service = ApplicationService(db)
    application = service.invite(current_user.id, invite_data.association_id, invite_data.user_id)
    return Result.successful(data=ApplicationResponse.model_validate(application))


@router.get("/{application_id}", response_model=Result[ApplicationResponse])
async def get_application(
    application_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get one application (applicant or association admins)."""
    service = ApplicationService(db)
    application = service.get_application(application_id, current_user.id)
    return Result.successful(data=ApplicationResponse.model_validate(application))


@router.post("/{application_id}/{action}", response_model=Result[ApplicationResponse])
async def transition_application(
    application_id: int,
    action: ApplicationAction,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Move an application through its lifecycle.

    - **review**, **approve**, **reject**, **kick**: association admins
    - **withdraw**, **accept**: the applicant
    """
    service = ApplicationService(db)
    application = service.transition_application(application_id, action, current_user.id)
    return Result.successful(data=ApplicationResponse.model_validate(application))

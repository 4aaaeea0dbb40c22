from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from app.database import get_db
from app.dependencies import (
    enforce,
    get_current_user,
    require_event_attendee,
    require_event_manager,
)
from app.models.user import User
from app.schemas.event import (
    EventCreate,
    EventUpdate,
    EventResponse,
    EventDetailResponse,
    RSVPCreate,
    RSVPResponse,
    CheckinCreate,
    CheckinResponse,
)
from app.schemas.result import Result
from app.services.authorization_service import AuthorizationService
from app.services.event_service import EventService

router = APIRouter()


@router.post("", response_model=Result[EventResponse], status_code=status.HTTP_201_CREATED)
async def create_event(
    event_data: EventCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Create an event (admins of the association only)."""
    enforce(
        AuthorizationService(db).is_admin_of_association(current_user.id, event_data.association_id),
        "Only association admins can create events",
    )
    service = EventService(db)
    event = service.create_event(event_data)
    return Result.successful(data=EventResponse.model_validate(event))


@router.get("/{event_id}", response_model=Result[EventDetailResponse])
async def get_event(
    event_id: int,
    current_user: User = Depends(require_event_attendee),
    db: Session = Depends(get_db)
):
    """Get event details with the caller's own RSVP (members only)."""
    service = EventService(db)
    event = service.get_event(event_id)
    detail = EventDetailResponse.model_validate(event)
    rsvp = service.get_user_rsvp(event_id, current_user.id)
    if rsvp is not None:
        detail.user_rsvp = RSVPResponse.model_validate(rsvp)
    return Result.successful(data=detail)


@router.put("/{event_id}", response_model=Result[EventResponse])
async def update_event(
    event_id: int,
    event_data: EventUpdate,
    current_user: User = Depends(require_event_manager),
    db: Session = Depends(get_db)
):
    """Update an event (association admins only)."""
    service = EventService(db)
    event = service.update_event(event_id, event_data)
    return Result.successful(data=EventResponse.model_validate(event))


@router.delete("/{event_id}", response_model=Result[dict])
async def delete_event(
    event_id: int,
    current_user: User = Depends(require_event_manager),
    db: Session = Depends(get_db)
):
    """Delete an event (association admins only)."""
    service = EventService(db)
    service.delete_event(event_id)
    return Result.successful(data={"message": "Event deleted successfully"})


@router.put("/{event_id}/rsvp", response_model=Result[RSVPResponse])
async def respond_to_event(
    event_id: int,
    rsvp_data: RSVPCreate,
    current_user: User = Depends(require_event_attendee),
    db: Session = Depends(get_db)
):
    """Create or update the caller's RSVP (members only)."""
    service = EventService(db)
    rsvp = service.respond(event_id, current_user.id, rsvp_data)
    return Result.successful(data=RSVPResponse.model_validate(rsvp))


@router.get("/{event_id}/rsvps", response_model=Result[List[RSVPResponse]])
async def get_rsvps(
    event_id: int,
    current_user: User = Depends(require_event_manager),
    db: Session = Depends(get_db)
):
    """All RSVPs for an event (association admins only)."""
    service = EventService(db)
    rsvps = service.get_rsvps(event_id)
    return Result.successful(data=[RSVPResponse.model_validate(r) for r in rsvps])


@router.post("/{event_id}/checkins", response_model=Result[CheckinResponse])
async def check_in(
    event_id: int,
    checkin_data: CheckinCreate,
    current_user: User = Depends(require_event_manager),
    db: Session = Depends(get_db)
):
    """Check a member in (association admins only)."""
    service = EventService(db)
    checkin = service.check_in(event_id, current_user.id, checkin_data)
    return Result.successful(data=CheckinResponse.model_validate(checkin))

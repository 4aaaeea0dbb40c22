from sqlalchemy.orm import Session
from typing import List
from app.models.event import Event
from app.models.rsvp import RSVP, Checkin
from app.repositories.association_repository import AssociationRepository
from app.repositories.event_repository import EventRepository
from app.repositories.rsvp_repository import RSVPRepository
from app.services.authorization_service import AuthorizationService
from app.schemas.event import EventCreate, EventUpdate, RSVPCreate, CheckinCreate
from app.core.exception import AuthorizationException, ResourceNotFoundException


class EventService:
    """Service layer for events, RSVPs and check-ins."""

    def __init__(self, db: Session):
        self.db = db
        self.event_repo = EventRepository(db)
        self.association_repo = AssociationRepository(db)
        self.rsvp_repo = RSVPRepository(db)
        self.authorization = AuthorizationService(db)

    def create_event(self, data: EventCreate) -> Event:
        """
        Create an event for an association.

        Raises:
            ResourceNotFoundException: If the association does not exist
        """
        if not self.association_repo.exists(data.association_id):
            raise ResourceNotFoundException("Association", data.association_id)

        event = Event(**data.model_dump())
        return self.event_repo.create(event)

    def get_event(self, event_id: int) -> Event:
        """
        Get event by ID.

        Raises:
            ResourceNotFoundException: If event not found
        """
        event = self.event_repo.get(event_id)
        if not event:
            raise ResourceNotFoundException("Event", event_id)
        return event

    def update_event(self, event_id: int, data: EventUpdate) -> Event:
        self.get_event(event_id)

        # Only provided fields; the owning association is immutable
        update_data = data.model_dump(exclude_unset=True)
        updated = self.event_repo.update(event_id, update_data)
        if not updated:
            raise ResourceNotFoundException("Event", event_id)
        return updated

    def delete_event(self, event_id: int) -> bool:
        if not self.event_repo.delete(event_id):
            raise ResourceNotFoundException("Event", event_id)
        return True

    def get_user_rsvp(self, event_id: int, user_id: int):
        return self.rsvp_repo.find(event_id, user_id)

    def respond(self, event_id: int, user_id: int, data: RSVPCreate) -> RSVP:
        """Create or update the user's RSVP."""
        self.get_event(event_id)
        return self.rsvp_repo.upsert(event_id, user_id, data.model_dump())

    def get_rsvps(self, event_id: int) -> List[RSVP]:
        self.get_event(event_id)
        return self.rsvp_repo.get_event_rsvps(event_id)

    def check_in(self, event_id: int, admin_id: int, data: CheckinCreate) -> Checkin:
        """
        Check a member in at the door.

        Raises:
            ResourceNotFoundException: If event not found
            AuthorizationException: If the subject user cannot attend the event
        """
        self.get_event(event_id)

        # The person being checked in must be a member, not just the admin
        if not self.authorization.can_attend_event(data.user_id, event_id):
            raise AuthorizationException(message="This user is not a member of the association")

        return self.rsvp_repo.upsert_checkin(event_id, data.user_id, admin_id, data.notes)

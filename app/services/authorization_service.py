from sqlalchemy.orm import Session
from typing import Optional
from app.repositories.event_repository import EventRepository
from app.services.admin_authority_service import AdminAuthorityService
from app.services.membership_service import MembershipService
from app.core.exception import ResourceNotFoundException


class AuthorizationService:
    """
    Entry point for every resource-scoped permission question.

    Event-scoped checks are reduced to association-scoped ones through
    ``owner_association_of``.
    """

    def __init__(self, db: Session):
        self.db = db
        self.event_repo = EventRepository(db)
        self.admin_authority = AdminAuthorityService(db)
        self.membership = MembershipService(db)

    def is_admin_of_association(self, user_id: Optional[int], association_id: int) -> bool:
        return self.admin_authority.is_admin_of_association(user_id, association_id)

    def is_member(self, user_id: Optional[int], association_id: int) -> bool:
        return self.membership.is_member(user_id, association_id)

    def current_association(self, user_id: Optional[int]) -> Optional[int]:
        return self.membership.current_association(user_id)

    def owner_association_of(self, event_id: int) -> int:
        """
        Look up the association that owns an event.

        Raises:
            ResourceNotFoundException: If the event does not exist
        """
        association_id = self.event_repo.get_association_id(event_id)
        if association_id is None:
            raise ResourceNotFoundException("Event", event_id)
        return association_id

    def can_manage_event(self, user_id: Optional[int], event_id: int) -> bool:
        """Admins of the owning association may manage an event."""
        if user_id is None:
            return False
        try:
            association_id = self.owner_association_of(event_id)
        except ResourceNotFoundException:
            return False
        return self.is_admin_of_association(user_id, association_id)

    def can_attend_event(self, user_id: Optional[int], event_id: int) -> bool:
        """Members of the owning association may attend an event."""
        if user_id is None:
            return False
        try:
            association_id = self.owner_association_of(event_id)
        except ResourceNotFoundException:
            return False
        return self.is_member(user_id, association_id)

from sqlalchemy.orm import Session
from typing import Optional
from app.config import settings
from app.repositories.application_repository import ApplicationRepository
from app.repositories.association_repository import AssociationRepository
from app.services.admin_authority_service import AdminAuthorityService


class MembershipService:
    """
    Resolves a user's current association from their application history.

    Nothing is cached: each call reads the latest committed rows, so a kick
    or withdrawal is visible on the very next check.
    """

    def __init__(self, db: Session):
        self.db = db
        self.application_repo = ApplicationRepository(db)
        self.association_repo = AssociationRepository(db)
        self.admin_authority = AdminAuthorityService(db)

    def current_association(self, user_id: Optional[int]) -> Optional[int]:
        """
        Get the association the user currently belongs to.

        Args:
            user_id: User ID

        Returns:
            Association ID of the latest approved application, or None
        """
        if user_id is None:
            return None

        application = self.application_repo.find_latest_approved(user_id)
        if application is None:
            return None

        if settings.ENFORCE_ASSOCIATION_DEACTIVATION and not application.association.is_active:
            return None

        return application.association_id

    def is_member(self, user_id: Optional[int], association_id: Optional[int]) -> bool:
        """
        Check membership of one association.

        Owners and admins count as members even without an approved
        application.
        """
        if user_id is None or association_id is None:
            return False

        # Admins are members too
        if self.admin_authority.is_admin_of_association(user_id, association_id):
            return True

        return self.current_association(user_id) == association_id

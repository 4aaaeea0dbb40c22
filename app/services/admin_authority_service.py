from sqlalchemy.orm import Session
from typing import Optional
from app.config import settings
from app.models.user import UserRole
from app.repositories.association_repository import AssociationRepository
from app.repositories.userRepository import UserRepository


class AdminAuthorityService:
    """
    Decides whether a user administers a specific association.

    Read-only. A negative answer is returned as False, never raised.
    """

    def __init__(self, db: Session):
        self.db = db
        self.user_repo = UserRepository(db)
        self.association_repo = AssociationRepository(db)

    def is_admin_of_association(
        self, user_id: Optional[int], association_id: Optional[int]
    ) -> bool:
        """
        Check admin authority over one association.

        Decision order:
            1. Platform admins pass, whether or not the association exists.
            2. Otherwise the user must be the owner or in the admin set.
            3. A missing association (or, with deactivation enforced, an
               inactive one) yields False.

        Args:
            user_id: Acting user, None if unauthenticated
            association_id: Target association

        Returns:
            True if the user may administer the association
        """
        if user_id is None:
            return False

        if self.user_repo.get_role(user_id) == UserRole.PLATFORM_ADMIN:
            return True

        if association_id is None:
            return False

        if not self.association_repo.is_owner_or_admin(association_id, user_id):
            return False

        if settings.ENFORCE_ASSOCIATION_DEACTIVATION:
            association = self.association_repo.get(association_id)
            return association is not None and association.is_active

        return True

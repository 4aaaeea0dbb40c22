import logging
from sqlalchemy.orm import Session
from typing import Optional
from app.models.user import User, UserRole
from ..repositories.userRepository import UserRepository
from ..services.membership_service import MembershipService
from ..core.exception import ResourceNotFoundException

logger = logging.getLogger(__name__)


class UserService:
    """Service layer for user operations."""

    def __init__(self, db: Session):
        self.db = db
        self.user_repo = UserRepository(db)
        self.membership = MembershipService(db)

    def get_user_by_id(self, user_id: int) -> Optional[User]:
        """Get user by ID."""
        return self.user_repo.get(user_id)

    def get_current_association(self, user_id: int) -> Optional[int]:
        """Association the user currently belongs to, if any."""
        return self.membership.current_association(user_id)

    def change_role(self, user_id: int, role: UserRole) -> User:
        """Set a user's platform-wide role (platform admin only)."""
        user = self.user_repo.set_role(user_id, role)
        if not user:
            raise ResourceNotFoundException("User", user_id)
        logger.info("User %s role set to %s", user_id, role.value)
        return user

    def deactivate_account(self, user_id: int) -> User:
        """Deactivate (blacklist) a user account."""
        user = self.user_repo.deactivate_user(user_id)
        if not user:
            raise ResourceNotFoundException("User", user_id)
        logger.info("User %s deactivated", user_id)
        return user

    def get_all_users(self, skip: int = 0, limit: int = 100):
        """Get all active users (admin only)."""
        return self.user_repo.get_active_users(skip=skip, limit=limit)

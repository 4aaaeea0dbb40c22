from sqlalchemy.orm import Session
from sqlalchemy import select
from typing import Optional
from app.models.user import User, UserRole
from ..repositories.repository import BaseRepository


class UserRepository(BaseRepository[User]):
    """Repository for User operations."""

    def __init__(self, db: Session):
        super().__init__(User, db)

    def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email."""
        return self.db.query(User).filter(User.email == email).first()

    def get_role(self, user_id: int) -> Optional[UserRole]:
        """Fetch only the role column for a user."""
        return (
            self.db.query(User.role)
            .filter(User.id == user_id)
            .scalar()
        )

    def get_active_users(self, skip: int = 0, limit: int = 100):
        """Get all active users."""
        stmt = select(User).where(User.is_active.is_(True)).order_by(User.id)
        return self.paginate(stmt, skip=skip, limit=limit)

    def set_role(self, user_id: int, role: UserRole) -> Optional[User]:
        """Change a user's platform-wide role."""
        return self.update(user_id, {"role": role})

    def deactivate_user(self, user_id: int) -> Optional[User]:
        """Deactivate (blacklist) a user account."""
        return self.update(user_id, {"is_active": False})

    def activate_user(self, user_id: int) -> Optional[User]:
        """Activate a user account."""
        return self.update(user_id, {"is_active": True})

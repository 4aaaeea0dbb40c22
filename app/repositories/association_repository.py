from sqlalchemy.orm import Session
from sqlalchemy import select, and_, or_, exists, insert, delete, func
from typing import List, Optional
from app.models.association import Association
from app.models.application import Application, ApplicationStatus
from app.models.user import User
from app.models.associations import association_admins
from app.repositories.repository import BaseRepository


class AssociationRepository(BaseRepository[Association]):
    """Repository for association operations."""

    def __init__(self, db: Session):
        super().__init__(Association, db)

    def list_associations(self, skip: int = 0, limit: int = 100) -> List[Association]:
        stmt = select(Association).order_by(Association.created_at.desc(), Association.id.desc())
        return self.paginate(stmt, skip=skip, limit=limit)

    def is_owner_or_admin(self, association_id: int, user_id: int) -> bool:
        """
        Check if a user owns or administers an association.

        Returns False when the association does not exist.
        """
        admin_link = exists().where(
            and_(
                association_admins.c.association_id == Association.id,
                association_admins.c.user_id == user_id
            )
        )
        stmt = select(Association.id).where(
            and_(
                Association.id == association_id,
                or_(Association.owner_id == user_id, admin_link)
            )
        )
        return self.db.execute(stmt).first() is not None

    def is_admin(self, association_id: int, user_id: int) -> bool:
        """Check if a user is in the appointed admin set."""
        stmt = select(association_admins).where(
            and_(
                association_admins.c.association_id == association_id,
                association_admins.c.user_id == user_id
            )
        )
        return self.db.execute(stmt).first() is not None

    def add_admin(self, association_id: int, user_id: int) -> bool:
        """
        Add a user to an association's admin set.

        Returns:
            True if added, False if already an admin
        """
        if self.is_admin(association_id, user_id):
            return False

        stmt = insert(association_admins).values(
            user_id=user_id,
            association_id=association_id
        )
        self.db.execute(stmt)
        self.db.commit()
        return True

    def remove_admin(self, association_id: int, user_id: int) -> bool:
        """
        Remove a user from an association's admin set.

        Returns:
            True if removed, False if not an admin
        """
        if not self.is_admin(association_id, user_id):
            return False

        stmt = delete(association_admins).where(
            and_(
                association_admins.c.association_id == association_id,
                association_admins.c.user_id == user_id
            )
        )
        self.db.execute(stmt)
        self.db.commit()
        return True

    def administers_any(self, user_id: int) -> bool:
        """Check if a user owns or administers at least one association."""
        owns = select(Association.id).where(Association.owner_id == user_id)
        if self.db.execute(owns).first() is not None:
            return True
        admin_of = select(association_admins).where(association_admins.c.user_id == user_id)
        return self.db.execute(admin_of).first() is not None

    def get_admins(self, association_id: int) -> List[User]:
        stmt = (
            select(User)
            .join(association_admins, User.id == association_admins.c.user_id)
            .where(association_admins.c.association_id == association_id)
            .order_by(association_admins.c.granted_at)
        )
        return list(self.db.execute(stmt).scalars().all())

    def get_members(self, association_id: int) -> List[User]:
        """Users holding an approved application to the association."""
        stmt = (
            select(User)
            .join(Application, Application.user_id == User.id)
            .where(
                and_(
                    Application.association_id == association_id,
                    Application.status == ApplicationStatus.APPROVED,
                    Application.approved.is_(True)
                )
            )
            .order_by(Application.updated_at)
        )
        return list(self.db.execute(stmt).scalars().all())

    def get_member_count(self, association_id: int) -> int:
        stmt = select(func.count(Application.id)).where(
            and_(
                Application.association_id == association_id,
                Application.status == ApplicationStatus.APPROVED
            )
        )
        return self.db.execute(stmt).scalar_one()

    def set_active(self, association_id: int, is_active: bool) -> Optional[Association]:
        return self.update(association_id, {"is_active": is_active})

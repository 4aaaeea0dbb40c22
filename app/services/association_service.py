import logging
from datetime import datetime, timezone
from sqlalchemy.orm import Session
from typing import List, Optional
from app.config import settings
from app.models.association import Association
from app.models.event import Event
from app.models.user import User, UserRole
from app.repositories.association_repository import AssociationRepository
from app.repositories.event_repository import EventRepository
from app.repositories.userRepository import UserRepository
from app.schemas.association import AssociationCreate, AssociationUpdate
from app.core.roles import is_platform_admin
from app.core.exception import (
    AuthorizationException,
    BadRequestException,
    ResourceNotFoundException,
)

logger = logging.getLogger(__name__)


class AssociationService:
    """
    Service layer for associations and their admin sets.

    Callers are expected to have passed the API-boundary guard for
    member/admin access already; only the owner-specific rules for
    admin appointment are checked here.
    """

    def __init__(self, db: Session):
        self.db = db
        self.association_repo = AssociationRepository(db)
        self.user_repo = UserRepository(db)
        self.event_repo = EventRepository(db)

    def create_association(self, data: AssociationCreate) -> Association:
        """
        Create an association owned by ``data.owner_id``.

        The owner joins the admin set and is promoted to ASSOCIATION_ADMIN.

        Raises:
            ResourceNotFoundException: If the owner does not exist
        """
        owner = self.user_repo.get(data.owner_id)
        if not owner:
            raise ResourceNotFoundException("User", data.owner_id)

        association = Association(
            name=data.name,
            location=data.location,
            max_population=data.max_population or settings.DEFAULT_MAX_POPULATION,
            owner_id=owner.id,
            is_active=True
        )
        association = self.association_repo.create(association)

        self.association_repo.add_admin(association.id, owner.id)
        self._grant_admin_role(owner)
        self.db.refresh(association)

        logger.info("Association %s created with owner %s", association.id, owner.id)
        return association

    def list_associations(self, skip: int = 0, limit: int = 100) -> List[Association]:
        return self.association_repo.list_associations(skip=skip, limit=limit)

    def get_association(self, association_id: int) -> Association:
        """
        Get association by ID.

        Raises:
            ResourceNotFoundException: If association not found
        """
        association = self.association_repo.get(association_id)
        if not association:
            raise ResourceNotFoundException("Association", association_id)
        return association

    def get_upcoming_events(self, association_id: int) -> List[Event]:
        self.get_association(association_id)
        return self.event_repo.get_association_events(
            association_id, upcoming_after=datetime.now(timezone.utc)
        )

    def get_members(self, association_id: int) -> List[User]:
        self.get_association(association_id)
        return self.association_repo.get_members(association_id)

    def get_admins(self, association_id: int) -> List[User]:
        self.get_association(association_id)
        return self.association_repo.get_admins(association_id)

    def update_association(self, association_id: int, data: AssociationUpdate) -> Association:
        """
        Update association details.

        Raises:
            ResourceNotFoundException: If association not found
        """
        self.get_association(association_id)

        update_data = data.model_dump(exclude_unset=True)
        updated = self.association_repo.update(association_id, update_data)
        if not updated:
            raise ResourceNotFoundException("Association", association_id)
        return updated

    def deactivate_association(self, association_id: int) -> Association:
        """Deactivate an association (platform admin only)."""
        self.get_association(association_id)
        association = self.association_repo.set_active(association_id, False)
        logger.info("Association %s deactivated", association_id)
        return association

    def add_admin(self, association_id: int, actor: User, user_id: int) -> Association:
        """
        Appoint an admin.

        Only the owner or a platform admin may appoint admins.

        Raises:
            ResourceNotFoundException: If association or user not found
            AuthorizationException: If the actor is neither owner nor platform admin,
                or owns an association that has been deactivated
        """
        association = self.get_association(association_id)
        self._ensure_owner_or_platform_admin(association, actor, "add admins")

        user = self.user_repo.get(user_id)
        if not user:
            raise ResourceNotFoundException("User", user_id)

        self.association_repo.add_admin(association_id, user.id)
        self._grant_admin_role(user)
        self.db.refresh(association)

        logger.info("User %s appointed admin of association %s by %s", user.id, association_id, actor.id)
        return association

    def assign_admin_by_email(self, association_id: int, actor: User, email: str) -> Association:
        """
        Appoint an admin identified by email (platform admin only).

        Raises:
            ResourceNotFoundException: If association or user not found
        """
        user = self.user_repo.get_by_email(email)
        if not user:
            raise ResourceNotFoundException("User", email, field="email")
        return self.add_admin(association_id, actor, user.id)

    def remove_admin(self, association_id: int, actor: User, user_id: int) -> Association:
        """
        Revoke an admin appointment.

        The owner cannot be removed. A user left administering nothing drops
        back to the USER role.

        Raises:
            ResourceNotFoundException: If association not found
            AuthorizationException: If the actor is neither owner nor platform admin
            BadRequestException: If the target is the owner or not an admin
        """
        association = self.get_association(association_id)
        self._ensure_owner_or_platform_admin(association, actor, "remove admins")

        if user_id == association.owner_id:
            raise BadRequestException("The association owner cannot be removed as admin")

        if not self.association_repo.remove_admin(association_id, user_id):
            raise BadRequestException("User is not an admin of this association")

        user = self.user_repo.get(user_id)
        if (
            user
            and user.role == UserRole.ASSOCIATION_ADMIN
            and not self.association_repo.administers_any(user.id)
        ):
            self.user_repo.set_role(user.id, UserRole.USER)

        self.db.refresh(association)
        logger.info("User %s removed as admin of association %s by %s", user_id, association_id, actor.id)
        return association

    def _ensure_owner_or_platform_admin(self, association: Association, actor: User, action: str) -> None:
        if is_platform_admin(actor):
            return
        if association.owner_id != actor.id:
            raise AuthorizationException(
                message=f"Only association owners or platform admins can {action}"
            )
        if settings.ENFORCE_ASSOCIATION_DEACTIVATION and not association.is_active:
            raise AuthorizationException(
                message=f"Owners of a deactivated association cannot {action}"
            )

    def _grant_admin_role(self, user: User) -> Optional[User]:
        if user.role == UserRole.USER:
            logger.info("Promoting user %s to %s", user.id, UserRole.ASSOCIATION_ADMIN.value)
            return self.user_repo.set_role(user.id, UserRole.ASSOCIATION_ADMIN)
        return user

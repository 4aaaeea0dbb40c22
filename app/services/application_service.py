import enum
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.config import settings
from app.models.application import (
    Application,
    ApplicationStatus,
    OPEN_STATUSES,
)
from app.models.user import UserRole
from app.repositories.application_repository import ApplicationRepository
from app.repositories.association_repository import AssociationRepository
from app.repositories.userRepository import UserRepository
from app.services.admin_authority_service import AdminAuthorityService
from app.core.exception import (
    AuthorizationException,
    BadRequestException,
    MembershipConflictException,
    InvalidTransitionException,
    ResourceNotFoundException,
)

logger = logging.getLogger(__name__)


class ApplicationAction(str, enum.Enum):
    REVIEW = "review"
    APPROVE = "approve"
    REJECT = "reject"
    KICK = "kick"
    WITHDRAW = "withdraw"
    ACCEPT = "accept"


class Authority(str, enum.Enum):
    ASSOCIATION_ADMIN = "association_admin"
    APPLICANT = "applicant"


@dataclass(frozen=True)
class Transition:
    sources: Tuple[ApplicationStatus, ...]
    target: ApplicationStatus
    authority: Authority
    # True/False writes the approved flag, None leaves it alone
    approved: Optional[bool] = None


TRANSITIONS: Dict[ApplicationAction, Transition] = {
    ApplicationAction.REVIEW: Transition(
        (ApplicationStatus.NEW,),
        ApplicationStatus.UNDER_REVIEW,
        Authority.ASSOCIATION_ADMIN,
    ),
    ApplicationAction.APPROVE: Transition(
        (ApplicationStatus.NEW, ApplicationStatus.UNDER_REVIEW),
        ApplicationStatus.APPROVED,
        Authority.ASSOCIATION_ADMIN,
        approved=True,
    ),
    ApplicationAction.REJECT: Transition(
        (ApplicationStatus.NEW, ApplicationStatus.UNDER_REVIEW),
        ApplicationStatus.REJECTED,
        Authority.ASSOCIATION_ADMIN,
    ),
    ApplicationAction.KICK: Transition(
        (ApplicationStatus.APPROVED,),
        ApplicationStatus.KICKED,
        Authority.ASSOCIATION_ADMIN,
        approved=False,
    ),
    ApplicationAction.WITHDRAW: Transition(
        (ApplicationStatus.NEW, ApplicationStatus.UNDER_REVIEW, ApplicationStatus.INVITED),
        ApplicationStatus.SELFIMMOLATE,
        Authority.APPLICANT,
    ),
    ApplicationAction.ACCEPT: Transition(
        (ApplicationStatus.INVITED,),
        ApplicationStatus.APPROVED,
        Authority.APPLICANT,
        approved=True,
    ),
}

# Statuses that block a fresh application to the same association
BLOCKING_STATUSES = OPEN_STATUSES + (
    ApplicationStatus.APPROVED,
    ApplicationStatus.KICKED,
)


class ApplicationService:
    """Service layer for the membership application lifecycle."""

    def __init__(self, db: Session):
        self.db = db
        self.application_repo = ApplicationRepository(db)
        self.association_repo = AssociationRepository(db)
        self.user_repo = UserRepository(db)
        self.admin_authority = AdminAuthorityService(db)

    def apply(self, user_id: int, association_id: int, motivation: Optional[str] = None) -> Application:
        """
        Submit a new application.

        Args:
            user_id: Applying user
            association_id: Target association
            motivation: Optional free text for the reviewers

        Returns:
            The NEW application

        Raises:
            ResourceNotFoundException: If the association does not exist
            BadRequestException: If the association is deactivated
            MembershipConflictException: If an earlier application still blocks this one
        """
        self._ensure_open_association(association_id)
        self._ensure_can_create(user_id, association_id)

        application = Application(
            user_id=user_id,
            association_id=association_id,
            status=ApplicationStatus.NEW,
            approved=False,
            motivation=motivation
        )
        application = self._insert(application)
        logger.info(
            "User %s applied to association %s (application %s)",
            user_id, association_id, application.id
        )
        return application

    def invite(self, actor_id: int, association_id: int, user_id: int) -> Application:
        """
        Invite a user into an association (admin only).

        Creates an INVITED application the invitee can accept or withdraw.

        Raises:
            ResourceNotFoundException: If the association or user does not exist
            AuthorizationException: If the actor does not administer the association
            MembershipConflictException: If an earlier application still blocks this one
        """
        self._ensure_open_association(association_id)

        if not self.admin_authority.is_admin_of_association(actor_id, association_id):
            raise AuthorizationException(message="Only association admins can invite users")

        if self.user_repo.get(user_id) is None:
            raise ResourceNotFoundException("User", user_id)

        self._ensure_can_create(user_id, association_id)

        application = self._insert(Application(
            user_id=user_id,
            association_id=association_id,
            status=ApplicationStatus.INVITED,
            approved=False
        ))
        logger.info(
            "User %s invited user %s to association %s", actor_id, user_id, association_id
        )
        return application

    def transition_application(
        self, application_id: int, action: ApplicationAction, actor_id: int
    ) -> Application:
        """
        Apply a lifecycle action to an application.

        Args:
            application_id: Application to move
            action: Requested action
            actor_id: User performing the action

        Returns:
            The updated application

        Raises:
            ResourceNotFoundException: If the application does not exist
            AuthorizationException: If the actor lacks authority for the action
            InvalidTransitionException: If the current status does not allow the action
            MembershipConflictException: If approval would give the user a second membership
        """
        action = ApplicationAction(action)
        transition = TRANSITIONS[action]

        application = self.application_repo.get(application_id)
        if not application:
            raise ResourceNotFoundException("Application", application_id)

        self._check_authority(application, transition, action, actor_id)

        if application.status not in transition.sources:
            raise InvalidTransitionException(application.status.value, action.value)

        if transition.target == ApplicationStatus.APPROVED:
            self._ensure_not_member_elsewhere(application)

        try:
            moved = self.application_repo.update_status(
                application.id,
                transition.sources,
                transition.target,
                actor_id,
                approved=transition.approved,
            )
            if not moved:
                self.db.rollback()
                self.db.refresh(application)
                raise InvalidTransitionException(application.status.value, action.value)
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise MembershipConflictException("User is already a member of an association")

        self.db.refresh(application)

        if transition.approved is not None:
            self._sync_population(application.association_id)

        logger.info(
            "Application %s moved to %s by user %s (%s)",
            application.id, application.status.value, actor_id, action.value
        )
        return application

    def get_application(self, application_id: int, user_id: int) -> Application:
        """
        Get one application, visible to the applicant and association admins.

        Raises:
            ResourceNotFoundException: If not found
            AuthorizationException: If the user may not see it
        """
        application = self.application_repo.get(application_id)
        if not application:
            raise ResourceNotFoundException("Application", application_id)

        if application.user_id != user_id and not self.admin_authority.is_admin_of_association(
            user_id, application.association_id
        ):
            raise AuthorizationException(message="You cannot view this application")

        return application

    def get_user_applications(self, user_id: int) -> List[Application]:
        """Get the user's own applications, newest first."""
        return self.application_repo.get_user_applications(user_id)

    def get_association_applications(
        self,
        association_id: int,
        user_id: int,
        status: Optional[ApplicationStatus] = None
    ) -> List[Application]:
        """
        List applications to an association (admin only).

        Raises:
            ResourceNotFoundException: If the association does not exist
            AuthorizationException: If the user is not an admin
        """
        if not self.association_repo.exists(association_id):
            raise ResourceNotFoundException("Association", association_id)

        if not self.admin_authority.is_admin_of_association(user_id, association_id):
            raise AuthorizationException(message="Only association admins can view applications")

        return self.application_repo.get_association_applications(association_id, status)

    def _check_authority(
        self,
        application: Application,
        transition: Transition,
        action: ApplicationAction,
        actor_id: int
    ) -> None:
        if transition.authority == Authority.APPLICANT:
            if application.user_id != actor_id:
                raise AuthorizationException(
                    message=f"Only the applicant can {action.value} this application"
                )
            return

        if not self.admin_authority.is_admin_of_association(actor_id, application.association_id):
            raise AuthorizationException(
                message=f"Only association admins can {action.value} applications"
            )

        if application.user_id == actor_id and self.user_repo.get_role(actor_id) != UserRole.PLATFORM_ADMIN:
            raise AuthorizationException(
                message=f"Admins cannot {action.value} their own application"
            )

    def _ensure_open_association(self, association_id: int) -> None:
        association = self.association_repo.get(association_id)
        if not association:
            raise ResourceNotFoundException("Association", association_id)
        if settings.ENFORCE_ASSOCIATION_DEACTIVATION and not association.is_active:
            raise BadRequestException("This association is not accepting applications")

    def _ensure_can_create(self, user_id: int, association_id: int) -> None:
        """Re-application is allowed only after rejection or withdrawal."""
        if self.association_repo.is_owner_or_admin(association_id, user_id):
            raise MembershipConflictException("Association admins are already members of this association")

        blocking = self.application_repo.find_for_pair(
            user_id, association_id, statuses=BLOCKING_STATUSES
        )
        if not blocking:
            return

        status = blocking[0].status
        if status in OPEN_STATUSES:
            message = "An application to this association is already pending"
        elif status == ApplicationStatus.APPROVED:
            message = "You are already a member of this association"
        else:
            message = "You were removed from this association and cannot re-apply"
        raise MembershipConflictException(message)

    def _ensure_not_member_elsewhere(self, application: Application) -> None:
        current = self.application_repo.find_latest_approved(application.user_id)
        if current is not None and current.id != application.id:
            raise MembershipConflictException("User is already a member of an association")

    def _insert(self, application: Application) -> Application:
        try:
            return self.application_repo.create(application)
        except IntegrityError:
            self.db.rollback()
            raise MembershipConflictException("An application to this association is already pending")

    def _sync_population(self, association_id: int) -> None:
        count = self.association_repo.get_member_count(association_id)
        self.association_repo.update(association_id, {"population": count})

import pytest
from sqlalchemy.orm import Session
from app.core.exception import ResourceNotFoundException
from app.models.application import ApplicationStatus
from app.services.authorization_service import AuthorizationService


@pytest.mark.unit
class TestAuthorizationService:
    """Unit tests for event-scoped authorization."""

    def test_owner_association_of(self, db_session: Session, association, event):
        service = AuthorizationService(db_session)

        assert service.owner_association_of(event.id) == association.id

    def test_owner_association_of_missing_event(self, db_session: Session):
        """Test a missing event raises not found."""
        service = AuthorizationService(db_session)

        with pytest.raises(ResourceNotFoundException):
            service.owner_association_of(999999)

    def test_can_manage_event_mirrors_admin_authority(
        self, db_session: Session, event, platform_admin, owner, appointed_admin, member, stranger
    ):
        """Test event management reduces to admin authority over the owning association."""
        service = AuthorizationService(db_session)

        for user in (platform_admin, owner, appointed_admin, member, stranger):
            assert service.can_manage_event(user.id, event.id) == service.is_admin_of_association(
                user.id, event.association_id
            )
        assert service.can_manage_event(owner.id, event.id) is True
        assert service.can_manage_event(member.id, event.id) is False

    def test_can_attend_event_mirrors_membership(
        self, db_session: Session, event, owner, member, stranger
    ):
        """Test attendance reduces to membership of the owning association."""
        service = AuthorizationService(db_session)

        assert service.can_attend_event(member.id, event.id) is True
        assert service.can_attend_event(owner.id, event.id) is True
        assert service.can_attend_event(stranger.id, event.id) is False

    def test_member_of_other_association_cannot_attend(
        self, db_session: Session, event, other_association, user_factory, application_factory
    ):
        outsider = user_factory("outsider@example.com")
        application_factory(outsider, other_association, ApplicationStatus.APPROVED)

        assert AuthorizationService(db_session).can_attend_event(outsider.id, event.id) is False

    def test_missing_event_is_false(self, db_session: Session, owner, platform_admin):
        """Test event checks do not reveal whether an event exists."""
        service = AuthorizationService(db_session)

        assert service.can_manage_event(owner.id, 999999) is False
        assert service.can_attend_event(owner.id, 999999) is False
        assert service.can_manage_event(platform_admin.id, 999999) is False

    def test_unauthenticated_is_false(self, db_session: Session, event):
        service = AuthorizationService(db_session)

        assert service.can_manage_event(None, event.id) is False
        assert service.can_attend_event(None, event.id) is False
        assert service.is_member(None, event.association_id) is False

    def test_current_association(self, db_session: Session, association, member):
        assert AuthorizationService(db_session).current_association(member.id) == association.id

import pytest
from datetime import datetime, timedelta, timezone
from sqlalchemy.orm import Session
from app.models.rsvp import RSVPStatus
from app.schemas.event import CheckinCreate, EventCreate, EventUpdate, RSVPCreate
from app.services.event_service import EventService
from app.core.exception import AuthorizationException, ResourceNotFoundException


@pytest.mark.unit
class TestEventService:
    """Unit tests for EventService."""

    def test_create_event(self, db_session: Session, association):
        starts = datetime.now(timezone.utc) + timedelta(days=3)
        service = EventService(db_session)

        event = service.create_event(EventCreate(
            name="Quiz night",
            location="The Crown",
            date=starts,
            arrival_time=starts,
            association_id=association.id
        ))

        assert event.id is not None
        assert event.association_id == association.id

    def test_create_event_missing_association(self, db_session: Session):
        starts = datetime.now(timezone.utc)
        with pytest.raises(ResourceNotFoundException):
            EventService(db_session).create_event(EventCreate(
                name="Ghost", location="Nowhere", date=starts, arrival_time=starts, association_id=999999
            ))

    def test_update_event_keeps_association(self, db_session: Session, event, association):
        updated = EventService(db_session).update_event(event.id, EventUpdate(name="Summer dinner"))

        assert updated.name == "Summer dinner"
        assert updated.association_id == association.id

    def test_update_event_rejects_null_name(self):
        with pytest.raises(ValueError):
            EventUpdate(name=None)

    def test_delete_event(self, db_session: Session, event):
        service = EventService(db_session)

        assert service.delete_event(event.id) is True
        with pytest.raises(ResourceNotFoundException):
            service.get_event(event.id)

    def test_respond_updates_existing_rsvp(self, db_session: Session, event, member):
        """Test a second answer overwrites the first."""
        service = EventService(db_session)

        first = service.respond(event.id, member.id, RSVPCreate(status=RSVPStatus.MAYBE))
        second = service.respond(event.id, member.id, RSVPCreate(status=RSVPStatus.YES, guests_count=1))

        assert first.id == second.id
        assert second.status == RSVPStatus.YES
        assert second.guests_count == 1
        assert len(service.get_rsvps(event.id)) == 1
        assert service.get_user_rsvp(event.id, member.id).id == second.id

    def test_respond_races_with_concurrent_first_answer(self, db_session: Session, event, member, monkeypatch):
        """Test an insert that loses to a concurrent first answer becomes an update."""
        service = EventService(db_session)
        existing = service.respond(event.id, member.id, RSVPCreate(status=RSVPStatus.NO))

        real_find = service.rsvp_repo.find
        lookups = []

        def stale_find(event_id, user_id):
            lookups.append((event_id, user_id))
            return None if len(lookups) == 1 else real_find(event_id, user_id)

        monkeypatch.setattr(service.rsvp_repo, "find", stale_find)

        rsvp = service.respond(event.id, member.id, RSVPCreate(status=RSVPStatus.YES))

        assert rsvp.id == existing.id
        assert rsvp.status == RSVPStatus.YES
        assert len(service.get_rsvps(event.id)) == 1

    def test_check_in_member(self, db_session: Session, event, member, owner):
        checkin = EventService(db_session).check_in(event.id, owner.id, CheckinCreate(user_id=member.id))

        assert checkin.user_id == member.id
        assert checkin.checked_in_by_id == owner.id

    def test_check_in_repeat_scan(self, db_session: Session, event, member, owner, appointed_admin):
        service = EventService(db_session)
        first = service.check_in(event.id, owner.id, CheckinCreate(user_id=member.id))

        second = service.check_in(event.id, appointed_admin.id, CheckinCreate(user_id=member.id, notes="+1"))

        assert second.id == first.id
        assert second.checked_in_by_id == appointed_admin.id
        assert second.notes == "+1"

    def test_check_in_races_with_concurrent_scan(self, db_session: Session, event, member, owner, monkeypatch):
        service = EventService(db_session)
        existing = service.check_in(event.id, owner.id, CheckinCreate(user_id=member.id))

        real_find = service.rsvp_repo.find_checkin
        lookups = []

        def stale_find(event_id, user_id):
            lookups.append((event_id, user_id))
            return None if len(lookups) == 1 else real_find(event_id, user_id)

        monkeypatch.setattr(service.rsvp_repo, "find_checkin", stale_find)

        checkin = service.check_in(event.id, owner.id, CheckinCreate(user_id=member.id, notes="door 2"))

        assert checkin.id == existing.id
        assert checkin.notes == "door 2"

    def test_check_in_non_member(self, db_session: Session, event, stranger, owner):
        """Test only members of the owning association can be checked in."""
        with pytest.raises(AuthorizationException):
            EventService(db_session).check_in(event.id, owner.id, CheckinCreate(user_id=stranger.id))

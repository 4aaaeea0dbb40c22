import pytest
from datetime import datetime, timedelta, timezone
from app.models.user import User

API = "/api/v1/events"


def event_payload(association_id: int) -> dict:
    starts = datetime.now(timezone.utc) + timedelta(days=10)
    return {
        "name": "Board games",
        "location": "Library cafe",
        "date": starts.isoformat(),
        "arrival_time": (starts - timedelta(minutes=15)).isoformat(),
        "arrival_rules": "BRITISH_SOCIAL",
        "association_id": association_id,
    }


@pytest.mark.integration
class TestEventEndpoints:
    """Integration tests for events, RSVPs and check-ins."""

    def test_admin_creates_event(self, client, association, appointed_admin, headers_for):
        response = client.post(API, json=event_payload(association.id), headers=headers_for(appointed_admin))

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["association_id"] == association.id
        assert data["arrival_rules"] == "BRITISH_SOCIAL"

    def test_member_cannot_create_event(self, client, association, member, headers_for):
        response = client.post(API, json=event_payload(association.id), headers=headers_for(member))

        assert response.status_code == 403

    def test_admin_of_other_association_cannot_create_event(
        self, client, association, other_association, headers_for, db_session
    ):
        other_owner = db_session.get(User, other_association.owner_id)
        response = client.post(API, json=event_payload(association.id), headers=headers_for(other_owner))

        assert response.status_code == 403

    def test_member_views_event(self, client, event, member, headers_for):
        response = client.get(f"{API}/{event.id}", headers=headers_for(member))

        assert response.status_code == 200
        assert response.json()["data"]["id"] == event.id
        assert response.json()["data"]["user_rsvp"] is None

    def test_stranger_cannot_view_event(self, client, event, stranger, headers_for):
        response = client.get(f"{API}/{event.id}", headers=headers_for(stranger))

        assert response.status_code == 403

    def test_missing_event_is_forbidden(self, client, owner, headers_for):
        """Test an unknown event looks the same as one the caller cannot see."""
        response = client.get(f"{API}/999999", headers=headers_for(owner))

        assert response.status_code == 403

    def test_rsvp_round(self, client, event, member, owner, headers_for):
        response = client.put(
            f"{API}/{event.id}/rsvp",
            json={"status": "YES", "guests_count": 2},
            headers=headers_for(member)
        )
        assert response.status_code == 200
        assert response.json()["data"]["status"] == "YES"

        response = client.get(f"{API}/{event.id}", headers=headers_for(member))
        assert response.json()["data"]["user_rsvp"]["guests_count"] == 2

        response = client.get(f"{API}/{event.id}/rsvps", headers=headers_for(owner))
        assert response.status_code == 200
        assert [r["user_id"] for r in response.json()["data"]] == [member.id]

    def test_member_cannot_list_rsvps(self, client, event, member, headers_for):
        response = client.get(f"{API}/{event.id}/rsvps", headers=headers_for(member))

        assert response.status_code == 403

    def test_update_and_delete_event(self, client, event, owner, headers_for):
        response = client.put(f"{API}/{event.id}", json={"name": "Renamed"}, headers=headers_for(owner))
        assert response.status_code == 200
        assert response.json()["data"]["name"] == "Renamed"

        response = client.delete(f"{API}/{event.id}", headers=headers_for(owner))
        assert response.status_code == 200
        assert response.json()["success"] is True

    def test_member_cannot_update_event(self, client, event, member, headers_for):
        response = client.put(f"{API}/{event.id}", json={"name": "Hijacked"}, headers=headers_for(member))

        assert response.status_code == 403

    def test_check_in(self, client, event, member, stranger, owner, headers_for):
        response = client.post(
            f"{API}/{event.id}/checkins", json={"user_id": member.id}, headers=headers_for(owner)
        )
        assert response.status_code == 200
        assert response.json()["data"]["checked_in_by_id"] == owner.id

        response = client.post(
            f"{API}/{event.id}/checkins", json={"user_id": stranger.id}, headers=headers_for(owner)
        )
        assert response.status_code == 403

import pytest
from app.models.user import UserRole
from app.utils.security import create_access_token

API = "/api/v1/associations"


@pytest.mark.integration
class TestAssociationEndpoints:
    """Integration tests for association endpoints."""

    def test_platform_admin_creates_association(self, client, platform_admin, applicant, headers_for):
        response = client.post(
            API,
            json={"name": "Dublin", "location": "Dublin", "owner_id": applicant.id},
            headers=headers_for(platform_admin)
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["owner_id"] == applicant.id
        assert [admin["id"] for admin in data["admins"]] == [applicant.id]

    def test_association_admin_cannot_create_association(self, client, owner, headers_for):
        response = client.post(
            API,
            json={"name": "Rogue", "location": "Anywhere", "owner_id": owner.id},
            headers=headers_for(owner)
        )

        assert response.status_code == 403

    def test_list_associations_platform_admin_only(self, client, association, platform_admin, owner, headers_for):
        assert client.get(API, headers=headers_for(platform_admin)).status_code == 200
        assert client.get(API, headers=headers_for(owner)).status_code == 403

    def test_member_sees_details(self, client, association, member, headers_for):
        response = client.get(f"{API}/{association.id}", headers=headers_for(member))

        assert response.status_code == 200
        assert response.json()["data"]["name"] == association.name

    def test_stranger_sees_public_view_only(self, client, association, stranger, headers_for):
        assert client.get(f"{API}/{association.id}", headers=headers_for(stranger)).status_code == 403

        response = client.get(f"{API}/{association.id}/public", headers=headers_for(stranger))
        assert response.status_code == 200
        assert "owner_id" not in response.json()["data"]

    def test_members_listing_admin_only(self, client, association, member, appointed_admin, headers_for):
        response = client.get(f"{API}/{association.id}/members", headers=headers_for(appointed_admin))
        assert response.status_code == 200
        assert [m["id"] for m in response.json()["data"]] == [member.id]

        assert client.get(f"{API}/{association.id}/members", headers=headers_for(member)).status_code == 403

    def test_upcoming_events(self, client, association, event, member, headers_for):
        response = client.get(f"{API}/{association.id}/events", headers=headers_for(member))

        assert response.status_code == 200
        assert [e["id"] for e in response.json()["data"]] == [event.id]

    def test_update_association(self, client, association, appointed_admin, member, headers_for):
        response = client.put(
            f"{API}/{association.id}", json={"max_population": 40}, headers=headers_for(appointed_admin)
        )
        assert response.status_code == 200
        assert response.json()["data"]["max_population"] == 40

        response = client.put(f"{API}/{association.id}", json={"name": "Mine"}, headers=headers_for(member))
        assert response.status_code == 403

    def test_owner_appoints_and_removes_admin(self, client, association, owner, stranger, headers_for):
        response = client.post(
            f"{API}/{association.id}/admins", json={"user_id": stranger.id}, headers=headers_for(owner)
        )
        assert response.status_code == 200
        assert stranger.id in [admin["id"] for admin in response.json()["data"]["admins"]]

        response = client.delete(f"{API}/{association.id}/admins/{stranger.id}", headers=headers_for(owner))
        assert response.status_code == 200
        assert stranger.id not in [admin["id"] for admin in response.json()["data"]["admins"]]

    def test_appointed_admin_cannot_appoint(self, client, association, appointed_admin, stranger, headers_for):
        response = client.post(
            f"{API}/{association.id}/admins", json={"user_id": stranger.id}, headers=headers_for(appointed_admin)
        )

        assert response.status_code == 403

    def test_owner_cannot_be_removed(self, client, association, owner, platform_admin, headers_for):
        response = client.delete(f"{API}/{association.id}/admins/{owner.id}", headers=headers_for(platform_admin))

        assert response.status_code == 400

    def test_assign_admin_by_email(self, client, association, platform_admin, stranger, headers_for):
        response = client.post(
            f"{API}/{association.id}/admins/by-email",
            json={"admin_email": stranger.email},
            headers=headers_for(platform_admin)
        )

        assert response.status_code == 200
        assert stranger.id in [admin["id"] for admin in response.json()["data"]["admins"]]

    def test_deactivate_association(self, client, association, event, platform_admin, owner, member, headers_for):
        """Test a deactivated association locks out its admins and members."""
        response = client.post(f"{API}/{association.id}/deactivate", headers=headers_for(platform_admin))
        assert response.status_code == 200
        assert response.json()["data"]["is_active"] is False

        assert client.get(f"{API}/{association.id}/members", headers=headers_for(owner)).status_code == 403
        assert client.get(f"/api/v1/events/{event.id}", headers=headers_for(member)).status_code == 403


@pytest.mark.integration
class TestUserEndpoints:
    """Integration tests for user and identity endpoints."""

    def test_me(self, client, member, headers_for):
        response = client.get("/api/v1/auth/me", headers=headers_for(member))

        assert response.status_code == 200
        assert response.json()["data"]["email"] == member.email

    def test_me_without_token(self, client):
        response = client.get("/api/v1/auth/me")

        assert response.status_code == 401
        assert response.headers["www-authenticate"] == "Bearer"

    def test_membership_of_non_member(self, client, stranger, headers_for):
        response = client.get("/api/v1/users/me/membership", headers=headers_for(stranger))

        assert response.json()["data"] == {"user_id": stranger.id, "association_id": None}

    def test_role_is_read_from_database(self, client, stranger):
        """Test a forged role claim does not grant platform access."""
        token = create_access_token(data={"sub": str(stranger.id), "role": UserRole.PLATFORM_ADMIN.value})

        response = client.get("/api/v1/users", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 403

    def test_change_role(self, client, stranger, platform_admin, headers_for):
        response = client.put(
            f"/api/v1/users/{stranger.id}/role",
            json={"role": "ASSOCIATION_ADMIN"},
            headers=headers_for(platform_admin)
        )

        assert response.status_code == 200
        assert response.json()["data"]["role"] == "ASSOCIATION_ADMIN"

    def test_deactivated_user_is_locked_out(self, client, member, platform_admin, headers_for):
        response = client.post(f"/api/v1/users/{member.id}/deactivate", headers=headers_for(platform_admin))
        assert response.status_code == 200

        response = client.get("/api/v1/auth/me", headers=headers_for(member))
        assert response.status_code == 401

    def test_guard_without_session(self, client):
        response = client.get("/api/v1/auth/guard", params={"required_role": "PLATFORM_ADMIN"})

        assert response.status_code == 200
        assert response.json()["data"]["outcome"] == "sign_in"

    def test_guard_with_low_role(self, client, member, headers_for):
        response = client.get(
            "/api/v1/auth/guard", params={"required_role": "ASSOCIATION_ADMIN"}, headers=headers_for(member)
        )

        assert response.json()["data"]["outcome"] == "unauthorized"

    def test_guard_render(self, client, owner, headers_for):
        response = client.get(
            "/api/v1/auth/guard", params={"required_role": "ASSOCIATION_ADMIN"}, headers=headers_for(owner)
        )

        assert response.json()["data"]["outcome"] == "render"

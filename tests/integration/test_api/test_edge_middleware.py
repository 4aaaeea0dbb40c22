import pytest
from app.config import settings


@pytest.mark.integration
class TestEdgeMiddleware:
    """Integration tests for the path-prefix interceptor."""

    def test_unauthenticated_admin_redirects_to_sign_in(self, client):
        response = client.get("/admin/dashboard", follow_redirects=False)

        assert response.status_code == 307
        assert response.headers["location"] == settings.SIGN_IN_PATH

    def test_user_on_admin_redirects_to_unauthorized(self, client, stranger, headers_for):
        response = client.get("/admin/dashboard", headers=headers_for(stranger), follow_redirects=False)

        assert response.status_code == 307
        assert response.headers["location"] == settings.UNAUTHORIZED_PATH

    def test_association_admin_reaches_association_console(self, client, owner, headers_for):
        """Test the association console prefix lets association admins through to routing."""
        response = client.get(
            "/admin/association", headers=headers_for(owner), follow_redirects=False
        )

        # Passed the edge; nothing is mounted there
        assert response.status_code == 404

    def test_user_on_association_console_redirects(self, client, stranger, headers_for):
        response = client.get(
            "/admin/association/123", headers=headers_for(stranger), follow_redirects=False
        )

        assert response.status_code == 307
        assert response.headers["location"] == settings.UNAUTHORIZED_PATH

    def test_platform_admin_passes(self, client, platform_admin, headers_for):
        response = client.get("/admin/dashboard", headers=headers_for(platform_admin), follow_redirects=False)

        assert response.status_code == 404

    def test_cookie_token_is_accepted(self, client, platform_admin, headers_for):
        """Test the session cookie works when no Authorization header is sent."""
        token = headers_for(platform_admin)["Authorization"].split(" ", 1)[1]
        client.cookies.set(settings.ACCESS_TOKEN_COOKIE, token)

        response = client.get("/admin/dashboard", follow_redirects=False)

        assert response.status_code == 404

    def test_invalid_token_counts_as_unauthenticated(self, client):
        response = client.get(
            "/events/5", headers={"Authorization": "Bearer not-a-token"}, follow_redirects=False
        )

        assert response.status_code == 307
        assert response.headers["location"] == settings.SIGN_IN_PATH

    @pytest.mark.parametrize("path", ["/weaver/register", "/weaver/apply", "/association/apply/3"])
    def test_public_paths_pass_unauthenticated(self, client, path):
        response = client.get(path, follow_redirects=False)

        assert response.status_code == 404

    def test_api_routes_are_not_intercepted(self, client, association):
        """Test the API enforces its own 401 instead of redirecting."""
        response = client.get(f"{settings.API_V1_STR}/associations/{association.id}")

        assert response.status_code == 401
        assert response.json()["success"] is False
        assert response.json()["error"]["category"] == "Authentication"

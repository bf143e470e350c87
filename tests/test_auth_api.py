"""
Tests for authentication, user management and request middleware.
"""
import pytest

from hrms.core.security import create_refresh_token
from hrms.models.user import LegacyRole


@pytest.fixture
def alice(make_user):
    return make_user(username="alice", password="wonderland", role=LegacyRole.MANAGER)


def login(client, username, password):
    return client.post("/api/auth/login", json={"username": username, "password": password})


class TestLogin:

    def test_login_returns_tokens(self, client, alice):
        response = login(client, "alice", "wonderland")

        assert response.status_code == 200
        body = response.json()
        assert body["access_token"]
        assert body["refresh_token"]
        assert body["token_type"] == "bearer"
        assert body["user"]["username"] == "alice"
        assert body["user"]["role"] == "MANAGER"

    def test_wrong_password_is_401(self, client, alice):
        response = login(client, "alice", "not-the-password")
        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid username or password"

    def test_unknown_user_is_401(self, client):
        assert login(client, "nobody", "whatever").status_code == 401

    def test_deactivated_account_is_401(self, client, db, alice):
        alice.active = False
        db.commit()

        response = login(client, "alice", "wonderland")

        assert response.status_code == 401
        assert response.json()["detail"] == "Account is deactivated"

    def test_login_is_audited(self, client, alice, make_user, auth_headers):
        login(client, "alice", "wonderland")
        auditor = make_user(role=LegacyRole.SUPER_ADMIN)

        body = client.get(
            "/api/admin/audit", params={"action": "user.login"}, headers=auth_headers(auditor),
        ).json()

        assert body["total"] == 1
        assert body["logs"][0]["actor_username"] == "alice"


class TestTokens:

    def test_access_token_opens_me(self, client, alice):
        token = login(client, "alice", "wonderland").json()["access_token"]
        response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 200
        assert response.json()["username"] == "alice"

    def test_refresh_token_is_not_an_access_token(self, client, alice):
        refresh = login(client, "alice", "wonderland").json()["refresh_token"]
        response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {refresh}"})
        assert response.status_code == 401

    def test_refresh_issues_new_access_token(self, client, alice):
        refresh = login(client, "alice", "wonderland").json()["refresh_token"]

        response = client.post("/api/auth/refresh", json={"refresh_token": refresh})

        assert response.status_code == 200
        token = response.json()["access_token"]
        assert client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"}).status_code == 200

    def test_unknown_refresh_token_is_401(self, client, alice):
        forged = create_refresh_token({"sub": str(alice.id)})
        response = client.post("/api/auth/refresh", json={"refresh_token": forged})
        assert response.status_code == 401

    def test_logout_revokes_refresh_tokens(self, client, alice):
        tokens = login(client, "alice", "wonderland").json()
        headers = {"Authorization": f"Bearer {tokens['access_token']}"}

        assert client.post("/api/auth/logout", headers=headers).status_code == 200

        response = client.post("/api/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
        assert response.status_code == 401


class TestMyPermissions:

    def test_manager_permissions(self, client, alice, auth_headers):
        body = client.get("/api/auth/me/permissions", headers=auth_headers(alice)).json()
        assert body["user_id"] == alice.id
        assert "leaves.approve" in body["permissions"]
        assert "system.admin" not in body["permissions"]

    def test_requires_authentication(self, client):
        assert client.get("/api/auth/me/permissions").status_code == 401


class TestUsersApi:

    @pytest.fixture
    def hr_headers(self, make_user, auth_headers):
        return auth_headers(make_user(role=LegacyRole.RH))

    def test_create_and_fetch(self, client, hr_headers):
        response = client.post(
            "/api/users/",
            json={"username": "bob", "password": "builder1", "full_name": "Bob", "role": "EMPLOYEE"},
            headers=hr_headers,
        )
        assert response.status_code == 201
        created = response.json()
        assert created["role"] == "EMPLOYEE"
        assert "hashed_password" not in created

        fetched = client.get(f"/api/users/{created['id']}", headers=hr_headers)
        assert fetched.json()["username"] == "bob"

    def test_duplicate_username_is_409(self, client, hr_headers, alice):
        response = client.post(
            "/api/users/",
            json={"username": "alice", "password": "another1", "full_name": "Alice Two"},
            headers=hr_headers,
        )
        assert response.status_code == 409

    def test_employee_cannot_create_users(self, client, make_user, auth_headers):
        headers = auth_headers(make_user(role=LegacyRole.EMPLOYEE))
        response = client.post(
            "/api/users/",
            json={"username": "eve", "password": "sneaky12", "full_name": "Eve"},
            headers=headers,
        )
        assert response.status_code == 403

    def test_deactivate_blocks_login(self, client, hr_headers, alice):
        response = client.patch(f"/api/users/{alice.id}", json={"active": False}, headers=hr_headers)
        assert response.status_code == 200
        assert response.json()["active"] is False

        assert login(client, "alice", "wonderland").status_code == 401

    def test_clearing_legacy_role_falls_back_to_default(self, client, hr_headers, alice, auth_headers):
        client.patch(f"/api/users/{alice.id}", json={"role": None}, headers=hr_headers)

        body = client.get("/api/auth/me/permissions", headers=auth_headers(alice)).json()

        assert body["permissions"] == ["users.view"]

    def test_list_filters_on_active(self, client, hr_headers, make_user):
        make_user(username="idle")
        inactive = make_user(username="gone")
        client.patch(f"/api/users/{inactive.id}", json={"active": False}, headers=hr_headers)

        body = client.get("/api/users/", params={"active": False}, headers=hr_headers).json()

        assert body["total"] == 1
        assert [u["username"] for u in body["users"]] == ["gone"]

    def test_unknown_user_is_404(self, client, hr_headers):
        assert client.get("/api/users/9999", headers=hr_headers).status_code == 404


class TestMiddleware:

    def test_request_id_is_generated(self, client):
        response = client.get("/api/admin/health")
        assert response.status_code == 200
        assert response.headers["X-Request-Id"]
        assert "X-Response-Time-Ms" in response.headers

    def test_incoming_request_id_is_echoed(self, client):
        response = client.get("/api/admin/health", headers={"X-Request-Id": "trace-123"})
        assert response.headers["X-Request-Id"] == "trace-123"

    def test_admin_health_checks_database(self, client, make_role):
        make_role("Counted", ["reports.view"])
        body = client.get("/api/admin/health").json()
        assert body == {"status": "healthy", "database": "ok", "roles": 1, "permissions": 1}

    def test_only_one_health_endpoint(self, client):
        assert client.get("/api/health").status_code == 404

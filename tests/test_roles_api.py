"""
Tests for the roles API.
"""
import pytest

from hrms.core.permission_catalog import PREDEFINED_ROLES
from hrms.models.user import LegacyRole


@pytest.fixture
def admin_headers(make_user, auth_headers):
    return auth_headers(make_user(role=LegacyRole.SUPER_ADMIN, username="root"))


@pytest.fixture
def employee_headers(make_user, auth_headers):
    return auth_headers(make_user(role=LegacyRole.EMPLOYEE, username="staff"))


class TestRoleCrud:

    def test_create_then_fetch(self, client, admin_headers):
        response = client.post(
            "/api/roles/",
            json={"name": "QA Lead", "permissions": ["leaves.view_team", "leaves.approve"]},
            headers=admin_headers,
        )
        assert response.status_code == 201
        created = response.json()
        assert created["permissions"] == ["leaves.approve", "leaves.view_team"]
        assert created["is_system"] is False
        assert created["user_count"] == 0

        fetched = client.get(f"/api/roles/{created['id']}", headers=admin_headers)
        assert fetched.status_code == 200
        assert fetched.json()["permissions"] == created["permissions"]

    def test_duplicate_name_is_409(self, client, admin_headers):
        client.post("/api/roles/", json={"name": "QA Lead"}, headers=admin_headers)
        response = client.post("/api/roles/", json={"name": "QA Lead"}, headers=admin_headers)
        assert response.status_code == 409

    def test_blank_permission_name_is_400(self, client, admin_headers):
        response = client.post(
            "/api/roles/", json={"name": "Blank", "permissions": ["users.view", "  "]},
            headers=admin_headers,
        )
        assert response.status_code == 400
        assert client.get("/api/roles/", headers=admin_headers).json() == []

    def test_update_replaces_permissions(self, client, admin_headers):
        role_id = client.post(
            "/api/roles/", json={"name": "Shifting", "permissions": ["a.x", "b.x"]},
            headers=admin_headers,
        ).json()["id"]

        response = client.patch(
            f"/api/roles/{role_id}", json={"permissions": ["b.x", "c.x"]},
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.json()["permissions"] == ["b.x", "c.x"]

    def test_delete_then_missing(self, client, admin_headers):
        role_id = client.post(
            "/api/roles/", json={"name": "Temp"}, headers=admin_headers,
        ).json()["id"]

        assert client.delete(f"/api/roles/{role_id}", headers=admin_headers).status_code == 200
        assert client.get(f"/api/roles/{role_id}", headers=admin_headers).status_code == 404

    def test_delete_system_role_is_403(self, client, admin_headers):
        client.post("/api/roles/initialize", headers=admin_headers)
        roles = client.get("/api/roles/", headers=admin_headers).json()
        system_role = next(r for r in roles if r["is_system"])

        response = client.delete(f"/api/roles/{system_role['id']}", headers=admin_headers)

        assert response.status_code == 403

    def test_delete_assigned_role_is_409(self, client, admin_headers, make_user):
        role_id = client.post(
            "/api/roles/", json={"name": "Busy"}, headers=admin_headers,
        ).json()["id"]
        make_user(role_id=role_id)

        response = client.delete(f"/api/roles/{role_id}", headers=admin_headers)

        assert response.status_code == 409

    def test_list_includes_user_counts(self, client, admin_headers, make_role, make_user):
        role = make_role("Counted")
        make_user(role_id=role.id)

        roles = client.get("/api/roles/", headers=admin_headers).json()

        assert {r["name"]: r["user_count"] for r in roles}["Counted"] == 1


class TestRoleGuards:

    def test_anonymous_is_401(self, client):
        assert client.get("/api/roles/").status_code == 401

    def test_employee_cannot_create(self, client, employee_headers):
        response = client.post("/api/roles/", json={"name": "Sneaky"}, headers=employee_headers)
        assert response.status_code == 403
        assert response.json()["detail"] == "Insufficient permissions. Required: roles.manage"

    def test_admin_can_view_but_not_manage(self, client, make_user, auth_headers):
        headers = auth_headers(make_user(role=LegacyRole.ADMIN))
        assert client.get("/api/roles/", headers=headers).status_code == 200
        assert client.post("/api/roles/", json={"name": "Nope"}, headers=headers).status_code == 403

    def test_catalog_is_visible_to_viewers(self, client, admin_headers):
        body = client.get("/api/roles/permissions", headers=admin_headers).json()
        assert body["permissions"]["ROLES_MANAGE"] == "roles.manage"
        assert "categories" in body


class TestAssignmentAndEffectivePermissions:

    def test_assign_changes_effective_permissions(self, client, admin_headers, make_role, make_user, auth_headers):
        role = make_role("Reporter", ["reports.create", "payroll.view"])
        user = make_user(role=LegacyRole.EMPLOYEE)

        response = client.post(
            "/api/roles/assign", json={"user_id": user.id, "role_id": role.id},
            headers=admin_headers,
        )
        assert response.status_code == 200
        assert response.json()["role_id"] == role.id

        mine = client.get("/api/auth/me/permissions", headers=auth_headers(user)).json()
        assert "payroll.view" in mine["permissions"]
        assert "leaves.create" in mine["permissions"]
        assert mine["permissions"] == sorted(mine["permissions"])

    def test_assign_unknown_role_is_404(self, client, admin_headers, make_user):
        user = make_user()
        response = client.post(
            "/api/roles/assign", json={"user_id": user.id, "role_id": 999},
            headers=admin_headers,
        )
        assert response.status_code == 404

    def test_permissions_of_unknown_user_are_empty(self, client, admin_headers):
        response = client.get("/api/roles/user/31337/permissions", headers=admin_headers)
        assert response.status_code == 200
        assert response.json() == {"user_id": 31337, "permissions": []}

    def test_initialize_reports_per_role_outcome(self, client, admin_headers):
        first = client.post("/api/roles/initialize", headers=admin_headers).json()
        second = client.post("/api/roles/initialize", headers=admin_headers).json()

        assert len(first) == len(PREDEFINED_ROLES)
        assert {r["action"] for r in first} == {"created"}
        assert {r["action"] for r in second} == {"exists"}


class TestRoleAudit:

    def test_mutations_are_audited(self, client, admin_headers):
        role_id = client.post(
            "/api/roles/", json={"name": "Audited"}, headers=admin_headers,
        ).json()["id"]
        client.patch(f"/api/roles/{role_id}", json={"description": "x"}, headers=admin_headers)
        client.delete(f"/api/roles/{role_id}", headers=admin_headers)

        body = client.get(
            "/api/admin/audit", params={"resource_type": "role"}, headers=admin_headers,
        ).json()

        actions = {log["action"] for log in body["logs"]}
        assert {"role.created", "role.updated", "role.deleted"} <= actions
        assert all(log["actor_username"] == "root" for log in body["logs"])

    def test_audit_filters_by_action_prefix_and_resource(self, client, admin_headers):
        role_id = client.post(
            "/api/roles/", json={"name": "Tracked", "permissions": ["reports.view"]},
            headers=admin_headers,
        ).json()["id"]
        client.patch(
            f"/api/roles/{role_id}", json={"permissions": ["reports.create"]}, headers=admin_headers,
        )

        body = client.get(
            "/api/admin/audit",
            params={"action": "role.upd", "resource_id": str(role_id)},
            headers=admin_headers,
        ).json()

        assert body["total"] == 1
        entry = body["logs"][0]
        assert '"reports.view"' in entry["old_value_json"]
        assert '"reports.create"' in entry["new_value_json"]
        assert entry["ip_address"] == "testclient"

    def test_audit_action_wildcards_match_literally(self, client, admin_headers):
        client.post("/api/roles/", json={"name": "Tracked"}, headers=admin_headers)

        def total(action):
            return client.get(
                "/api/admin/audit", params={"action": action}, headers=admin_headers,
            ).json()["total"]

        assert total("role.") == 1
        assert total("role%") == 0
        assert total("rol_") == 0

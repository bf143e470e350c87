"""
Tests for role CRUD and the relational permission links.
"""
import pytest

from hrms.core.exceptions import (
    ProtectedResourceError, ResourceConflictError, ResourceNotFoundError,
)
from hrms.core.permission_catalog import PREDEFINED_ROLES
from hrms.models.permission import Permission
from hrms.models.role import Role, RolePermission
from hrms.models.user import LegacyRole
from hrms.services.permission_resolver import permission_resolver
from hrms.services.role_service import role_service


class TestCreateRole:

    def test_round_trip_reads_permissions_from_join_table(self, db):
        role = role_service.create_role(
            db, name="Auditor", description="Reads things",
            permissions=["reports.view", "users.view"],
        )

        serialized = role_service.serialize(db, role)

        assert serialized["name"] == "Auditor"
        assert serialized["permissions"] == ["reports.view", "users.view"]
        assert serialized["user_count"] == 0
        assert sorted(role.json_permissions) == ["reports.view", "users.view"]

    def test_missing_permission_rows_are_created(self, db):
        db.add(Permission(name="leaves.approve", label="Approve leaves"))
        db.commit()

        role = role_service.create_role(
            db, name="QA Lead", permissions=["leaves.view_team", "leaves.approve"],
        )

        created = db.query(Permission).filter(Permission.name == "leaves.view_team").first()
        assert created is not None
        assert db.query(Permission).filter(Permission.name == "leaves.approve").count() == 1
        assert role_service.linked_permission_names(db, role.id) == [
            "leaves.approve", "leaves.view_team",
        ]

    def test_defaults_applied_for_color_and_icon(self, db):
        role = role_service.create_role(db, name="Plain")
        assert role.color == "#6b7280"
        assert role.icon == "👤"
        assert role.is_system is False

    def test_duplicate_name_conflicts(self, db):
        role_service.create_role(db, name="Auditor")
        with pytest.raises(ResourceConflictError):
            role_service.create_role(db, name="Auditor")

    def test_duplicate_permission_names_are_collapsed(self, db):
        role = role_service.create_role(db, name="Dup", permissions=["a", "a", "b"])
        assert role_service.linked_permission_names(db, role.id) == ["a", "b"]


class TestUpdateRole:

    def test_permission_list_replaces_links_exactly(self, db):
        role = role_service.create_role(db, name="Shifting", permissions=["a", "b"])

        role_service.update_role(db, role.id, permissions=["b", "c"])

        assert role_service.linked_permission_names(db, role.id) == ["b", "c"]
        assert db.query(RolePermission).filter(RolePermission.role_id == role.id).count() == 2
        assert sorted(role.json_permissions) == ["b", "c"]

    def test_empty_list_clears_links(self, db):
        role = role_service.create_role(db, name="Shrinking", permissions=["a"])
        role_service.update_role(db, role.id, permissions=[])
        assert role_service.linked_permission_names(db, role.id) == []

    def test_omitted_permissions_leave_links_alone(self, db):
        role = role_service.create_role(db, name="Stable", permissions=["a"])
        role_service.update_role(db, role.id, description="New description")
        assert role_service.linked_permission_names(db, role.id) == ["a"]
        assert role.description == "New description"

    def test_rename_clash_conflicts(self, db):
        role_service.create_role(db, name="First")
        second = role_service.create_role(db, name="Second")
        with pytest.raises(ResourceConflictError):
            role_service.update_role(db, second.id, name="First")

    def test_unknown_role(self, db):
        with pytest.raises(ResourceNotFoundError):
            role_service.update_role(db, 404, name="Ghost")

    def test_holders_see_new_permissions(self, db, make_user):
        role = role_service.create_role(db, name="Growing", permissions=["a"])
        user = make_user(role_id=role.id)

        role_service.update_role(db, role.id, permissions=["a", "payroll.view"])
        db.expire_all()

        assert "payroll.view" in permission_resolver.resolve(db, user.id)


class TestDeleteRole:

    def test_system_role_is_protected(self, db):
        role = role_service.create_role(db, name="Core", is_system=True)
        with pytest.raises(ProtectedResourceError) as exc_info:
            role_service.delete_role(db, role.id)
        assert exc_info.value.status_code == 403

    def test_system_check_precedes_assignment_check(self, db, make_user):
        role = role_service.create_role(db, name="Core", is_system=True)
        make_user(role_id=role.id)
        with pytest.raises(ProtectedResourceError):
            role_service.delete_role(db, role.id)

    def test_assigned_role_cannot_be_deleted(self, db, make_user):
        role = role_service.create_role(db, name="Busy")
        make_user(role_id=role.id)
        make_user(role_id=role.id)
        with pytest.raises(ResourceConflictError) as exc_info:
            role_service.delete_role(db, role.id)
        assert "2 user(s)" in exc_info.value.message

    def test_delete_removes_role_and_links(self, db):
        role = role_service.create_role(db, name="Temp", permissions=["a", "b"])
        role_id = role.id

        role_service.delete_role(db, role_id)

        assert db.query(Role).filter(Role.id == role_id).first() is None
        assert db.query(RolePermission).filter(RolePermission.role_id == role_id).count() == 0
        assert db.query(Permission).filter(Permission.name == "a").count() == 1


class TestAssignRole:

    def test_assign_sets_role_id(self, db, make_user):
        role = role_service.create_role(db, name="Reporter", permissions=["reports.create"])
        user = make_user(role=LegacyRole.EMPLOYEE)

        updated = role_service.assign_role(db, user.id, role.id)

        assert updated.role_id == role.id
        assert "reports.create" in permission_resolver.resolve(db, user.id)

    def test_unknown_user(self, db):
        role = role_service.create_role(db, name="Reporter")
        with pytest.raises(ResourceNotFoundError):
            role_service.assign_role(db, 999, role.id)

    def test_unknown_role(self, db, make_user):
        user = make_user()
        with pytest.raises(ResourceNotFoundError):
            role_service.assign_role(db, user.id, 999)


class TestInitializePredefinedRoles:

    def test_first_run_creates_all_system_roles(self, db):
        results = role_service.initialize_predefined_roles(db)

        assert [r["action"] for r in results] == ["created"] * len(PREDEFINED_ROLES)
        roles = db.query(Role).all()
        assert len(roles) == len(PREDEFINED_ROLES)
        assert all(role.is_system for role in roles)

    def test_second_run_is_a_no_op(self, db):
        role_service.initialize_predefined_roles(db)
        results = role_service.initialize_predefined_roles(db)
        assert {r["action"] for r in results} == {"exists"}

    def test_existing_role_gets_missing_permissions_merged(self, db):
        role_service.create_role(db, name="Employee", permissions=["custom.extra"])

        results = role_service.initialize_predefined_roles(db)

        by_name = {r["role"]: r["action"] for r in results}
        assert by_name["Employee"] == "updated"
        employee = db.query(Role).filter(Role.name == "Employee").one()
        assert "custom.extra" in employee.json_permissions
        expected = next(d for d in PREDEFINED_ROLES if d["name"] == "Employee")
        assert set(expected["permissions"]) <= set(employee.json_permissions)

    def test_users_of_predefined_role_resolve_its_permissions(self, db, make_user):
        role_service.initialize_predefined_roles(db)
        manager_role = db.query(Role).filter(Role.name == "Manager").one()
        user = make_user(role_id=manager_role.id)

        definition = next(d for d in PREDEFINED_ROLES if d["name"] == "Manager")
        assert set(definition["permissions"]) <= permission_resolver.resolve(db, user.id)

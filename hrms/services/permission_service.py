"""Permission catalog management."""

from typing import List, Dict, Any

from sqlalchemy import func
from sqlalchemy.orm import Session

from hrms.core.exceptions import ResourceNotFoundError, ResourceConflictError
from hrms.core.permission_catalog import DEFAULT_PERMISSION_DEFINITIONS
from hrms.models.permission import Permission
from hrms.models.role import Role, RolePermission

DEFAULT_GROUP_NAME = "Other"
DEFAULT_GROUP_ICON = "📋"


class PermissionService:
    """CRUD over the permission table, plus grouping for display."""

    @staticmethod
    def list_permissions(db: Session) -> List[Dict[str, Any]]:
        """All permissions ordered for display, each with its role count."""
        counts = dict(
            db.query(RolePermission.permission_id, func.count(RolePermission.id))
            .group_by(RolePermission.permission_id)
            .all()
        )
        permissions = (
            db.query(Permission)
            .order_by(Permission.group_name.asc(), Permission.sort_order.asc(), Permission.name.asc())
            .all()
        )
        return [
            {**PermissionService.to_dict(p), "role_count": counts.get(p.id, 0)}
            for p in permissions
        ]

    @staticmethod
    def permissions_by_group(db: Session) -> Dict[str, Dict[str, Any]]:
        groups: Dict[str, Dict[str, Any]] = {}
        permissions = (
            db.query(Permission)
            .order_by(Permission.group_name.asc(), Permission.sort_order.asc())
            .all()
        )
        for permission in permissions:
            group_name = permission.group_name or DEFAULT_GROUP_NAME
            group = groups.setdefault(
                group_name,
                {"icon": permission.group_icon or DEFAULT_GROUP_ICON, "permissions": []},
            )
            group["permissions"].append(PermissionService.to_dict(permission))
        return groups

    @staticmethod
    def permission_groups(db: Session) -> List[Dict[str, str]]:
        """Distinct display groups, first icon seen wins."""
        groups: Dict[str, str] = {}
        rows = (
            db.query(Permission.group_name, Permission.group_icon)
            .filter(Permission.group_name.isnot(None))
            .order_by(Permission.group_name.asc(), Permission.sort_order.asc())
            .all()
        )
        for group_name, group_icon in rows:
            groups.setdefault(group_name, group_icon or DEFAULT_GROUP_ICON)
        return [{"name": name, "icon": icon} for name, icon in groups.items()]

    @staticmethod
    def get_permission(db: Session, permission_id: int) -> Permission:
        permission = db.query(Permission).filter(Permission.id == permission_id).first()
        if not permission:
            raise ResourceNotFoundError(f"Permission {permission_id} not found")
        return permission

    @staticmethod
    def get_permission_detail(db: Session, permission_id: int) -> Dict[str, Any]:
        """A permission together with the roles linked to it."""
        permission = PermissionService.get_permission(db, permission_id)
        roles = (
            db.query(Role.id, Role.name)
            .join(RolePermission, RolePermission.role_id == Role.id)
            .filter(RolePermission.permission_id == permission_id)
            .order_by(Role.name.asc())
            .all()
        )
        return {
            **PermissionService.to_dict(permission),
            "roles": [{"id": role_id, "name": name} for role_id, name in roles],
        }

    @staticmethod
    def create_permission(db: Session, data: Dict[str, Any]) -> Permission:
        if db.query(Permission).filter(Permission.name == data["name"]).first():
            raise ResourceConflictError(f"Permission '{data['name']}' already exists")
        permission = Permission(**data)
        db.add(permission)
        db.commit()
        db.refresh(permission)
        return permission

    @staticmethod
    def update_permission(db: Session, permission_id: int, data: Dict[str, Any]) -> Permission:
        permission = PermissionService.get_permission(db, permission_id)

        new_name = data.get("name")
        if new_name and new_name != permission.name:
            if db.query(Permission).filter(Permission.name == new_name).first():
                raise ResourceConflictError(f"Permission '{new_name}' already exists")

        for key, value in data.items():
            if value is not None:
                setattr(permission, key, value)
        db.commit()
        db.refresh(permission)
        return permission

    @staticmethod
    def delete_permission(db: Session, permission_id: int) -> None:
        """Delete a permission after removing its role links."""
        permission = PermissionService.get_permission(db, permission_id)
        db.query(RolePermission).filter(RolePermission.permission_id == permission_id).delete()
        db.delete(permission)
        db.commit()

    @staticmethod
    def seed_defaults(db: Session) -> int:
        """Upsert the default permission catalog by name. Returns the number of rows touched."""
        for definition in DEFAULT_PERMISSION_DEFINITIONS:
            permission = db.query(Permission).filter(Permission.name == definition["name"]).first()
            if permission is None:
                db.add(Permission(description=definition["label"], **definition))
            else:
                permission.label = definition["label"]
                permission.group_name = definition["group_name"]
                permission.group_icon = definition["group_icon"]
                permission.sort_order = definition["sort_order"]
        db.commit()
        return len(DEFAULT_PERMISSION_DEFINITIONS)

    @staticmethod
    def to_dict(permission: Permission) -> Dict[str, Any]:
        return {
            "id": permission.id,
            "name": permission.name,
            "label": permission.label,
            "description": permission.description,
            "group_name": permission.group_name,
            "group_icon": permission.group_icon,
            "sort_order": permission.sort_order,
        }


permission_service = PermissionService()

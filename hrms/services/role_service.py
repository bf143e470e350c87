"""Role service: role CRUD, permission links and assignment."""

import logging
from typing import Optional, List, Dict, Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from hrms.core.config import settings
from hrms.core.exceptions import (
    ResourceNotFoundError, ResourceConflictError, ProtectedResourceError, ValidationError,
)
from hrms.core.permission_catalog import (
    SYSTEM_PERMISSIONS, PERMISSION_CATEGORIES, PREDEFINED_ROLES,
)
from hrms.models.permission import Permission
from hrms.models.role import Role, RolePermission
from hrms.models.user import User

logger = logging.getLogger(__name__)


def _unique(names: List[str]) -> List[str]:
    seen = set()
    result = []
    for name in names:
        if name not in seen:
            seen.add(name)
            result.append(name)
    return result


class RoleService:
    """Manages roles and keeps their relational permission links."""

    @staticmethod
    def ensure_permissions(db: Session, names: List[str]) -> List[Permission]:
        """Return Permission rows for ``names``, creating any that are missing."""
        names = _unique(names)
        if not names:
            return []
        if any(not name or not name.strip() for name in names):
            raise ValidationError("Permission names must not be blank")
        existing = {
            p.name: p
            for p in db.query(Permission).filter(Permission.name.in_(names)).all()
        }
        for name in names:
            if name not in existing:
                permission = Permission(name=name, label=name, description=name)
                db.add(permission)
                existing[name] = permission
                logger.info("Created missing permission '%s'", name)
        db.flush()
        return [existing[name] for name in names]

    @staticmethod
    def replace_role_permissions(db: Session, role: Role, names: List[str]) -> None:
        """Replace all relational links of ``role`` with exactly ``names``."""
        permissions = RoleService.ensure_permissions(db, names)
        db.query(RolePermission).filter(RolePermission.role_id == role.id).delete()
        db.flush()
        for permission in permissions:
            db.add(RolePermission(role_id=role.id, permission_id=permission.id))
        db.flush()
        db.expire(role, ["role_permissions"])

    @staticmethod
    def linked_permission_names(db: Session, role_id: int) -> List[str]:
        """Read a role's permission names from the join table."""
        rows = (
            db.query(Permission.name)
            .join(RolePermission, RolePermission.permission_id == Permission.id)
            .filter(RolePermission.role_id == role_id)
            .order_by(Permission.name)
            .all()
        )
        return [name for (name,) in rows]

    @staticmethod
    def user_count(db: Session, role_id: int) -> int:
        return db.query(User).filter(User.role_id == role_id).count()

    @staticmethod
    def serialize(db: Session, role: Role) -> Dict[str, Any]:
        """Role as a response dict, permissions re-read from the join table."""
        return {
            "id": role.id,
            "name": role.name,
            "description": role.description,
            "color": role.color,
            "icon": role.icon,
            "is_system": role.is_system,
            "permissions": RoleService.linked_permission_names(db, role.id),
            "user_count": RoleService.user_count(db, role.id),
            "created_at": role.created_at,
            "updated_at": role.updated_at,
        }

    @staticmethod
    def get_role(db: Session, role_id: int) -> Role:
        role = db.query(Role).filter(Role.id == role_id).first()
        if not role:
            raise ResourceNotFoundError(f"Role {role_id} not found")
        return role

    @staticmethod
    def list_roles(db: Session) -> List[Role]:
        return db.query(Role).order_by(Role.name.asc()).all()

    @staticmethod
    def create_role(
        db: Session,
        name: str,
        description: Optional[str] = None,
        color: Optional[str] = None,
        icon: Optional[str] = None,
        permissions: Optional[List[str]] = None,
        is_system: bool = False,
    ) -> Role:
        """Create a role and link it to ``permissions`` (missing ones are created)."""
        if db.query(Role).filter(Role.name == name).first():
            raise ResourceConflictError(f"A role named '{name}' already exists")

        permissions = _unique(permissions or [])
        role = Role(
            name=name,
            description=description,
            color=color or settings.DEFAULT_ROLE_COLOR,
            icon=icon or settings.DEFAULT_ROLE_ICON,
            is_system=is_system,
        )
        role.json_permissions = permissions
        db.add(role)
        db.flush()

        RoleService.replace_role_permissions(db, role, permissions)
        db.commit()
        db.refresh(role)
        return role

    @staticmethod
    def update_role(
        db: Session,
        role_id: int,
        name: Optional[str] = None,
        description: Optional[str] = None,
        color: Optional[str] = None,
        icon: Optional[str] = None,
        permissions: Optional[List[str]] = None,
    ) -> Role:
        """Update role metadata; a supplied permission list replaces all links."""
        role = RoleService.get_role(db, role_id)

        if name and name != role.name:
            clash = db.query(Role).filter(Role.name == name, Role.id != role_id).first()
            if clash:
                raise ResourceConflictError(f"A role named '{name}' already exists")
            role.name = name
        if description is not None:
            role.description = description
        if color is not None:
            role.color = color
        if icon is not None:
            role.icon = icon

        if permissions is not None:
            permissions = _unique(permissions)
            role.json_permissions = permissions
            RoleService.replace_role_permissions(db, role, permissions)

        db.commit()
        db.refresh(role)
        return role

    @staticmethod
    def delete_role(db: Session, role_id: int) -> None:
        """Delete a role unless it is a system role or still assigned."""
        role = RoleService.get_role(db, role_id)

        if role.is_system:
            raise ProtectedResourceError("System roles cannot be deleted")

        assigned = RoleService.user_count(db, role_id)
        if assigned > 0:
            raise ResourceConflictError(
                f"Cannot delete this role: {assigned} user(s) are still assigned to it"
            )

        db.delete(role)
        db.commit()

    @staticmethod
    def assign_role(db: Session, user_id: int, role_id: int) -> User:
        """Point a user's ``role_id`` at an existing role."""
        user = db.query(User).filter(User.id == user_id).first()
        if not user:
            raise ResourceNotFoundError(f"User {user_id} not found")
        role = RoleService.get_role(db, role_id)

        user.role_id = role.id
        db.commit()
        db.refresh(user)
        return user

    @staticmethod
    def available_permissions() -> Dict[str, Any]:
        return {
            "permissions": dict(SYSTEM_PERMISSIONS),
            "categories": dict(PERMISSION_CATEGORIES),
        }

    @staticmethod
    def initialize_predefined_roles(db: Session) -> List[Dict[str, Any]]:
        """Create missing system roles; merge predefined permissions into existing ones."""
        results = []
        for definition in PREDEFINED_ROLES:
            try:
                existing = db.query(Role).filter(Role.name == definition["name"]).first()
                if existing is None:
                    RoleService.create_role(
                        db,
                        name=definition["name"],
                        description=definition["description"],
                        color=definition["color"],
                        icon=definition["icon"],
                        permissions=definition["permissions"],
                        is_system=True,
                    )
                    results.append({"action": "created", "role": definition["name"]})
                    continue

                current = existing.json_permissions
                merged = _unique(current + definition["permissions"])
                if len(merged) != len(current):
                    existing.json_permissions = merged
                    db.commit()
                    results.append({"action": "updated", "role": definition["name"]})
                else:
                    results.append({"action": "exists", "role": definition["name"]})
            except SQLAlchemyError as e:
                db.rollback()
                logger.error("Failed to initialize role '%s': %s", definition["name"], e)
                results.append({"action": "error", "role": definition["name"], "error": str(e)})
        return results


role_service = RoleService()

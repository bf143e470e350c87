"""Effective permission resolution for a user.

A user's permissions come from three independently maintained sources:

* the static mapping of the legacy ``User.role`` enum,
* the ``role_permissions`` join rows of the assigned role,
* the assigned role's denormalized ``permissions_json`` array.

The effective set is their union. Disagreement between the sources is not
reported; the most permissive reading wins.
"""

import logging
from typing import FrozenSet, Optional

from sqlalchemy.orm import Session

from hrms.core.permission_catalog import (
    DEFAULT_PERMISSIONS, LEGACY_ROLE_PERMISSIONS, SYSTEM_ADMIN,
)
from hrms.models.user import User, LegacyRole

logger = logging.getLogger(__name__)


class PermissionResolver:
    """Computes the de-duplicated permission set a user holds."""

    @staticmethod
    def legacy_permissions(role: Optional[LegacyRole]) -> FrozenSet[str]:
        """Permissions implied by a legacy role; the default list when there is none."""
        if role is None:
            return frozenset(DEFAULT_PERMISSIONS)
        return frozenset(LEGACY_ROLE_PERMISSIONS.get(role, DEFAULT_PERMISSIONS))

    @staticmethod
    def resolve_user(user: User) -> FrozenSet[str]:
        """Union of legacy, relational and JSON permissions for a loaded user."""
        permissions = set(PermissionResolver.legacy_permissions(user.role))
        role = user.assigned_role
        if role is not None:
            permissions.update(role.linked_permission_names)
            permissions.update(role.json_permissions)
        return frozenset(permissions)

    @staticmethod
    def resolve(db: Session, user_id: int) -> FrozenSet[str]:
        """Resolve permissions by user id. Unknown users hold nothing."""
        user = db.query(User).filter(User.id == user_id).first()
        if user is None:
            logger.debug("Permission lookup for unknown user %s", user_id)
            return frozenset()
        return PermissionResolver.resolve_user(user)

    @staticmethod
    def has_permission(db: Session, user_id: int, permission: str) -> bool:
        """Check one permission, treating ``system.admin`` as a blanket grant."""
        permissions = PermissionResolver.resolve(db, user_id)
        return permission in permissions or SYSTEM_ADMIN in permissions


permission_resolver = PermissionResolver()

"""Models package: import all models so metadata.create_all can discover them."""

from hrms.models.permission import Permission
from hrms.models.role import Role, RolePermission
from hrms.models.user import User, LegacyRole
from hrms.models.menu_item import MenuItem
from hrms.models.audit_log import AuditLog
from hrms.models.refresh_token import RefreshToken

__all__ = [
    "Permission", "Role", "RolePermission",
    "User", "LegacyRole", "MenuItem",
    "AuditLog", "RefreshToken",
]

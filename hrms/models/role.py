"""Role and RolePermission models for RBAC."""

import json

from sqlalchemy import (
    Column, Integer, String, Text, Boolean, DateTime, ForeignKey, UniqueConstraint, func,
)
from sqlalchemy.orm import relationship
from hrms.db.base import Base


class Role(Base):
    """Admin-defined role.

    Permissions are held twice: as RolePermission rows and as a denormalized
    JSON list in ``permissions_json``. The two are maintained independently
    and merged at read time.
    """
    __tablename__ = "roles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), unique=True, nullable=False, index=True)
    description = Column(String(500), nullable=True)
    color = Column(String(20), nullable=True)
    icon = Column(String(20), nullable=True)
    is_system = Column(Boolean, default=False, nullable=False)
    permissions_json = Column(Text, nullable=True)  # JSON list of permission strings
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

    role_permissions = relationship(
        "RolePermission",
        back_populates="role",
        lazy="selectin",
        cascade="all, delete-orphan",
    )
    users = relationship("User", back_populates="assigned_role", lazy="select")

    @property
    def json_permissions(self) -> list[str]:
        """Decode ``permissions_json``; anything but a JSON list of strings reads as empty."""
        if not self.permissions_json:
            return []
        try:
            value = json.loads(self.permissions_json)
        except ValueError:
            return []
        if not isinstance(value, list):
            return []
        return [p for p in value if isinstance(p, str)]

    @json_permissions.setter
    def json_permissions(self, names: list[str]) -> None:
        self.permissions_json = json.dumps(list(names))

    @property
    def linked_permission_names(self) -> list[str]:
        """Permission names reached through the relational join table."""
        return [
            rp.permission.name
            for rp in self.role_permissions
            if rp.permission is not None
        ]


class RolePermission(Base):
    """Association between a role and a permission."""
    __tablename__ = "role_permissions"
    __table_args__ = (
        UniqueConstraint("role_id", "permission_id", name="uq_role_permission"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    role_id = Column(Integer, ForeignKey("roles.id", ondelete="CASCADE"), nullable=False, index=True)
    permission_id = Column(
        Integer, ForeignKey("permissions.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    created_at = Column(DateTime, server_default=func.now(), nullable=False)

    role = relationship("Role", back_populates="role_permissions")
    permission = relationship("Permission", back_populates="role_permissions", lazy="joined")

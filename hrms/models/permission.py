"""Permission model."""

from sqlalchemy import Column, Integer, String, DateTime, func
from sqlalchemy.orm import relationship
from hrms.db.base import Base


class Permission(Base):
    """Named capability string (e.g. ``leaves.approve``) grouped for display."""
    __tablename__ = "permissions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), unique=True, nullable=False, index=True)
    label = Column(String(255), nullable=True)
    description = Column(String(500), nullable=True)
    group_name = Column(String(100), nullable=True, index=True)
    group_icon = Column(String(20), nullable=True)
    sort_order = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

    role_permissions = relationship(
        "RolePermission",
        back_populates="permission",
        cascade="all, delete",
    )

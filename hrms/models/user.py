"""User model."""

import enum

from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, Enum, func
from sqlalchemy.orm import relationship
from hrms.db.base import Base


class LegacyRole(str, enum.Enum):
    """Fixed role stored on the user record, predating relational roles."""
    EMPLOYEE = "EMPLOYEE"
    MANAGER = "MANAGER"
    RH = "RH"
    ADMIN = "ADMIN"
    SUPER_ADMIN = "SUPER_ADMIN"


class User(Base):
    """Employee account. Never deleted; disabled through ``active``."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(100), unique=True, nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=True, index=True)
    full_name = Column(String(255), nullable=False)
    hashed_password = Column(String(255), nullable=False)
    role = Column(Enum(LegacyRole), nullable=True)
    role_id = Column(Integer, ForeignKey("roles.id"), nullable=True)
    active = Column(Boolean, default=True, nullable=False)
    last_login_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

    assigned_role = relationship("Role", back_populates="users", lazy="joined")

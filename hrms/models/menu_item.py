"""Navigation menu entries gated by permissions."""

from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from hrms.db.base import Base


class MenuItem(Base):
    """Sidebar entry; visible when the user holds ``permission`` (or none is set)."""
    __tablename__ = "menu_items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    path = Column(String(255), nullable=True)
    icon = Column(String(50), nullable=True)
    section = Column(String(100), nullable=True)
    sort_order = Column(Integer, default=0, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    parent_id = Column(Integer, ForeignKey("menu_items.id", ondelete="SET NULL"), nullable=True)
    permission_id = Column(Integer, ForeignKey("permissions.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

    permission = relationship("Permission", lazy="joined")
    parent = relationship("MenuItem", remote_side=[id], back_populates="children")
    children = relationship(
        "MenuItem",
        back_populates="parent",
        lazy="selectin",
        order_by="MenuItem.sort_order",
    )

    @property
    def permission_name(self):
        return self.permission.name if self.permission else None

"""Seed the default permission catalog and navigation menus."""

from sqlalchemy.orm import Session

from hrms.services.permission_service import permission_service
from hrms.services.menu_service import menu_service


def seed_permissions(db: Session) -> None:
    """Upsert default permissions, then rebuild the default menu tree."""
    count = permission_service.seed_defaults(db)
    print(f"✅ Seeded {count} permissions")

    menus = menu_service.seed_defaults(db)
    print(f"✅ Seeded {menus} menu items")

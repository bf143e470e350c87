"""Seed the super-admin user from env vars."""

from sqlalchemy.orm import Session
from hrms.models.user import User, LegacyRole
from hrms.models.role import Role
from hrms.core.security import hash_password
from hrms.core.config import settings

SUPER_ADMIN_ROLE_NAME = "Super Administrator"


def seed_super_admin(db: Session) -> None:
    """Create the super-admin user if not already present."""
    super_admin_role = db.query(Role).filter(Role.name == SUPER_ADMIN_ROLE_NAME).first()
    if not super_admin_role:
        print("⚠️  Super Administrator role not found. Run seed_roles first.")
        return

    existing = db.query(User).filter(User.username == settings.SUPER_ADMIN_USERNAME).first()
    if existing:
        print(f"ℹ️  Super admin '{settings.SUPER_ADMIN_USERNAME}' already exists, skipping.")
        return

    admin = User(
        username=settings.SUPER_ADMIN_USERNAME,
        email=settings.SUPER_ADMIN_EMAIL,
        hashed_password=hash_password(settings.SUPER_ADMIN_PASSWORD),
        full_name="Super Admin",
        active=True,
        role=LegacyRole.SUPER_ADMIN,
        role_id=super_admin_role.id,
    )
    db.add(admin)
    db.commit()
    print(f"✅ Created super admin: {settings.SUPER_ADMIN_USERNAME}")

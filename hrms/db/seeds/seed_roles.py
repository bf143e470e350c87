"""Seed the predefined system roles into the database."""

from sqlalchemy.orm import Session

from hrms.services.role_service import role_service


def seed_roles(db: Session) -> None:
    """Insert predefined roles if they don't already exist."""
    results = role_service.initialize_predefined_roles(db)
    for result in results:
        if result["action"] == "error":
            print(f"⚠️  {result['role']}: {result['error']}")
    created = sum(1 for r in results if r["action"] == "created")
    print(f"✅ Seeded {len(results)} roles ({created} new)")

"""Seed the system roles into the database."""

from sqlalchemy.orm import Session

from catalog_admin.core.permissions import SYSTEM_ROLES
from catalog_admin.db.json_columns import dump_list
from catalog_admin.models.role import Role
from catalog_admin.services.role_service import role_service


def seed_roles(db: Session) -> None:
    """Insert the system roles if they don't already exist.

    Existing rows are left untouched so page access edited by admins survives reseeding.
    """
    for role_data in SYSTEM_ROLES:
        existing = db.query(Role).filter(Role.name == role_data["name"]).first()
        if not existing:
            db.add(Role(
                name=role_data["name"],
                level=role_data["level"],
                description=role_data["description"],
                permissions_json=dump_list(role_data["permissions"]),
                allowed_pages_json=dump_list(role_data["allowed_pages"]),
                is_system=True,
            ))

    db.commit()
    role_service.invalidate()
    print(f"✅ Seeded {len(SYSTEM_ROLES)} roles")

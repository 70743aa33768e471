"""Seed the super-admin account from env vars."""

from sqlalchemy.orm import Session
from catalog_admin.models.user import User, VerificationStatus
from catalog_admin.models.role import Role
from catalog_admin.core.config import settings


def seed_super_admin(db: Session) -> None:
    """Create the super-admin user if not already present.

    The account starts pending; it becomes verified on its first external sign-in.
    """
    super_admin_role = db.query(Role).filter(Role.name == "Super Admin").first()
    if not super_admin_role:
        print("⚠️  Super Admin role not found. Run seed_roles first.")
        return

    email = settings.SUPER_ADMIN_EMAIL.strip().lower()
    existing = db.query(User).filter(User.email == email).first()
    if existing:
        print(f"ℹ️  Super admin '{email}' already exists, skipping.")
        return

    admin = User(
        email=email,
        first_name="Super",
        last_name="Admin",
        is_active=True,
        verification_status=VerificationStatus.pending,
        role_id=super_admin_role.id,
    )
    db.add(admin)
    db.commit()
    print(f"✅ Created super admin: {email}")

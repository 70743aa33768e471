"""Models package — import all models so metadata sees every table."""

from catalog_admin.models.role import Role
from catalog_admin.models.user import User, VerificationStatus
from catalog_admin.models.invitation import Invitation, InvitationStatus
from catalog_admin.models.company import Company
from catalog_admin.models.product import Product
from catalog_admin.models.audit_log import AuditLog

__all__ = [
    "Role", "User", "VerificationStatus", "Invitation", "InvitationStatus",
    "Company", "Product", "AuditLog",
]

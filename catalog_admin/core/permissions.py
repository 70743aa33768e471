"""Permission catalog and the seeded system role hierarchy.

Permission keys are fixed at build time. The metadata here is used for display
and validation only; enforcement goes through ``core.authorization``.
"""

from dataclasses import dataclass
from typing import Dict, List

from catalog_admin.core.pages import PAGE_PATHS

ALL_ACCESS = "all_access"

MAX_SYSTEM_LEVEL = 100
MAX_CUSTOM_ROLE_LEVEL = 90


@dataclass(frozen=True)
class PermissionInfo:
    key: str
    name: str
    description: str
    category: str


PERMISSIONS: Dict[str, PermissionInfo] = {
    info.key: info
    for info in (
        PermissionInfo(ALL_ACCESS, "All Access",
                       "Complete system access - can perform any action", "System"),
        PermissionInfo("manage_users", "Manage Users",
                       "Create, edit, and deactivate admin users with lower role levels",
                       "User Management"),
        PermissionInfo("manage_roles", "Manage Roles",
                       "Create and modify custom roles and their permissions", "User Management"),
        PermissionInfo("manage_products", "Manage Products",
                       "Create, edit, delete, and activate/deactivate products",
                       "Content Management"),
        PermissionInfo("view_products", "View Products",
                       "View product listings and details (read-only)", "Content Management"),
        PermissionInfo("manage_categories", "Manage Categories",
                       "Create, edit, delete, and activate/deactivate categories",
                       "Content Management"),
        PermissionInfo("view_categories", "View Categories",
                       "View category listings (read-only)", "Content Management"),
        PermissionInfo("manage_brands", "Manage Brands",
                       "Create, edit, delete, and activate/deactivate brands",
                       "Content Management"),
        PermissionInfo("view_analytics", "View Analytics",
                       "Access analytics dashboard and view performance metrics", "Analytics"),
        PermissionInfo("manage_emails", "Manage Emails",
                       "View, reply to, and manage all support emails", "Support"),
        PermissionInfo("view_emails", "View Emails",
                       "View support emails (read-only)", "Support"),
        PermissionInfo("reply_emails", "Reply to Emails",
                       "Send replies to support emails", "Support"),
        PermissionInfo("manage_support_staff", "Manage Support Staff",
                       "Manage support team members and their assignments", "Support"),
    )
}


def is_known_permission(key: str) -> bool:
    return key in PERMISSIONS


def permissions_by_category() -> Dict[str, List[PermissionInfo]]:
    grouped: Dict[str, List[PermissionInfo]] = {}
    for info in PERMISSIONS.values():
        grouped.setdefault(info.category, []).append(info)
    return grouped


_BASE_PAGES = ["/", "/profile"]

# Seed data for the system roles, ordered from the apex down.
SYSTEM_ROLES = [
    {
        "name": "Super Admin",
        "level": 100,
        "description": "Full system administrator with all permissions",
        "permissions": [
            "manage_users", "manage_roles", "manage_products", "manage_categories",
            "manage_brands", "view_analytics", "manage_emails", ALL_ACCESS,
        ],
        "allowed_pages": sorted(PAGE_PATHS),
    },
    {
        "name": "Admin",
        "level": 80,
        "description": "Administrator who can manage most aspects of the system",
        "permissions": [
            "manage_users", "manage_products", "manage_categories",
            "manage_brands", "view_analytics", "manage_emails",
        ],
        "allowed_pages": sorted(PAGE_PATHS),
    },
    {
        "name": "Category Manager",
        "level": 60,
        "description": "Manages product categories and related products",
        "permissions": ["manage_categories", "manage_products", "view_analytics"],
        "allowed_pages": _BASE_PAGES + ["/products", "/categories", "/analytics"],
    },
    {
        "name": "Product Manager",
        "level": 50,
        "description": "Manages product catalog and inventory",
        "permissions": ["manage_products", "view_products", "view_analytics"],
        "allowed_pages": _BASE_PAGES + ["/products", "/company-infos", "/analytics"],
    },
    {
        "name": "Support Manager",
        "level": 40,
        "description": "Manages customer support team and emails",
        "permissions": ["manage_emails", "view_emails", "manage_support_staff"],
        "allowed_pages": _BASE_PAGES + ["/emails"],
    },
    {
        "name": "Support Staff",
        "level": 20,
        "description": "Handles customer support inquiries",
        "permissions": ["view_emails", "reply_emails"],
        "allowed_pages": _BASE_PAGES + ["/emails"],
    },
    {
        "name": "Viewer",
        "level": 10,
        "description": "Read-only access to view content",
        "permissions": ["view_products", "view_categories", "view_analytics"],
        "allowed_pages": _BASE_PAGES + ["/products", "/categories", "/analytics"],
    },
]

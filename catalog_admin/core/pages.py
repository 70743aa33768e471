"""Registry of navigable admin dashboard pages."""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Set


@dataclass(frozen=True)
class AdminPage:
    path: str
    name: str
    description: str
    category: str


ADMIN_PAGES = (
    AdminPage("/", "Dashboard", "Overview and statistics", "Main"),
    AdminPage("/products", "Products", "Manage product catalog", "Content"),
    AdminPage("/categories", "Categories", "Manage product categories", "Content"),
    AdminPage("/company-infos", "Company Infos", "Manage company information", "Content"),
    AdminPage("/users", "Users", "Manage admin users", "Administration"),
    AdminPage("/roles", "Roles & Permissions", "Manage roles and page access", "Administration"),
    AdminPage("/emails", "Support Emails", "Manage customer support emails", "Support"),
    AdminPage("/analytics", "Analytics", "View performance metrics and insights", "Analytics"),
    AdminPage("/profile", "Profile", "User profile settings", "Personal"),
)

_PAGES_BY_PATH = {page.path: page for page in ADMIN_PAGES}

PAGE_PATHS = frozenset(_PAGES_BY_PATH)


def is_known_page(path: str) -> bool:
    return path in _PAGES_BY_PATH


def get_page(path: str) -> Optional[AdminPage]:
    return _PAGES_BY_PATH.get(path)


def unknown_pages(paths: Iterable[str]) -> Set[str]:
    """Return the subset of paths that are not registered pages."""
    return {p for p in paths if p not in _PAGES_BY_PATH}


def pages_by_category() -> Dict[str, List[AdminPage]]:
    """Group pages by category, preserving registry order."""
    grouped: Dict[str, List[AdminPage]] = {}
    for page in ADMIN_PAGES:
        grouped.setdefault(page.category, []).append(page)
    return grouped

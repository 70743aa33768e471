"""Role hierarchy decisions: management, assignment, permissions, pages, scope.

Every function here is pure and total. A missing role or an unknown page
always yields the "no access" answer (level 0, ``False`` or an empty list)
rather than an exception; the API layer turns those answers into 403 responses.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, List, Optional

from catalog_admin.core.pages import ADMIN_PAGES, AdminPage
from catalog_admin.core.permissions import ALL_ACCESS, MAX_SYSTEM_LEVEL


@dataclass(frozen=True)
class RoleRecord:
    """Immutable snapshot of a role row, as consumed by the decision functions."""

    id: int
    name: str
    level: int
    permissions: FrozenSet[str] = field(default_factory=frozenset)
    allowed_pages: FrozenSet[str] = field(default_factory=frozenset)
    is_system: bool = False
    description: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "level": self.level,
            "permissions": sorted(self.permissions),
            "allowed_pages": sorted(self.allowed_pages),
            "is_system": self.is_system,
            "description": self.description,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RoleRecord":
        return cls(
            id=data["id"],
            name=data["name"],
            level=data["level"],
            permissions=frozenset(data.get("permissions") or ()),
            allowed_pages=frozenset(data.get("allowed_pages") or ()),
            is_system=bool(data.get("is_system")),
            description=data.get("description"),
        )


def role_level(role: Optional[RoleRecord]) -> int:
    """Authority rank of a role; no role means level 0."""
    if role is None:
        return 0
    return role.level


def can_manage(actor_role: Optional[RoleRecord], target_role: Optional[RoleRecord]) -> bool:
    """True when the actor strictly outranks the target.

    Peers never manage each other, so nobody can demote or deactivate
    themselves through this check.
    """
    return role_level(actor_role) > role_level(target_role)


def apex_level(roles: Iterable[RoleRecord]) -> int:
    """Highest level among the system roles, or ``MAX_SYSTEM_LEVEL`` if none are known."""
    levels = [r.level for r in roles if r.is_system]
    return max(levels) if levels else MAX_SYSTEM_LEVEL


def assignable_roles(
    actor_role: Optional[RoleRecord], roles: Iterable[RoleRecord]
) -> List[RoleRecord]:
    """Roles the actor may grant to other users.

    The apex tier may grant any role, including its own. Every other role may
    only grant roles strictly below its level.
    """
    roles = list(roles)
    level = role_level(actor_role)
    if level <= 0:
        return []
    if level >= apex_level(roles):
        candidates = roles
    else:
        candidates = [r for r in roles if r.level < level]
    return sorted(candidates, key=lambda r: (-r.level, r.name))


def can_assign(
    actor_role: Optional[RoleRecord], role: Optional[RoleRecord], roles: Iterable[RoleRecord]
) -> bool:
    if role is None:
        return False
    return any(r.id == role.id for r in assignable_roles(actor_role, roles))


def has_permission(role: Optional[RoleRecord], permission: str) -> bool:
    """Direct grant, or any key at all when the role holds ``all_access``."""
    if role is None:
        return False
    return permission in role.permissions or ALL_ACCESS in role.permissions


def visible_pages(role: Optional[RoleRecord]) -> List[AdminPage]:
    """Registered pages the role may see, in registry order.

    Stale paths in ``allowed_pages`` that are no longer registered are dropped.
    """
    if role is None:
        return []
    return [page for page in ADMIN_PAGES if page.path in role.allowed_pages]


def can_view_page(role: Optional[RoleRecord], path: str) -> bool:
    return any(page.path == path for page in visible_pages(role))


def is_in_scope(company_ids: Optional[Iterable[int]], owner_id: Optional[int]) -> bool:
    """Company scoping: an empty scope is unrestricted.

    A restricted user never sees resources without an owning company.
    """
    scope = set(company_ids or ())
    if not scope:
        return True
    return owner_id is not None and owner_id in scope

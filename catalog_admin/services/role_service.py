"""Role registry — storage of roles and the snapshot table used for decisions.

No authorization happens here; callers check the actor first.
"""

import logging
from typing import List, Optional, Iterable

from sqlalchemy.orm import Session

from catalog_admin.core.authorization import RoleRecord
from catalog_admin.core.config import settings
from catalog_admin.core.exceptions import (
    ForbiddenError, InvalidPageReferenceError, ResourceConflictError,
    ResourceNotFoundError, ValidationError,
)
from catalog_admin.core.pages import unknown_pages
from catalog_admin.core.permissions import MAX_CUSTOM_ROLE_LEVEL, is_known_permission
from catalog_admin.db.json_columns import dump_list, load_list
from catalog_admin.models.role import Role
from catalog_admin.models.user import User
from catalog_admin.models.invitation import Invitation
from catalog_admin.services.cache_service import cache_service

logger = logging.getLogger("catalog_admin.roles")

ROLE_CACHE_KEY = "roles:records"


class RoleService:
    """Reads and writes roles; keeps the cached snapshot table in sync."""

    @staticmethod
    def to_record(role: Optional[Role]) -> Optional[RoleRecord]:
        """Build the immutable snapshot of a role row (``None`` stays ``None``)."""
        if role is None:
            return None
        return RoleRecord(
            id=role.id,
            name=role.name,
            level=role.level,
            permissions=frozenset(load_list(role.permissions_json)),
            allowed_pages=frozenset(load_list(role.allowed_pages_json)),
            is_system=bool(role.is_system),
            description=role.description,
        )

    @staticmethod
    def list_records(db: Session) -> List[RoleRecord]:
        """All role snapshots, highest level first. Served from Redis when warm."""
        cached = cache_service.get_json(ROLE_CACHE_KEY)
        if cached is not None:
            return [RoleRecord.from_dict(item) for item in cached]

        records = [RoleService.to_record(r) for r in RoleService.list_roles(db)]
        cache_service.set_json(
            ROLE_CACHE_KEY,
            [r.to_dict() for r in records],
            settings.ROLE_CACHE_TTL_SECONDS,
        )
        return records

    @staticmethod
    def invalidate() -> None:
        cache_service.delete(ROLE_CACHE_KEY)

    @staticmethod
    def get_role(db: Session, role_id: int) -> Role:
        role = db.query(Role).filter(Role.id == role_id).first()
        if not role:
            raise ResourceNotFoundError(f"Role {role_id} not found")
        return role

    @staticmethod
    def list_roles(db: Session) -> List[Role]:
        return db.query(Role).order_by(Role.level.desc(), Role.name).all()

    @staticmethod
    def update_allowed_pages(db: Session, role_id: int, pages: Iterable[str]) -> Role:
        """Replace the role's allowed-page set.

        Raises:
            InvalidPageReferenceError: If any path is not a registered page.
            ResourceNotFoundError: If the role does not exist.
        """
        pages = set(pages)
        unknown = unknown_pages(pages)
        if unknown:
            raise InvalidPageReferenceError(unknown)

        role = RoleService.get_role(db, role_id)
        role.allowed_pages_json = dump_list(pages)
        db.commit()
        db.refresh(role)
        RoleService.invalidate()
        logger.info("Role %s allowed pages set to %s", role.name, sorted(pages))
        return role

    @staticmethod
    def create_role(
        db: Session,
        name: str,
        level: int,
        permissions: Iterable[str] = (),
        allowed_pages: Iterable[str] = (),
        description: Optional[str] = None,
    ) -> Role:
        """Create a custom (non-system) role."""
        if level < 1 or level > MAX_CUSTOM_ROLE_LEVEL:
            raise ValidationError(
                f"Custom role level must be between 1 and {MAX_CUSTOM_ROLE_LEVEL}"
            )
        permissions = set(permissions)
        bad = sorted(p for p in permissions if not is_known_permission(p))
        if bad:
            raise ValidationError(f"Unknown permission(s): {', '.join(bad)}")
        allowed_pages = set(allowed_pages)
        unknown = unknown_pages(allowed_pages)
        if unknown:
            raise InvalidPageReferenceError(unknown)

        if db.query(Role).filter(Role.name == name).first():
            raise ResourceConflictError(f"Role '{name}' already exists")

        role = Role(
            name=name,
            level=level,
            permissions_json=dump_list(permissions),
            allowed_pages_json=dump_list(allowed_pages),
            is_system=False,
            description=description,
        )
        db.add(role)
        db.commit()
        db.refresh(role)
        RoleService.invalidate()
        logger.info("Created custom role %s (level %s)", name, level)
        return role

    @staticmethod
    def delete_role(db: Session, role_id: int) -> None:
        """Delete a custom role that no user or invitation refers to."""
        role = RoleService.get_role(db, role_id)
        if role.is_system:
            raise ForbiddenError(f"System role '{role.name}' cannot be deleted")

        in_use = (
            db.query(User).filter(User.role_id == role_id).count()
            + db.query(Invitation).filter(Invitation.role_id == role_id).count()
        )
        if in_use:
            raise ResourceConflictError(f"Role '{role.name}' is still assigned")

        name = role.name
        db.delete(role)
        db.commit()
        RoleService.invalidate()
        logger.info("Deleted custom role %s", name)


role_service = RoleService()

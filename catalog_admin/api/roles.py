"""Roles API router — role registry, page access and the static catalogs."""

from typing import Dict, List

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from catalog_admin.api.serializers import role_out
from catalog_admin.core.authorization import apex_level, can_assign, has_permission, role_level
from catalog_admin.core.exceptions import ForbiddenError
from catalog_admin.core.pages import pages_by_category
from catalog_admin.core.permissions import ALL_ACCESS, permissions_by_category
from catalog_admin.core.security import (
    Actor, get_current_actor, require_manage_roles, require_manage_users, require_roles_page,
)
from catalog_admin.db.session import get_db
from catalog_admin.schemas.schemas import (
    MessageResponse, PageOut, PermissionOut, RoleCreate, RoleOut, RolePagesUpdate,
)
from catalog_admin.services.audit_service import audit_service
from catalog_admin.services.role_service import role_service

router = APIRouter(prefix="/admin", tags=["roles"])


@router.get("/roles", response_model=List[RoleOut])
async def list_roles(
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_roles_page),
):
    """List every role, highest level first."""
    return [role_out(r) for r in role_service.list_records(db)]


@router.get("/roles/{role_id}", response_model=RoleOut)
async def get_role(
    role_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_roles_page),
):
    return role_out(role_service.to_record(role_service.get_role(db, role_id)))


@router.post("/roles", response_model=RoleOut, status_code=201)
async def create_role(
    body: RoleCreate,
    request: Request,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_manage_roles),
):
    """Create a custom role.

    Below the apex tier, the new role must sit below the actor's level and hold
    only permissions the actor has; ``all_access`` is never grantable there.
    """
    records = role_service.list_records(db)
    if role_level(actor.role) < apex_level(records):
        if body.level >= role_level(actor.role):
            raise ForbiddenError("Forbidden: Custom role level must be below your own")
        if ALL_ACCESS in body.permissions:
            raise ForbiddenError(f"Forbidden: Only the top role tier can grant {ALL_ACCESS}")
        missing = sorted(p for p in set(body.permissions) if not has_permission(actor.role, p))
        if missing:
            raise ForbiddenError(f"Forbidden: Cannot grant permissions you lack: {', '.join(missing)}")

    role = role_service.create_role(
        db, body.name, body.level, body.permissions, body.allowed_pages, body.description,
    )
    record = role_service.to_record(role)
    audit_service.record(
        db, request, actor, "role.created", "role", record.id,
        new_value=record.to_dict(),
    )
    return role_out(record)


@router.patch("/roles/{role_id}/pages", response_model=RoleOut)
async def update_role_pages(
    role_id: int,
    body: RolePagesUpdate,
    request: Request,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_manage_users),
):
    """Replace the set of dashboard pages a role may open."""
    target = role_service.to_record(role_service.get_role(db, role_id))
    if not can_assign(actor.role, target, role_service.list_records(db)):
        raise ForbiddenError("Forbidden: Cannot modify this role")

    role = role_service.update_allowed_pages(db, role_id, body.allowed_pages)
    record = role_service.to_record(role)
    audit_service.record(
        db, request, actor, "role.pages_updated", "role", role_id,
        old_value=sorted(target.allowed_pages),
        new_value=sorted(record.allowed_pages),
    )
    return role_out(record)


@router.delete("/roles/{role_id}", response_model=MessageResponse)
async def delete_role(
    role_id: int,
    request: Request,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_manage_roles),
):
    """Delete an unused custom role."""
    target = role_service.to_record(role_service.get_role(db, role_id))
    if not can_assign(actor.role, target, role_service.list_records(db)):
        raise ForbiddenError("Forbidden: Cannot modify this role")

    role_service.delete_role(db, role_id)
    audit_service.record(
        db, request, actor, "role.deleted", "role", role_id,
        old_value=target.to_dict(),
    )
    return MessageResponse(message="Role deleted")


@router.get("/permissions", response_model=Dict[str, List[PermissionOut]])
async def list_permissions(actor: Actor = Depends(get_current_actor)):
    """Permission catalog grouped by category."""
    return {
        category: [PermissionOut.model_validate(p) for p in infos]
        for category, infos in permissions_by_category().items()
    }


@router.get("/pages", response_model=Dict[str, List[PageOut]])
async def list_pages(actor: Actor = Depends(get_current_actor)):
    """Page registry grouped by category."""
    return {
        category: [PageOut.model_validate(p) for p in pages]
        for category, pages in pages_by_category().items()
    }

"""Users API router — listing, role assignment, status and invitations."""

from typing import List

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from catalog_admin.api.serializers import invitation_out, user_out
from catalog_admin.core.security import (
    Actor, get_current_actor, require_user_admin,
)
from catalog_admin.db.session import get_db
from catalog_admin.schemas.schemas import (
    InvitationOut, InviteRequest, MessageResponse, ProfileUpdateRequest,
    RoleAssignRequest, StatusUpdateRequest, UserOut,
)
from catalog_admin.services.audit_service import audit_service
from catalog_admin.services.user_service import user_service

router = APIRouter(prefix="/admin", tags=["users"])


@router.get("/users")
async def list_users(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_user_admin),
):
    """List all users."""
    result = user_service.list_users(db, page, page_size)
    return {
        "users": [user_out(u) for u in result["users"]],
        "total": result["total"],
        "page": result["page"],
    }


@router.get("/users/{user_id}", response_model=UserOut)
async def get_user(
    user_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_user_admin),
):
    return user_out(user_service.get_user(db, user_id))


@router.patch("/users/{user_id}", response_model=UserOut)
async def update_profile(
    user_id: int,
    body: ProfileUpdateRequest,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    """Update your own name."""
    user = user_service.update_profile(db, actor, user_id, body.first_name, body.last_name)
    return user_out(user)


@router.patch("/users/{user_id}/role", response_model=UserOut)
async def change_user_role(
    user_id: int,
    body: RoleAssignRequest,
    request: Request,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_user_admin),
):
    """Assign a role and company scope to a user you outrank."""
    before = user_out(user_service.get_user(db, user_id))
    user = user_service.change_role(db, actor, user_id, body.role_id, body.company_ids)
    audit_service.record(
        db, request, actor, "user.role_changed", "user", user_id,
        old_value={"role_id": before.role_id, "company_ids": before.company_ids},
        new_value={"role_id": body.role_id, "company_ids": user_out(user).company_ids},
    )
    return user_out(user)


@router.patch("/users/{user_id}/status", response_model=UserOut)
async def set_user_status(
    user_id: int,
    body: StatusUpdateRequest,
    request: Request,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_user_admin),
):
    """Activate or deactivate a user you outrank."""
    user = user_service.set_active(db, actor, user_id, body.is_active)
    action = "user.activated" if body.is_active else "user.deactivated"
    audit_service.record(db, request, actor, action, "user", user_id)
    return user_out(user)


@router.post("/users/invite", response_model=InvitationOut, status_code=201)
async def invite_user(
    body: InviteRequest,
    request: Request,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_user_admin),
):
    """Pre-assign a role to an email; it takes effect on first sign-in."""
    invitation = user_service.invite_user(db, actor, body.email, body.role_id, body.company_ids)
    result = invitation_out(invitation)
    audit_service.record(
        db, request, actor, "invitation.created", "invitation", result.id,
        new_value={"email": result.email, "role_id": result.role_id, "company_ids": result.company_ids},
    )
    return result


@router.get("/invitations", response_model=List[InvitationOut])
async def list_invitations(
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_user_admin),
):
    return [invitation_out(i) for i in user_service.list_invitations(db)]


@router.delete("/invitations/{invitation_id}", response_model=MessageResponse)
async def revoke_invitation(
    invitation_id: int,
    request: Request,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_user_admin),
):
    email = user_service.revoke_invitation(db, actor, invitation_id)
    audit_service.record(
        db, request, actor, "invitation.revoked", "invitation", invitation_id,
        old_value={"email": email},
    )
    return MessageResponse(message="Invitation revoked")

"""Auth API router — external sign-in, current user and navigation."""

from typing import List

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from catalog_admin.api.serializers import role_out, user_out
from catalog_admin.core.authorization import assignable_roles, visible_pages
from catalog_admin.core.config import settings
from catalog_admin.core.rate_limiter import limiter
from catalog_admin.core.security import (
    Actor, create_access_token, decode_identity_token, get_current_actor,
)
from catalog_admin.db.session import get_db
from catalog_admin.schemas.schemas import (
    CurrentUserOut, PageOut, SessionRequest, TokenResponse,
)
from catalog_admin.services.audit_service import audit_service
from catalog_admin.services.role_service import role_service
from catalog_admin.services.user_service import user_service

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/session", response_model=TokenResponse)
@limiter.limit(settings.AUTH_RATE_LIMIT)
async def create_session(request: Request, body: SessionRequest, db: Session = Depends(get_db)):
    """Exchange an identity-provider token for an API access token.

    The first sign-in of an invited email promotes the invitation to a user.
    """
    claims = decode_identity_token(body.id_token)
    user = user_service.sign_in(
        db,
        claims["email"],
        external_id=claims.get("sub"),
        first_name=claims.get("given_name"),
        last_name=claims.get("family_name"),
        profile_image_url=claims.get("picture"),
    )
    audit_service.record(db, request, user, "user.login", "user", user.id)
    token = create_access_token({"sub": str(user.id), "email": user.email})
    return TokenResponse(access_token=token, user=user_out(user).model_dump(mode="json"))


@router.get("/me", response_model=CurrentUserOut)
async def get_me(
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    """Current user with their permissions, visible pages and assignable roles."""
    records = role_service.list_records(db)
    return CurrentUserOut(
        user=user_out(actor.user),
        permissions=sorted(actor.role.permissions) if actor.role else [],
        pages=[PageOut.model_validate(p) for p in visible_pages(actor.role)],
        assignable_roles=[role_out(r) for r in assignable_roles(actor.role, records)],
    )


@router.get("/pages", response_model=List[PageOut])
async def get_my_pages(actor: Actor = Depends(get_current_actor)):
    """Navigation entries for the current user's role."""
    return [PageOut.model_validate(p) for p in visible_pages(actor.role)]

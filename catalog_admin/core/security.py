"""JWT authentication and RBAC enforcement dependencies."""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Optional, List

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from catalog_admin.core.authorization import RoleRecord, can_view_page, has_permission
from catalog_admin.core.config import settings
from catalog_admin.core.exceptions import AuthenticationError
from catalog_admin.db.json_columns import load_list
from catalog_admin.db.session import get_db
from catalog_admin.models.user import User
from catalog_admin.services.role_service import role_service

logger = logging.getLogger("catalog_admin.security")

# JWT bearer scheme
security_scheme = HTTPBearer(auto_error=False)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create a JWT access token."""
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.JWT_EXPIRY_MINUTES)
    )
    to_encode.update({"exp": expire, "type": "access"})
    return jwt.encode(to_encode, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> dict:
    """Decode and validate a JWT token."""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
        return payload
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )


def decode_identity_token(token: str) -> dict:
    """Validate a token issued by the external identity provider.

    Raises:
        AuthenticationError: If the signature, audience or expiry is invalid,
            or the token carries no email.
    """
    try:
        claims = jwt.decode(
            token,
            settings.IDP_JWT_SECRET,
            algorithms=[settings.IDP_JWT_ALGORITHM],
            audience=settings.IDP_AUDIENCE,
        )
    except JWTError as e:
        raise AuthenticationError(f"Invalid identity token: {e}")
    if not claims.get("email"):
        raise AuthenticationError("Identity token has no email claim")
    return claims


async def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security_scheme),
) -> int:
    """Extract user_id from the JWT Bearer token."""
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    payload = decode_token(credentials.credentials)
    user_id = payload.get("sub")
    if user_id is None or payload.get("type") != "access":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload",
        )
    return int(user_id)


@dataclass
class Actor:
    """The authenticated user together with the snapshot of their role."""

    user: User
    role: Optional[RoleRecord]
    company_ids: List[int] = field(default_factory=list)

    @property
    def id(self) -> int:
        return self.user.id

    @property
    def email(self) -> str:
        return self.user.email


def build_actor(user: User) -> Actor:
    return Actor(
        user=user,
        role=role_service.to_record(user.role),
        company_ids=[int(c) for c in load_list(user.company_ids_json)],
    )


async def get_current_actor(
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
) -> Actor:
    """Resolve the authenticated actor and their role from storage."""
    user = db.query(User).filter(User.id == user_id).first()
    if not user or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found or deactivated",
        )
    return build_actor(user)


class RequirePermission:
    """Dependency that checks the actor's role grants any of the given permissions."""

    def __init__(self, *permissions: str):
        self.permissions = permissions

    async def __call__(self, actor: Actor = Depends(get_current_actor)) -> Actor:
        if not any(has_permission(actor.role, p) for p in self.permissions):
            logger.info(
                "Denied user %s: role %s lacks %s",
                actor.id, actor.role.name if actor.role else None, self.permissions,
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Requires permission: {' or '.join(self.permissions)}",
            )
        return actor


class RequirePage:
    """Dependency that checks a dashboard page is visible to the actor's role."""

    def __init__(self, path: str):
        self.path = path

    async def __call__(self, actor: Actor = Depends(get_current_actor)) -> Actor:
        if not can_view_page(actor.role, self.path):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Page '{self.path}' is not available to your role",
            )
        return actor


# Convenience dependency factories
require_user_admin = RequirePermission("manage_users", "manage_support_staff")
require_manage_users = RequirePermission("manage_users")
require_manage_roles = RequirePermission("manage_roles")
require_view_products = RequirePermission("view_products", "manage_products")
require_manage_products = RequirePermission("manage_products")
require_manage_brands = RequirePermission("manage_brands")
require_roles_page = RequirePage("/roles")

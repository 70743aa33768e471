"""Admin API router — audit trail, stats and health."""

from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from catalog_admin.core.security import Actor, require_manage_users
from catalog_admin.db.session import get_db
from catalog_admin.models.company import Company
from catalog_admin.models.invitation import Invitation
from catalog_admin.models.product import Product
from catalog_admin.models.role import Role
from catalog_admin.models.user import User
from catalog_admin.services.audit_service import audit_service
from catalog_admin.services.cache_service import cache_service

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/audit")
async def get_audit_logs(
    action: Optional[str] = Query(None, description="Exact action, or a prefix ending in '.'"),
    resource_type: Optional[str] = Query(None),
    resource_id: Optional[str] = Query(None),
    actor_id: Optional[int] = Query(None),
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=200),
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_manage_users),
):
    """Query the access-control audit trail."""
    result = audit_service.query_logs(
        db, actor_id, action, resource_type, resource_id, page, page_size,
    )
    return {
        "logs": [audit_service.to_dict(log) for log in result["logs"]],
        "total": result["total"],
        "page": result["page"],
    }


@router.get("/stats")
async def system_stats(
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_manage_users),
):
    """Get system-level counts."""
    return {
        "total_users": db.query(User).count(),
        "active_users": db.query(User).filter(User.is_active.is_(True)).count(),
        "pending_invitations": db.query(Invitation).count(),
        "total_roles": db.query(Role).count(),
        "total_companies": db.query(Company).count(),
        "total_products": db.query(Product).count(),
    }


@router.get("/health")
async def health_check(db: Session = Depends(get_db)):
    """System health check — database and Redis."""
    try:
        db.execute(text("SELECT 1"))
        db_ok = True
    except SQLAlchemyError:
        db_ok = False

    redis_ok = cache_service.health_check()

    return {
        "database": "ok" if db_ok else "error",
        "redis": "ok" if redis_ok else "error",
        "status": "healthy" if db_ok else "degraded",
    }

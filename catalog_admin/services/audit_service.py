"""Audit service — append-only trail of sign-ins and access-control changes."""

import json
import logging
from typing import Any, Dict, Optional

from fastapi import Request
from sqlalchemy.orm import Session

from catalog_admin.models.audit_log import AuditLog

logger = logging.getLogger("catalog_admin.audit")

AUDIT_ACTIONS = frozenset({
    "user.login",
    "user.role_changed",
    "user.activated",
    "user.deactivated",
    "invitation.created",
    "invitation.revoked",
    "role.created",
    "role.deleted",
    "role.pages_updated",
})


def _encode(value: Any) -> Optional[str]:
    return json.dumps(value, default=str, sort_keys=True) if value is not None else None


def _decode(raw: Optional[str]) -> Any:
    return json.loads(raw) if raw else None


class AuditService:
    """Writes and queries audit entries. Entries are never updated or deleted."""

    @staticmethod
    def record(
        db: Session,
        request: Optional[Request],
        actor,
        action: str,
        resource_type: str,
        resource_id: Optional[Any] = None,
        old_value: Optional[Any] = None,
        new_value: Optional[Any] = None,
    ) -> AuditLog:
        """Append one entry and commit it.

        ``actor`` is anything with ``id`` and ``email`` (an Actor or a User).
        Client address and user agent are taken from ``request`` when given.
        """
        if action not in AUDIT_ACTIONS:
            raise ValueError(f"Unknown audit action: {action}")

        entry = AuditLog(
            actor_id=actor.id if actor is not None else None,
            actor_email=actor.email if actor is not None else None,
            action=action,
            resource_type=resource_type,
            resource_id=str(resource_id) if resource_id is not None else None,
            old_value_json=_encode(old_value),
            new_value_json=_encode(new_value),
        )
        if request is not None:
            entry.ip_address = request.client.host if request.client else None
            entry.user_agent = request.headers.get("user-agent", "")[:500]

        db.add(entry)
        db.commit()
        logger.debug("audit %s %s:%s by %s", action, resource_type, resource_id, entry.actor_email)
        return entry

    @staticmethod
    def to_dict(entry: AuditLog) -> Dict[str, Any]:
        return {
            "id": entry.id,
            "actor_id": entry.actor_id,
            "actor_email": entry.actor_email,
            "action": entry.action,
            "resource_type": entry.resource_type,
            "resource_id": entry.resource_id,
            "old_value": _decode(entry.old_value_json),
            "new_value": _decode(entry.new_value_json),
            "ip_address": entry.ip_address,
            "created_at": entry.created_at,
        }

    @staticmethod
    def query_logs(
        db: Session,
        actor_id: Optional[int] = None,
        action: Optional[str] = None,
        resource_type: Optional[str] = None,
        resource_id: Optional[str] = None,
        page: int = 1,
        page_size: int = 50,
    ):
        """Newest entries first.

        ``action`` ending in a dot matches a whole family, e.g. ``"role."``.
        """
        query = db.query(AuditLog)

        if actor_id is not None:
            query = query.filter(AuditLog.actor_id == actor_id)
        if action:
            if action.endswith("."):
                query = query.filter(AuditLog.action.startswith(action))
            else:
                query = query.filter(AuditLog.action == action)
        if resource_type:
            query = query.filter(AuditLog.resource_type == resource_type)
        if resource_id is not None:
            query = query.filter(AuditLog.resource_id == str(resource_id))

        total = query.count()
        logs = (
            query.order_by(AuditLog.created_at.desc(), AuditLog.id.desc())
            .offset((page - 1) * page_size)
            .limit(page_size)
            .all()
        )
        return {"logs": logs, "total": total, "page": page, "page_size": page_size}


audit_service = AuditService()

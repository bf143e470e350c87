"""Audit trail for access-control changes: logins, roles, permissions, users."""

import json
from typing import Optional, Any, Tuple

from fastapi import Request
from sqlalchemy.orm import Session

from hrms.models.audit_log import AuditLog

USER_AGENT_MAX_LENGTH = 500


def _to_json(value: Any) -> Optional[str]:
    if value is None or value == {} or value == []:
        return None
    return json.dumps(value, default=str, ensure_ascii=False)


def request_context(request: Request) -> Tuple[Optional[str], str]:
    """Client address (first X-Forwarded-For hop when proxied) and user agent."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        ip = forwarded.split(",")[0].strip()
    else:
        ip = request.client.host if request.client else None
    user_agent = request.headers.get("user-agent", "")[:USER_AGENT_MAX_LENGTH]
    return ip, user_agent


class AuditService:
    """Append-only writer and reader for ``audit_logs``."""

    @staticmethod
    def log(
        db: Session,
        actor_id: Optional[int],
        actor_username: Optional[str],
        action: str,
        resource_type: str,
        resource_id: Optional[str] = None,
        old_value: Optional[Any] = None,
        new_value: Optional[Any] = None,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> AuditLog:
        """Record one event and commit it on its own.

        ``action`` is dotted, resource first: ``role.created``,
        ``role.assigned``, ``permission.deleted``, ``user.login``.
        """
        entry = AuditLog(
            actor_id=actor_id,
            actor_username=actor_username,
            action=action,
            resource_type=resource_type,
            resource_id=str(resource_id) if resource_id is not None else None,
            old_value_json=_to_json(old_value),
            new_value_json=_to_json(new_value),
            ip_address=ip_address,
            user_agent=user_agent,
        )
        db.add(entry)
        db.commit()
        return entry

    @staticmethod
    def log_from_request(db: Session, request: Request, **event: Any) -> AuditLog:
        ip_address, user_agent = request_context(request)
        return AuditService.log(db, ip_address=ip_address, user_agent=user_agent, **event)

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
        """Newest first. ``action`` matches as a prefix, so ``role.`` selects every role event."""
        query = db.query(AuditLog)
        if actor_id is not None:
            query = query.filter(AuditLog.actor_id == actor_id)
        if action:
            query = query.filter(AuditLog.action.startswith(action, autoescape=True))
        if resource_type:
            query = query.filter(AuditLog.resource_type == resource_type)
        if resource_id is not None:
            query = query.filter(AuditLog.resource_id == resource_id)

        total = query.count()
        logs = (
            query.order_by(AuditLog.created_at.desc(), AuditLog.id.desc())
            .offset((page - 1) * page_size)
            .limit(page_size)
            .all()
        )
        return {"logs": logs, "total": total, "page": page, "page_size": page_size}


audit_service = AuditService()

"""Audit trail and health endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from hrms.db.session import get_db
from hrms.schemas.schemas import AuditLogOut
from hrms.core.permission_catalog import SYSTEM_PERMISSIONS as P
from hrms.core.permissions import Principal, RequirePermissions
from hrms.models.permission import Permission
from hrms.models.role import Role
from hrms.services.audit_service import audit_service

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/audit")
async def get_audit_logs(
    action: Optional[str] = Query(None, description="Action prefix, e.g. 'role.'"),
    resource_type: Optional[str] = Query(None),
    resource_id: Optional[str] = Query(None),
    actor_id: Optional[int] = Query(None),
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=200),
    db: Session = Depends(get_db),
    principal: Principal = Depends(RequirePermissions(P["SYSTEM_LOGS"])),
):
    result = audit_service.query_logs(
        db,
        actor_id=actor_id,
        action=action,
        resource_type=resource_type,
        resource_id=resource_id,
        page=page,
        page_size=page_size,
    )
    return {
        **result,
        "logs": [AuditLogOut.model_validate(entry) for entry in result["logs"]],
    }


@router.get("/health")
async def health_check(db: Session = Depends(get_db)):
    """Database reachability plus the size of the access-control tables."""
    try:
        roles = db.query(Role).count()
        permissions = db.query(Permission).count()
    except SQLAlchemyError:
        return {"status": "degraded", "database": "error"}
    return {
        "status": "healthy",
        "database": "ok",
        "roles": roles,
        "permissions": permissions,
    }

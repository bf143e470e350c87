"""Roles API router."""

from typing import List

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from hrms.db.session import get_db
from hrms.schemas.schemas import (
    RoleCreate, RoleUpdate, RoleOut, RoleAssignRequest, RoleInitResult,
    UserOut, MessageResponse, MyPermissionsOut,
)
from hrms.core.permission_catalog import SYSTEM_PERMISSIONS as P
from hrms.core.permissions import Principal, RequirePermissions
from hrms.services.role_service import role_service
from hrms.services.permission_resolver import permission_resolver
from hrms.services.audit_service import audit_service

router = APIRouter(prefix="/roles", tags=["roles"])

can_view_roles = RequirePermissions(P["ROLES_VIEW"])
can_manage_roles = RequirePermissions(P["ROLES_MANAGE"])
can_assign_roles = RequirePermissions(P["USERS_MANAGE_ROLES"])


@router.get("/", response_model=List[RoleOut])
async def list_roles(
    db: Session = Depends(get_db),
    principal: Principal = Depends(can_view_roles),
):
    """List roles with their user counts."""
    return [role_service.serialize(db, role) for role in role_service.list_roles(db)]


@router.get("/permissions")
async def available_permissions(principal: Principal = Depends(can_view_roles)):
    """Catalog of system permissions and their categories."""
    return role_service.available_permissions()


@router.post("/initialize", response_model=List[RoleInitResult])
async def initialize_roles(
    request: Request,
    db: Session = Depends(get_db),
    principal: Principal = Depends(can_manage_roles),
):
    """Create or top up the predefined system roles."""
    results = role_service.initialize_predefined_roles(db)
    audit_service.log_from_request(
        db, request,
        actor_id=principal.user_id,
        actor_username=principal.username,
        action="role.initialized",
        resource_type="role",
        new_value=results,
    )
    return results


@router.post("/assign", response_model=UserOut)
async def assign_role(
    body: RoleAssignRequest,
    request: Request,
    db: Session = Depends(get_db),
    principal: Principal = Depends(can_assign_roles),
):
    """Assign a relational role to a user."""
    user = role_service.assign_role(db, body.user_id, body.role_id)
    audit_service.log_from_request(
        db, request,
        actor_id=principal.user_id,
        actor_username=principal.username,
        action="role.assigned",
        resource_type="user",
        resource_id=str(user.id),
        new_value={"role_id": body.role_id},
    )
    return user


@router.get("/user/{user_id}/permissions", response_model=MyPermissionsOut)
async def user_permissions(
    user_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(can_view_roles),
):
    """Effective permissions of any user (empty for unknown users)."""
    permissions = permission_resolver.resolve(db, user_id)
    return MyPermissionsOut(user_id=user_id, permissions=sorted(permissions))


@router.post("/", response_model=RoleOut, status_code=201)
async def create_role(
    body: RoleCreate,
    request: Request,
    db: Session = Depends(get_db),
    principal: Principal = Depends(can_manage_roles),
):
    """Create a role; unknown permission names are created on the fly."""
    role = role_service.create_role(
        db,
        name=body.name,
        description=body.description,
        color=body.color,
        icon=body.icon,
        permissions=body.permissions,
    )
    result = role_service.serialize(db, role)
    audit_service.log_from_request(
        db, request,
        actor_id=principal.user_id,
        actor_username=principal.username,
        action="role.created",
        resource_type="role",
        resource_id=str(role.id),
        new_value={"name": result["name"], "permissions": result["permissions"]},
    )
    return result


@router.get("/{role_id}", response_model=RoleOut)
async def get_role(
    role_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(can_view_roles),
):
    return role_service.serialize(db, role_service.get_role(db, role_id))


@router.patch("/{role_id}", response_model=RoleOut)
async def update_role(
    role_id: int,
    body: RoleUpdate,
    request: Request,
    db: Session = Depends(get_db),
    principal: Principal = Depends(can_manage_roles),
):
    """Update a role. A permission list, when given, replaces the current one."""
    before = role_service.serialize(db, role_service.get_role(db, role_id))
    role = role_service.update_role(
        db,
        role_id,
        name=body.name,
        description=body.description,
        color=body.color,
        icon=body.icon,
        permissions=body.permissions,
    )
    result = role_service.serialize(db, role)
    audit_service.log_from_request(
        db, request,
        actor_id=principal.user_id,
        actor_username=principal.username,
        action="role.updated",
        resource_type="role",
        resource_id=str(role_id),
        old_value={"name": before["name"], "permissions": before["permissions"]},
        new_value={"name": result["name"], "permissions": result["permissions"]},
    )
    return result


@router.delete("/{role_id}", response_model=MessageResponse)
async def delete_role(
    role_id: int,
    request: Request,
    db: Session = Depends(get_db),
    principal: Principal = Depends(can_manage_roles),
):
    role_service.delete_role(db, role_id)
    audit_service.log_from_request(
        db, request,
        actor_id=principal.user_id,
        actor_username=principal.username,
        action="role.deleted",
        resource_type="role",
        resource_id=str(role_id),
    )
    return MessageResponse(message="Role deleted")

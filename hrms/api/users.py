"""Users API router."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from hrms.db.session import get_db
from hrms.schemas.schemas import UserCreate, UserOut, UserUpdateRequest
from hrms.core.permission_catalog import SYSTEM_PERMISSIONS as P
from hrms.core.permissions import Principal, RequirePermissions
from hrms.services.auth_service import auth_service
from hrms.services.audit_service import audit_service

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/")
async def list_users(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    active: Optional[bool] = Query(None),
    db: Session = Depends(get_db),
    principal: Principal = Depends(RequirePermissions(P["USERS_VIEW"])),
):
    result = auth_service.list_users(db, page, page_size, active)
    return {
        "users": [UserOut.model_validate(u) for u in result["users"]],
        "total": result["total"],
        "page": result["page"],
    }


@router.post("/", response_model=UserOut, status_code=201)
async def create_user(
    body: UserCreate,
    request: Request,
    db: Session = Depends(get_db),
    principal: Principal = Depends(RequirePermissions(P["USERS_CREATE"])),
):
    """Provision a new account."""
    user = auth_service.create_user(
        db,
        username=body.username,
        password=body.password,
        full_name=body.full_name,
        email=body.email,
        role=body.role,
        role_id=body.role_id,
    )
    audit_service.log_from_request(
        db, request,
        actor_id=principal.user_id,
        actor_username=principal.username,
        action="user.created",
        resource_type="user",
        resource_id=str(user.id),
    )
    return user


@router.get("/{user_id}", response_model=UserOut)
async def get_user(
    user_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(RequirePermissions(P["USERS_VIEW"])),
):
    return auth_service.get_user(db, user_id)


@router.patch("/{user_id}", response_model=UserOut)
async def update_user(
    user_id: int,
    body: UserUpdateRequest,
    request: Request,
    db: Session = Depends(get_db),
    principal: Principal = Depends(RequirePermissions(P["USERS_EDIT"])),
):
    """Update name, email, legacy role or active flag (users are never deleted)."""
    changes = body.model_dump(exclude_unset=True)
    user = auth_service.update_user(db, user_id, changes)
    audit_service.log_from_request(
        db, request,
        actor_id=principal.user_id,
        actor_username=principal.username,
        action="user.updated",
        resource_type="user",
        resource_id=str(user_id),
        new_value=changes,
    )
    return user

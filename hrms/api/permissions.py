"""Permissions and menu items API router."""

from typing import List

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from hrms.db.session import get_db
from hrms.schemas.schemas import (
    PermissionCreate, PermissionUpdate, PermissionOut, PermissionWithCountOut,
    PermissionDetailOut, PermissionGroupOut,
    MenuItemCreate, MenuItemUpdate, MenuItemOut, MenuReorderItem, MessageResponse,
)
from hrms.core.permission_catalog import SYSTEM_PERMISSIONS as P
from hrms.core.permissions import Principal, RequirePermissions, get_current_principal
from hrms.services.permission_service import permission_service
from hrms.services.menu_service import menu_service
from hrms.services.audit_service import audit_service

router = APIRouter(prefix="/permissions", tags=["permissions"])

can_manage = RequirePermissions(P["ROLES_MANAGE"])


# ---- Permissions ----
@router.get("/", response_model=List[PermissionWithCountOut])
async def list_permissions(
    db: Session = Depends(get_db),
    principal: Principal = Depends(can_manage),
):
    return permission_service.list_permissions(db)


@router.get("/grouped")
async def permissions_by_group(
    db: Session = Depends(get_db),
    principal: Principal = Depends(can_manage),
):
    """Permissions keyed by display group."""
    return permission_service.permissions_by_group(db)


@router.get("/groups", response_model=List[PermissionGroupOut])
async def permission_groups(
    db: Session = Depends(get_db),
    principal: Principal = Depends(can_manage),
):
    return permission_service.permission_groups(db)


@router.post("/seed", response_model=MessageResponse)
async def seed_permissions(
    request: Request,
    db: Session = Depends(get_db),
    principal: Principal = Depends(can_manage),
):
    """Upsert the default permission catalog."""
    count = permission_service.seed_defaults(db)
    audit_service.log_from_request(
        db, request,
        actor_id=principal.user_id,
        actor_username=principal.username,
        action="permission.seeded",
        resource_type="permission",
    )
    return MessageResponse(message="Permissions initialized", detail={"count": count})


# ---- Menu items ----
@router.get("/menus/all", response_model=List[MenuItemOut])
async def list_menu_items(
    db: Session = Depends(get_db),
    principal: Principal = Depends(can_manage),
):
    return menu_service.list_menu_items(db)


@router.get("/menus/user", response_model=List[MenuItemOut])
async def my_menu_items(
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """Menus visible to the caller."""
    return menu_service.menu_items_for_permissions(db, principal.permissions)


@router.post("/menus/reorder", response_model=MessageResponse)
async def reorder_menu_items(
    body: List[MenuReorderItem],
    db: Session = Depends(get_db),
    principal: Principal = Depends(can_manage),
):
    menu_service.reorder_menu_items(db, [item.model_dump(exclude_unset=True) for item in body])
    return MessageResponse(message="Menu order saved")


@router.get("/menus/{menu_id}", response_model=MenuItemOut)
async def get_menu_item(
    menu_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(can_manage),
):
    return menu_service.to_dict(menu_service.get_menu_item(db, menu_id))


@router.post("/menus", response_model=MenuItemOut, status_code=201)
async def create_menu_item(
    body: MenuItemCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(can_manage),
):
    item = menu_service.create_menu_item(db, body.model_dump())
    return menu_service.to_dict(item)


@router.patch("/menus/{menu_id}", response_model=MenuItemOut)
async def update_menu_item(
    menu_id: int,
    body: MenuItemUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(can_manage),
):
    item = menu_service.update_menu_item(db, menu_id, body.model_dump(exclude_unset=True))
    return menu_service.to_dict(item)


@router.delete("/menus/{menu_id}", response_model=MessageResponse)
async def delete_menu_item(
    menu_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(can_manage),
):
    menu_service.delete_menu_item(db, menu_id)
    return MessageResponse(message="Menu item deleted")


# ---- Single permission ----
@router.post("/", response_model=PermissionOut, status_code=201)
async def create_permission(
    body: PermissionCreate,
    request: Request,
    db: Session = Depends(get_db),
    principal: Principal = Depends(can_manage),
):
    permission = permission_service.create_permission(db, body.model_dump())
    audit_service.log_from_request(
        db, request,
        actor_id=principal.user_id,
        actor_username=principal.username,
        action="permission.created",
        resource_type="permission",
        resource_id=str(permission.id),
        new_value={"name": permission.name},
    )
    return permission


@router.get("/{permission_id}", response_model=PermissionDetailOut)
async def get_permission(
    permission_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(can_manage),
):
    """A permission and the roles it is linked to."""
    return permission_service.get_permission_detail(db, permission_id)


@router.patch("/{permission_id}", response_model=PermissionOut)
async def update_permission(
    permission_id: int,
    body: PermissionUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(can_manage),
):
    return permission_service.update_permission(
        db, permission_id, body.model_dump(exclude_unset=True),
    )


@router.delete("/{permission_id}", response_model=MessageResponse)
async def delete_permission(
    permission_id: int,
    request: Request,
    db: Session = Depends(get_db),
    principal: Principal = Depends(can_manage),
):
    permission_service.delete_permission(db, permission_id)
    audit_service.log_from_request(
        db, request,
        actor_id=principal.user_id,
        actor_username=principal.username,
        action="permission.deleted",
        resource_type="permission",
        resource_id=str(permission_id),
    )
    return MessageResponse(message="Permission deleted")

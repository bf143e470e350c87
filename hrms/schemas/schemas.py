"""Pydantic schemas for API request/response serialization."""

from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any
from datetime import datetime

from hrms.models.user import LegacyRole


# ---- Auth ----
class LoginRequest(BaseModel):
    username: str = Field(..., min_length=2)
    password: str = Field(..., min_length=4)

class TokenResponse(BaseModel):
    access_token: str
    refresh_token: Optional[str] = None
    token_type: str = "bearer"
    user: Optional[Dict[str, Any]] = None

class RefreshRequest(BaseModel):
    refresh_token: str


# ---- User ----
class UserCreate(BaseModel):
    username: str = Field(..., min_length=2, max_length=100)
    password: str = Field(..., min_length=6)
    full_name: str = Field(..., min_length=1)
    email: Optional[str] = None
    role: Optional[LegacyRole] = None
    role_id: Optional[int] = None

class UserOut(BaseModel):
    id: int
    username: str
    email: Optional[str] = None
    full_name: str
    role: Optional[LegacyRole] = None
    role_id: Optional[int] = None
    active: bool = True
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class UserUpdateRequest(BaseModel):
    full_name: Optional[str] = None
    email: Optional[str] = None
    role: Optional[LegacyRole] = None
    active: Optional[bool] = None

class MyPermissionsOut(BaseModel):
    user_id: int
    permissions: List[str]


# ---- Permission ----
class PermissionCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=100)
    label: Optional[str] = None
    description: Optional[str] = None
    group_name: Optional[str] = None
    group_icon: Optional[str] = None
    sort_order: int = 0

class PermissionUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=100)
    label: Optional[str] = None
    description: Optional[str] = None
    group_name: Optional[str] = None
    group_icon: Optional[str] = None
    sort_order: Optional[int] = None

class PermissionOut(BaseModel):
    id: int
    name: str
    label: Optional[str] = None
    description: Optional[str] = None
    group_name: Optional[str] = None
    group_icon: Optional[str] = None
    sort_order: int = 0

    class Config:
        from_attributes = True

class PermissionWithCountOut(PermissionOut):
    role_count: int = 0

class PermissionDetailOut(PermissionOut):
    roles: List[Dict[str, Any]] = []

class PermissionGroupOut(BaseModel):
    name: str
    icon: str


# ---- Role ----
class RoleCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    color: Optional[str] = None
    icon: Optional[str] = None
    permissions: List[str] = []

class RoleUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    color: Optional[str] = None
    icon: Optional[str] = None
    permissions: Optional[List[str]] = None

class RoleOut(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    color: Optional[str] = None
    icon: Optional[str] = None
    is_system: bool = False
    permissions: List[str] = []
    user_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class RoleAssignRequest(BaseModel):
    user_id: int
    role_id: int

class RoleInitResult(BaseModel):
    action: str
    role: str
    error: Optional[str] = None


# ---- Menu ----
class MenuItemCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    path: Optional[str] = None
    icon: Optional[str] = None
    section: Optional[str] = None
    sort_order: int = 0
    is_active: bool = True
    parent_id: Optional[int] = None
    permission_id: Optional[int] = None

class MenuItemUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    path: Optional[str] = None
    icon: Optional[str] = None
    section: Optional[str] = None
    sort_order: Optional[int] = None
    is_active: Optional[bool] = None
    parent_id: Optional[int] = None
    permission_id: Optional[int] = None

class MenuItemOut(BaseModel):
    id: int
    name: str
    path: Optional[str] = None
    icon: Optional[str] = None
    section: Optional[str] = None
    sort_order: int = 0
    is_active: bool = True
    parent_id: Optional[int] = None
    permission_name: Optional[str] = None
    children: List["MenuItemOut"] = []

class MenuReorderItem(BaseModel):
    id: int
    sort_order: int
    parent_id: Optional[int] = None


# ---- Audit ----
class AuditLogOut(BaseModel):
    id: int
    actor_id: Optional[int] = None
    actor_username: Optional[str] = None
    action: str
    resource_type: str
    resource_id: Optional[str] = None
    old_value_json: Optional[str] = None
    new_value_json: Optional[str] = None
    ip_address: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# ---- Generic ----
class MessageResponse(BaseModel):
    message: str
    detail: Optional[Any] = None

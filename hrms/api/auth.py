"""Auth API router: login, refresh, logout, me, my permissions."""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from hrms.db.session import get_db
from hrms.schemas.schemas import (
    LoginRequest, RefreshRequest, TokenResponse, UserOut, MessageResponse, MyPermissionsOut,
)
from hrms.services.auth_service import auth_service
from hrms.services.audit_service import audit_service
from hrms.core.config import settings
from hrms.core.permissions import Principal, get_current_principal
from hrms.core.rate_limiter import limiter
from hrms.core.security import get_current_user_id
from hrms.core.exceptions import AuthenticationError, unauthorized

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=TokenResponse)
@limiter.limit(settings.LOGIN_RATE_LIMIT)
async def login(body: LoginRequest, request: Request, db: Session = Depends(get_db)):
    """Authenticate and return JWT tokens."""
    try:
        result = auth_service.authenticate(db, body.username, body.password)
    except AuthenticationError as e:
        raise unauthorized(str(e))
    audit_service.log_from_request(
        db, request,
        actor_id=result["user"]["id"],
        actor_username=body.username,
        action="user.login",
        resource_type="user",
        resource_id=str(result["user"]["id"]),
    )
    return result


@router.post("/refresh", response_model=TokenResponse)
async def refresh(body: RefreshRequest, db: Session = Depends(get_db)):
    """Refresh access token."""
    try:
        return auth_service.refresh_access_token(db, body.refresh_token)
    except AuthenticationError as e:
        raise unauthorized(str(e))


@router.post("/logout", response_model=MessageResponse)
async def logout(
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    """Revoke all refresh tokens."""
    auth_service.logout(db, user_id)
    return MessageResponse(message="Logged out successfully")


@router.get("/me", response_model=UserOut)
async def get_me(
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    """Get current user profile."""
    return auth_service.get_user(db, user_id)


@router.get("/me/permissions", response_model=MyPermissionsOut)
async def get_my_permissions(principal: Principal = Depends(get_current_principal)):
    """Effective permissions of the caller, for UI display."""
    return MyPermissionsOut(
        user_id=principal.user_id,
        permissions=sorted(principal.permissions),
    )

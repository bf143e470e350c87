"""Authenticated principal and the route-level permission guard."""

import logging
from dataclasses import dataclass
from typing import FrozenSet, Iterable, Optional

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from hrms.core.exceptions import AuthorizationError
from hrms.core.security import get_current_user_id
from hrms.db.session import get_db
from hrms.models.user import User, LegacyRole
from hrms.services.permission_resolver import permission_resolver

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Principal:
    """The authenticated caller with permissions resolved once per request."""

    user_id: int
    username: Optional[str] = None
    legacy_role: Optional[LegacyRole] = None
    role_id: Optional[int] = None
    permissions: FrozenSet[str] = frozenset()

    @property
    def exists(self) -> bool:
        return self.username is not None

    def has(self, permission: str) -> bool:
        """Literal membership; no wildcard expansion."""
        return permission in self.permissions


def load_principal(db: Session, user_id: int) -> Principal:
    """Build a principal from the database. Unknown ids get no permissions."""
    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        return Principal(user_id=user_id)
    return Principal(
        user_id=user.id,
        username=user.username,
        legacy_role=user.role,
        role_id=user.role_id,
        permissions=permission_resolver.resolve_user(user),
    )


async def get_current_principal(
    request: Request,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
) -> Principal:
    """FastAPI dependency returning the request-scoped principal."""
    principal = getattr(request.state, "principal", None)
    if principal is None or principal.user_id != user_id:
        principal = load_principal(db, user_id)
        request.state.principal = principal
    return principal


def check_permissions(required: Optional[Iterable[str]], granted: FrozenSet[str]) -> None:
    """Raise AuthorizationError unless every required permission is granted.

    An empty or missing requirement always passes.
    """
    required = list(required or [])
    if not required:
        return
    if all(permission in granted for permission in required):
        return
    raise AuthorizationError(
        f"Insufficient permissions. Required: {', '.join(required)}"
    )


class RequirePermissions:
    """Dependency that gates a route on a list of permissions (all must match)."""

    def __init__(self, *permissions: str):
        self.permissions = list(permissions)

    async def __call__(
        self,
        request: Request,
        db: Session = Depends(get_db),
        user_id: int = Depends(get_current_user_id),
    ) -> Optional[Principal]:
        if not self.permissions:
            return None
        principal = await get_current_principal(request, db, user_id)
        logger.debug(
            "Guard user=%s required=%s granted=%s",
            principal.user_id, self.permissions, sorted(principal.permissions),
        )
        try:
            check_permissions(self.permissions, principal.permissions)
        except AuthorizationError:
            logger.warning(
                "Permission denied for user %s on %s %s (required: %s)",
                principal.user_id, request.method, request.url.path, self.permissions,
            )
            raise
        return principal

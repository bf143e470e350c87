"""Auth service: JWT login, refresh, user management."""

from datetime import datetime, timezone
from typing import Optional, Dict, Any
from sqlalchemy.orm import Session

from hrms.models.user import User, LegacyRole
from hrms.models.role import Role
from hrms.models.refresh_token import RefreshToken
from hrms.core.security import (
    hash_password, verify_password,
    create_access_token, create_refresh_token, decode_token, fingerprint_token,
)
from hrms.core.exceptions import (
    AuthenticationError, ResourceNotFoundError, ResourceConflictError,
)


def _token_data(user: User) -> Dict[str, Any]:
    return {
        "sub": str(user.id),
        "username": user.username,
        "role": user.role.value if user.role else None,
        "role_id": user.role_id,
    }


class AuthService:
    """Handles authentication and user management."""

    @staticmethod
    def authenticate(db: Session, username: str, password: str) -> Dict[str, Any]:
        """Authenticate user and return JWT tokens.

        Raises:
            AuthenticationError: If credentials are invalid.
        """
        user = db.query(User).filter(User.username == username).first()
        if not user or not verify_password(password, user.hashed_password):
            raise AuthenticationError("Invalid username or password")

        if not user.active:
            raise AuthenticationError("Account is deactivated")

        token_data = _token_data(user)
        access_token = create_access_token(token_data)
        refresh_token_str = create_refresh_token(token_data)

        # Store refresh token hash
        token_hash = fingerprint_token(refresh_token_str)
        rt = RefreshToken(
            user_id=user.id,
            token_hash=token_hash,
            expires_at=datetime.fromtimestamp(decode_token(refresh_token_str)["exp"], tz=timezone.utc),
        )
        db.add(rt)

        user.last_login_at = datetime.now(timezone.utc)
        db.commit()

        return {
            "access_token": access_token,
            "refresh_token": refresh_token_str,
            "token_type": "bearer",
            "user": {
                "id": user.id,
                "username": user.username,
                "full_name": user.full_name,
                "role": token_data["role"],
                "role_id": user.role_id,
            },
        }

    @staticmethod
    def refresh_access_token(db: Session, refresh_token: str) -> Dict[str, Any]:
        """Refresh access token using a valid refresh token."""
        payload = decode_token(refresh_token)
        if payload.get("type") != "refresh":
            raise AuthenticationError("Invalid refresh token")
        token_hash = fingerprint_token(refresh_token)

        stored = db.query(RefreshToken).filter(
            RefreshToken.token_hash == token_hash,
            RefreshToken.revoked_at.is_(None),
        ).first()

        if not stored:
            raise AuthenticationError("Invalid refresh token")

        user = db.query(User).filter(User.id == int(payload["sub"])).first()
        if not user or not user.active:
            raise AuthenticationError("User not found or deactivated")

        return {
            "access_token": create_access_token(_token_data(user)),
            "token_type": "bearer",
        }

    @staticmethod
    def logout(db: Session, user_id: int) -> None:
        """Revoke all refresh tokens for a user."""
        db.query(RefreshToken).filter(
            RefreshToken.user_id == user_id,
            RefreshToken.revoked_at.is_(None),
        ).update({"revoked_at": datetime.now(timezone.utc)})
        db.commit()

    @staticmethod
    def create_user(
        db: Session,
        username: str,
        password: str,
        full_name: str,
        email: Optional[str] = None,
        role: Optional[LegacyRole] = None,
        role_id: Optional[int] = None,
    ) -> User:
        """Create a new user."""
        if db.query(User).filter(User.username == username).first():
            raise ResourceConflictError(f"User '{username}' already exists")
        if email and db.query(User).filter(User.email == email).first():
            raise ResourceConflictError(f"Email {email} is already in use")

        if role_id is not None and not db.query(Role).filter(Role.id == role_id).first():
            raise ResourceNotFoundError(f"Role {role_id} not found")

        user = User(
            username=username,
            email=email,
            hashed_password=hash_password(password),
            full_name=full_name,
            role=role,
            role_id=role_id,
            active=True,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    @staticmethod
    def get_user(db: Session, user_id: int) -> User:
        """Get a user by id."""
        user = db.query(User).filter(User.id == user_id).first()
        if not user:
            raise ResourceNotFoundError(f"User {user_id} not found")
        return user

    @staticmethod
    def list_users(db: Session, page: int = 1, page_size: int = 20, active: Optional[bool] = None):
        """List users with pagination."""
        query = db.query(User)
        if active is not None:
            query = query.filter(User.active.is_(active))
        total = query.count()
        users = (
            query.order_by(User.id.asc())
            .offset((page - 1) * page_size)
            .limit(page_size)
            .all()
        )
        return {"users": users, "total": total, "page": page}

    @staticmethod
    def update_user(db: Session, user_id: int, changes: Dict[str, Any]) -> User:
        """Apply profile, legacy role or active-flag changes."""
        user = AuthService.get_user(db, user_id)

        email = changes.get("email")
        if email and email != user.email:
            if db.query(User).filter(User.email == email, User.id != user_id).first():
                raise ResourceConflictError(f"Email {email} is already in use")

        # role and email may be cleared; full_name and active may not
        for key in ("full_name", "active"):
            if changes.get(key) is not None:
                setattr(user, key, changes[key])
        for key in ("email", "role"):
            if key in changes:
                setattr(user, key, changes[key])
        db.commit()
        db.refresh(user)
        return user


auth_service = AuthService()

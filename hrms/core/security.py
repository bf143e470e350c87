"""Password hashing, JWT issuing, and bearer-token authentication."""

import hashlib
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt

from hrms.core.config import settings
from hrms.core.exceptions import unauthorized

ACCESS_TOKEN = "access"
REFRESH_TOKEN = "refresh"

# auto_error off: a missing header must give 401, not HTTPBearer's 403
bearer_scheme = HTTPBearer(auto_error=False)


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))


def fingerprint_token(token: str) -> str:
    """SHA-256 hex digest; refresh tokens are only ever stored in this form."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def _issue(data: dict, token_type: str, lifetime: timedelta) -> str:
    claims = dict(data)
    claims["exp"] = datetime.now(timezone.utc) + lifetime
    claims["type"] = token_type
    claims["jti"] = uuid.uuid4().hex
    return jwt.encode(claims, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    lifetime = expires_delta or timedelta(minutes=settings.JWT_EXPIRY_MINUTES)
    return _issue(data, ACCESS_TOKEN, lifetime)


def create_refresh_token(data: dict) -> str:
    return _issue(data, REFRESH_TOKEN, timedelta(days=settings.REFRESH_TOKEN_EXPIRY_DAYS))


def decode_token(token: str, expected_type: Optional[str] = None) -> dict:
    """Check signature and expiry, and the ``type`` claim when one is expected."""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        raise unauthorized("Invalid or expired token")
    if expected_type is not None and payload.get("type") != expected_type:
        raise unauthorized(f"Token type must be '{expected_type}'")
    return payload


async def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> int:
    """User id carried by the bearer access token.

    The id is not looked up here; whether the user still exists is the
    caller's concern.
    """
    if credentials is None:
        raise unauthorized()
    payload = decode_token(credentials.credentials, expected_type=ACCESS_TOKEN)
    subject = payload.get("sub")
    if subject is None or not str(subject).isdigit():
        raise unauthorized("Invalid token payload")
    return int(subject)

"""
Pytest configuration and fixtures for HRMS tests.
"""
import os

# Set test environment before importing app modules
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["DEBUG"] = "false"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["JWT_SECRET"] = "test-secret-key-for-unit-tests-only"

import pytest
from fastapi.testclient import TestClient

import hrms.models  # noqa: F401
from hrms.db.base import Base
from hrms.db.session import engine, SessionLocal
from hrms.core.security import create_access_token
from hrms.main import app
from hrms.models.role import Role
from hrms.services.auth_service import auth_service
from hrms.services.role_service import role_service


@pytest.fixture
def db():
    """Fresh schema and session per test."""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db) -> TestClient:
    return TestClient(app)


@pytest.fixture
def make_user(db):
    """Factory creating users with an optional legacy role and assigned role."""
    counter = {"n": 0}

    def _make_user(role=None, role_id=None, username=None, password="secret123", **kwargs):
        counter["n"] += 1
        return auth_service.create_user(
            db,
            username=username or f"user{counter['n']}",
            password=password,
            full_name=kwargs.pop("full_name", "Test User"),
            role=role,
            role_id=role_id,
            **kwargs,
        )

    return _make_user


@pytest.fixture
def make_role(db):
    """Factory creating roles through the role write path."""

    def _make_role(name, permissions=(), **kwargs) -> Role:
        return role_service.create_role(db, name=name, permissions=list(permissions), **kwargs)

    return _make_role


def token_for(user_id: int) -> str:
    return create_access_token({"sub": str(user_id)})


@pytest.fixture
def auth_headers():
    """Bearer headers for a user (or a bare user id)."""

    def _headers(user) -> dict:
        user_id = user if isinstance(user, int) else user.id
        return {"Authorization": f"Bearer {token_for(user_id)}"}

    return _headers

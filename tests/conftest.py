"""
Pytest fixtures for the test suite.

Every test gets a fresh in-memory SQLite engine (`StaticPool`, so the
TestClient's worker threads share the one connection). API tests build their
own app with `create_app(..., init_database=False)` and point `get_db` at the
test session, so each test also gets a fresh rate limiter.
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.db.base import Base
from app.models.security import AdminUser, Department, Role
from app.security.auth import hash_password
from app.security.context import SessionClaims
from app.settings import Settings


TEST_DB_URL = "sqlite://"
TEST_JWT_SECRET = "test-signing-key-that-is-long-enough-for-hs256"


@pytest.fixture
def engine():
    """Create a fresh in-memory SQLite engine for each test."""
    return create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )


@pytest.fixture
def tables(engine):
    """Create all ORM tables on the test engine."""
    from app.models import security, suggestions  # noqa: F401  (register tables)

    Base.metadata.create_all(bind=engine)
    return engine


@pytest.fixture
def db_session(tables):
    """Provide a Session bound to the per-test database."""
    TestSession = sessionmaker(bind=tables, autocommit=False, autoflush=False, class_=Session)
    session = TestSession()
    yield session
    session.close()


@pytest.fixture
def settings():
    return Settings(
        jwt_secret=TEST_JWT_SECRET,
        root_admin_username="superadmin",
        root_admin_password="password123",
    )


@pytest.fixture
def seeded(db_session, settings):
    """First-boot data: three departments and the root super admin."""
    from app.db.init_db import seed

    seed(db_session, settings)
    return db_session


@pytest.fixture
def departments(seeded) -> list[Department]:
    from sqlalchemy import select

    return list(seeded.scalars(select(Department).order_by(Department.id)).all())


@pytest.fixture
def root_admin(seeded) -> AdminUser:
    from sqlalchemy import select

    return seeded.scalars(select(AdminUser).where(AdminUser.username == "superadmin")).one()


def _create_admin(
    db: Session,
    username: str,
    role: Role = Role.DEPARTMENT_ADMIN,
    department_id: int | None = None,
    can_view_all: bool = False,
    password: str = "secret-pass",
) -> AdminUser:
    admin = AdminUser(
        username=username,
        password_hash=hash_password(password),
        role=role,
        department_id=department_id,
        can_view_all=can_view_all,
    )
    db.add(admin)
    db.commit()
    db.refresh(admin)
    return admin


def _make_claims(
    role: Role = Role.DEPARTMENT_ADMIN,
    department_id: int | None = None,
    can_view_all: bool = False,
    admin_id: int = 99,
) -> SessionClaims:
    return SessionClaims(
        admin_id=admin_id,
        username=f"admin{admin_id}",
        role=role,
        department_id=department_id,
        can_view_all=can_view_all,
        expires_at=datetime.now(timezone.utc) + timedelta(hours=1),
    )


def _claims_for(admin: AdminUser) -> SessionClaims:
    return _make_claims(
        role=admin.role,
        department_id=admin.department_id,
        can_view_all=admin.can_view_all,
        admin_id=admin.id,
    )


@pytest.fixture
def app(settings, seeded):
    from app.db.session import get_db
    from app.main import create_app

    application = create_app(settings, init_database=False)

    def _get_test_db():
        yield seeded

    application.dependency_overrides[get_db] = _get_test_db
    return application


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def auth_headers(app):
    """Build an `Authorization` header for an admin, signed by the app's token service."""

    def _headers(admin: AdminUser) -> dict[str, str]:
        token = app.state.token_service.issue(admin)
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def make_admin(seeded):
    """Factory: persist an admin account in the test database."""

    def _factory(username: str, **kwargs) -> AdminUser:
        return _create_admin(seeded, username, **kwargs)

    return _factory


@pytest.fixture
def make_claims():
    """Factory: build `SessionClaims` without going through a token."""
    return _make_claims


@pytest.fixture
def claims_for():
    """Derive the claims a login would mint for a persisted admin."""
    return _claims_for

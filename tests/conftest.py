# tests/conftest.py

"""
Pytest configuration and shared fixtures for testing.
"""

from datetime import datetime, timedelta, timezone
from typing import Generator

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import catalog_admin.models  # noqa: F401
from catalog_admin.core.config import settings
from catalog_admin.core.rate_limiter import limiter
from catalog_admin.core.security import build_actor, create_access_token
from catalog_admin.db.base import Base
from catalog_admin.db.json_columns import dump_list
from catalog_admin.db.seeds.seed_roles import seed_roles
from catalog_admin.db.session import get_db
from catalog_admin.main import app
from catalog_admin.models import Company, Product, Role, User, VerificationStatus


@pytest.fixture(autouse=True)
def no_external_services(monkeypatch):
    """Run without Redis and without rate limits."""
    monkeypatch.setattr(settings, "CACHE_ENABLED", False)
    monkeypatch.setattr(limiter, "enabled", False)


@pytest.fixture(scope="function")
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db(engine):
    """Session with the system roles seeded."""
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    seed_roles(session)
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def client(engine, db) -> Generator[TestClient, None, None]:
    """Test client whose requests each get a fresh session on the test database."""
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def override_get_db():
        session = factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def roles(db):
    """Seeded roles keyed by name."""
    return {r.name: r for r in db.query(Role).all()}


@pytest.fixture
def make_user(db, roles):
    """Factory for verified, active users with an optional role and company scope."""
    counter = {"n": 0}

    def _make(role_name=None, email=None, company_ids=None, is_active=True,
              verification_status=VerificationStatus.verified):
        counter["n"] += 1
        user = User(
            email=email or f"user{counter['n']}@example.com",
            role_id=roles[role_name].id if role_name else None,
            company_ids_json=dump_list(company_ids or []),
            verification_status=verification_status,
            is_active=is_active,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def actor_for():
    """Build the request-time Actor for a stored user."""
    return build_actor


@pytest.fixture
def auth_headers():
    def _headers(user):
        token = create_access_token({"sub": str(user.id), "email": user.email})
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def identity_token():
    """Sign a token the way the external identity provider would."""

    def _token(email, sub="idp-user-1", **claims):
        payload = {
            "email": email,
            "sub": sub,
            "aud": settings.IDP_AUDIENCE,
            "exp": datetime.now(timezone.utc) + timedelta(minutes=5),
        }
        payload.update(claims)
        return jwt.encode(payload, settings.IDP_JWT_SECRET, algorithm=settings.IDP_JWT_ALGORITHM)

    return _token


@pytest.fixture
def catalog(db):
    """Companies 3, 7 and 9 with one product each."""
    companies = {}
    for company_id in (3, 7, 9):
        company = Company(id=company_id, name=f"Company {company_id}")
        db.add(company)
        companies[company_id] = company
    db.flush()
    products = {}
    for company_id in (3, 7, 9):
        product = Product(name=f"Product of {company_id}", company_id=company_id)
        db.add(product)
        products[company_id] = product
    db.commit()
    return {"companies": companies, "products": products}

import os
import uuid
from datetime import datetime, timezone

# must be set before venue_finance.db.session builds its engine
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool

from venue_finance.core.security import create_access_token
from venue_finance.db.session import get_db, make_engine, make_sessionmaker
from venue_finance.main import app
from venue_finance.models.base import Base
from venue_finance.models.company import CompanyORM
from venue_finance.models.enums import UserRole
from venue_finance.models.user import User

BASE = "/api/v1"

engine = make_engine("sqlite://", poolclass=StaticPool)
TestingSessionLocal = make_sessionmaker(engine)


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


@pytest.fixture()
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def client(db):
    def _get_db():
        s = TestingSessionLocal()
        try:
            yield s
        finally:
            s.close()

    app.dependency_overrides[get_db] = _get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.pop(get_db, None)


def make_company(db, **hours) -> CompanyORM:
    company = CompanyORM(id=uuid.uuid4(), name=hours.pop("name", "Corner Pocket"), **hours)
    db.add(company)
    db.commit()
    return company


def make_user(db, company, role: UserRole) -> User:
    user = User(
        id=uuid.uuid4(),
        email=f"{role.value.lower()}-{uuid.uuid4().hex[:8]}@example.com",
        is_active=True,
        company_id=company.id if company is not None else None,
        role=role.value,
    )
    db.add(user)
    db.commit()
    return user


def auth(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(str(user.id))}"}


@pytest.fixture()
def company(db):
    return make_company(db, business_hours_start="09:00", business_hours_end="23:00", timezone="UTC")


@pytest.fixture()
def admin(db, company):
    return make_user(db, company, UserRole.ADMIN)


@pytest.fixture()
def seller(db, company):
    return make_user(db, company, UserRole.SELLER)


@pytest.fixture()
def superadmin(db):
    return make_user(db, None, UserRole.SUPERADMIN)

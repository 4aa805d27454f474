from __future__ import annotations

from dataclasses import dataclass
from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from timesheet_api.db.session import Base, get_session
from timesheet_api.domains.auth.service import sign_in
from timesheet_api.main import app
from timesheet_api.models import Week
from timesheet_api.storage.documents import DocumentStore, get_document_store

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_session():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_session] = override_get_session


@dataclass
class Actor:
    id: int
    email: str
    role: str
    token: str

    @property
    def headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}


@pytest.fixture(autouse=True)
def reset_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def document_store(tmp_path):
    store = DocumentStore(tmp_path / "documents")
    app.dependency_overrides[get_document_store] = lambda: store
    yield store
    app.dependency_overrides.pop(get_document_store, None)


@pytest.fixture
def db_session():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_user():
    def factory(email: str, role: str = "developer", hourly_rate=0, name: str | None = None) -> Actor:
        db = TestingSessionLocal()
        try:
            user, session = sign_in(db, email, name=name)
            user.role = role
            user.hourly_rate = hourly_rate
            db.commit()
            return Actor(id=user.id, email=user.email, role=user.role, token=session.session_token)
        finally:
            db.close()

    return factory


@pytest.fixture
def admin(make_user) -> Actor:
    return make_user("admin@example.com", role="admin", name="Admin")


@pytest.fixture
def hr(make_user) -> Actor:
    return make_user("hr@example.com", role="hr", name="People Ops")


@pytest.fixture
def developer(make_user) -> Actor:
    return make_user("dev@example.com", role="developer", hourly_rate=50, name="Dev One")


@pytest.fixture
def open_week(db_session) -> int:
    week = Week(start_date=date(2024, 1, 1), end_date=date(2024, 1, 7), is_open=True)
    db_session.add(week)
    db_session.commit()
    return week.id

from __future__ import annotations

import os

# Settings are read once at import time; point them at an in-memory database first.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["ADMIN_TOKEN_KEY"] = "test-admin-key"
os.environ["BOOTSTRAP_ADMIN_PASSWORD"] = "bootstrap-pass"
os.environ["ENV"] = "test"

from uuid import uuid4  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from damon_panel.auth import hash_password  # noqa: E402
from damon_panel.database import Base, SessionLocal, engine, get_db  # noqa: E402
from damon_panel.main import app  # noqa: E402
from damon_panel.models import Category, Device, Project, User  # noqa: E402
from damon_panel.use_cases.audit import ClientInfo  # noqa: E402

DEFAULT_PASSWORD = "secret123"


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client_info() -> ClientInfo:
    return ClientInfo(user_agent="pytest", ip_address="127.0.0.1")


@pytest.fixture
def make_user(db):
    def _make(role: str = "employee", *, username: str | None = None, full_name: str | None = None,
              password: str = DEFAULT_PASSWORD, is_active: bool = True) -> User:
        user = User(
            username=username or f"{role}-{uuid4().hex[:8]}",
            full_name=full_name or f"{role.replace('_', ' ').title()} {uuid4().hex[:4]}",
            role=role,
            password_hash=hash_password(password),
            is_active=is_active,
        )
        db.add(user)
        db.commit()
        return user

    return _make


@pytest.fixture
def make_device(db):
    def _make(*, price: float = 1000.0, length: float = 2.0, weight: float = 5.0,
              model_name: str = "P-50 Inline", is_active: bool = True) -> Device:
        category = Category(category_name=f"Category {uuid4().hex[:4]}")
        db.add(category)
        db.flush()
        device = Device(
            category_id=category.id,
            model_name=model_name,
            factory_pricelist_eur=price,
            length_meter=length,
            weight_unit=weight,
            is_active=is_active,
        )
        db.add(device)
        db.commit()
        return device

    return _make


@pytest.fixture
def make_project(db):
    def _make(creator: User, *, assigned_sales_manager_id: str = "", status: str = "pending_approval",
              project_name: str = "Milad Hospital") -> Project:
        project = Project(
            created_by_user_id=creator.id,
            assigned_sales_manager_id=assigned_sales_manager_id,
            project_name=project_name,
            employer_name="Milad Health Co.",
            project_type="hospital",
            status=status,
        )
        db.add(project)
        db.commit()
        return project

    return _make


@pytest.fixture
def client(db):
    def _override_get_db():
        yield db

    app.dependency_overrides[get_db] = _override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def call(client):
    """Call the gateway and return (http_status, envelope)."""

    def _call(path: str, **params):
        response = client.get("/exec", params={"path": path, **params})
        return response.status_code, response.json()

    return _call


@pytest.fixture
def login(call):
    def _login(user: User, password: str = DEFAULT_PASSWORD) -> str:
        status, body = call("/auth/login", username=user.username, password=password)
        assert status == 200, body
        return body["data"]["token"]

    return _login

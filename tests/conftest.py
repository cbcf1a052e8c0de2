import os

# Must be set before the app (and its engine) is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["SMTP_HOST"] = ""
os.environ["ENVIRONMENT"] = "test"

from datetime import date

import pytest
from fastapi.testclient import TestClient

from app.application.services.auth_service import hash_password, issue_token
from app.domain.models.user import User
from app.infrastructure.database import Base, SessionLocal, engine
from app.main import app

PASSWORD = "password123"


@pytest.fixture(autouse=True)
def setup_database():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def make_user(db):
    def _make_user(role, email, manager=None, is_active=True, first_name="Test", last_name="User"):
        user = User(
            role=role,
            email=email,
            password_hash=hash_password(PASSWORD),
            first_name=first_name,
            last_name=last_name,
            manager_id=manager.id if manager else None,
            is_active=is_active,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


def auth(user):
    return {"Authorization": f"Bearer {issue_token(user)}"}


@pytest.fixture
def admin(make_user):
    return make_user("admin", "admin@example.com", first_name="Ada", last_name="Admin")


@pytest.fixture
def manager(make_user):
    return make_user("manager", "manager@example.com", first_name="Maria", last_name="Manager")


@pytest.fixture
def other_manager(make_user):
    return make_user("manager", "other.manager@example.com")


@pytest.fixture
def agent(make_user, manager):
    return make_user("agent", "agent@example.com", manager=manager, first_name="Andy", last_name="Agent")


@pytest.fixture
def other_agent(make_user, other_manager):
    return make_user("agent", "other.agent@example.com", manager=other_manager)


def order_payload(**overrides):
    payload = {
        "checkIn": date(2026, 7, 1).isoformat(),
        "checkOut": date(2026, 7, 8).isoformat(),
        "nights": 7,
        "countryTravel": "Greece",
        "cityTravel": "Chania",
        "propertyName": "Villa Olive",
        "propertyNumber": "12",
        "reservationNumber": "RES-1001",
        "clientName": "John Smith",
        "clientPhone": ["+380501234567"],
        "clientEmail": "john@example.com",
        "clientCountry": "Ukraine",
        "clientDocumentNumber": "AB123456",
        "guests": {"adults": 2, "children": 1},
        "officialPrice": 1000,
        "taxClean": 50,
        "discount": 100,
        "bankAccount": "main",
        "payments": {
            "deposit": {"amount": 300, "dueDate": "2026-05-01", "paymentMethods": ["bank"]},
            "balance": {"amount": 650},
        },
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def create_order(client):
    def _create_order(user, **overrides):
        response = client.post("/api/orders", json=order_payload(**overrides), headers=auth(user))
        assert response.status_code == 201, response.text
        return response.json()

    return _create_order

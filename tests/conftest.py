"""Pytest configuration and fixtures."""

from typing import Callable, Dict, Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from components.core.database import DatabaseManager
from restapi.router import create_app


@pytest.fixture
def db_manager() -> DatabaseManager:
    """In-memory SQLite database shared by every session of one test."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    return DatabaseManager(engine=engine)


@pytest.fixture
def client(db_manager: DatabaseManager) -> Iterator[TestClient]:
    """Test client running the app lifespan against the in-memory database."""
    app = create_app(db_manager=db_manager)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def signup(client: TestClient) -> Callable[..., Dict]:
    """
    Register a customer and return a dict with the token, auth headers,
    customer payload and the number of the default savings account.
    """
    counter = {"n": 0}

    def _signup(email: str = None, password: str = "secret123", **extra) -> Dict:
        counter["n"] += 1
        body = {
            "firstName": "Ada",
            "lastName": "Obi",
            "email": email or f"customer{counter['n']}@example.com",
            "password": password,
            **extra,
        }
        response = client.post("/api/auth/signup", json=body)
        assert response.status_code == 201, response.text
        data = response.json()
        headers = {"Authorization": f"Bearer {data['token']}"}
        accounts = client.get("/api/accounts", headers=headers).json()["accounts"]
        return {
            "token": data["token"],
            "headers": headers,
            "customer": data["customer"],
            "account_number": accounts[0]["accountNumber"],
            "email": body["email"],
            "password": password,
        }

    return _signup


@pytest.fixture
def customer(signup: Callable[..., Dict]) -> Dict:
    """A freshly registered customer."""
    return signup()


@pytest.fixture
def funded_customer(client: TestClient, customer: Dict) -> Dict:
    """A customer whose savings account holds 1000.00."""
    response = client.post(
        "/api/transactions/deposit",
        json={"accountNumber": customer["account_number"], "amount": 1000},
        headers=customer["headers"],
    )
    assert response.status_code == 200, response.text
    return customer

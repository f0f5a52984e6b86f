"""Tests for signup, login and token handling."""

from datetime import timedelta
from unittest.mock import AsyncMock

import pytest
from sqlalchemy import update

from components.core.security import create_access_token
from components.customer.models import Customer
from components.customer.repository import CustomerRepository


class TestSignup:
    """Tests for POST /api/auth/signup."""

    def test_signup_creates_customer_and_savings_account(self, client) -> None:
        response = client.post(
            "/api/auth/signup",
            json={
                "firstName": "  Ada ",
                "lastName": "Obi",
                "email": "Ada.Obi@Example.com",
                "password": "secret123",
                "phone": "+2348000000000",
            },
        )

        assert response.status_code == 201
        data = response.json()
        assert data["success"] is True
        assert data["message"] == "Account created successfully"
        assert data["token"]
        assert data["customer"]["firstName"] == "Ada"
        assert data["customer"]["email"] == "ada.obi@example.com"
        assert data["customer"]["userRole"] == "Customer"

        headers = {"Authorization": f"Bearer {data['token']}"}
        accounts = client.get("/api/accounts", headers=headers).json()["accounts"]
        assert len(accounts) == 1
        assert accounts[0]["accountType"] == "Savings"
        assert accounts[0]["balance"] == 0
        assert accounts[0]["accountNumber"].startswith("ACC")

    def test_duplicate_email_rejected(self, client, signup) -> None:
        signup(email="dup@example.com")

        response = client.post(
            "/api/auth/signup",
            json={"firstName": "B", "lastName": "C", "email": "DUP@example.com", "password": "secret123"},
        )

        assert response.status_code == 400
        assert response.json() == {"success": False, "message": "User already exists with this email"}

    def test_duplicate_insert_after_existence_check(self, client, signup, monkeypatch) -> None:
        """A unique-key collision on insert is reported like a known duplicate."""
        signup(email="race@example.com")
        monkeypatch.setattr(CustomerRepository, "exists", AsyncMock(return_value=False))

        response = client.post(
            "/api/auth/signup",
            json={"firstName": "B", "lastName": "C", "email": "race@example.com", "password": "secret123"},
        )

        assert response.status_code == 400
        assert response.json()["message"] == "User already exists with this email"

    def test_short_password_rejected(self, client) -> None:
        response = client.post(
            "/api/auth/signup",
            json={"firstName": "A", "lastName": "B", "email": "a@b.com", "password": "123"},
        )

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert "password" in body["message"]
        assert body["errors"]

    @pytest.mark.parametrize("email", ["not-an-email", "a@.b", "a@b", "two@@example.com", "a b@example.com"])
    def test_invalid_email_rejected(self, client, email) -> None:
        response = client.post(
            "/api/auth/signup",
            json={"firstName": "A", "lastName": "B", "email": email, "password": "secret123"},
        )

        assert response.status_code == 400
        assert response.json()["message"].startswith("email:")

    def test_blank_name_rejected(self, client) -> None:
        response = client.post(
            "/api/auth/signup",
            json={"firstName": "   ", "lastName": "B", "email": "a@b.com", "password": "secret123"},
        )

        assert response.status_code == 400


class TestLogin:
    """Tests for POST /api/auth/login."""

    def test_login_success(self, client, signup) -> None:
        registered = signup(email="login@example.com", password="secret123")

        response = client.post(
            "/api/auth/login", json={"email": "login@example.com", "password": "secret123"}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "Login successful"
        assert data["customer"]["id"] == registered["customer"]["id"]

        profile = client.get(
            "/api/customers/profile", headers={"Authorization": f"Bearer {data['token']}"}
        )
        assert profile.status_code == 200

    def test_wrong_password(self, client, signup) -> None:
        signup(email="login@example.com", password="secret123")

        response = client.post(
            "/api/auth/login", json={"email": "login@example.com", "password": "wrong-password"}
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid credentials"

    def test_unknown_email(self, client) -> None:
        response = client.post(
            "/api/auth/login", json={"email": "nobody@example.com", "password": "secret123"}
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid credentials"

    def test_inactive_customer_forbidden(self, client, signup, db_manager) -> None:
        registered = signup(email="inactive@example.com")
        _deactivate(client, db_manager, registered["customer"]["id"])

        response = client.post(
            "/api/auth/login", json={"email": "inactive@example.com", "password": "secret123"}
        )
        assert response.status_code == 403
        assert response.json()["message"] == "Account is inactive"

        profile = client.get("/api/customers/profile", headers=registered["headers"])
        assert profile.status_code == 403

    def test_inactive_customer_with_wrong_password(self, client, signup, db_manager) -> None:
        registered = signup(email="dormant@example.com")
        _deactivate(client, db_manager, registered["customer"]["id"])

        response = client.post(
            "/api/auth/login", json={"email": "dormant@example.com", "password": "guess-123"}
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid credentials"


class TestTokens:
    """Tests for bearer-token protection."""

    def test_missing_token(self, client) -> None:
        response = client.get("/api/accounts")

        assert response.status_code == 401
        assert response.json()["success"] is False

    def test_garbage_token(self, client) -> None:
        response = client.get("/api/accounts", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401

    def test_expired_token(self, client, customer) -> None:
        token = create_access_token(
            {"sub": str(customer["customer"]["id"])}, expires_delta=timedelta(minutes=-5)
        )
        response = client.get("/api/accounts", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    def test_token_for_unknown_customer(self, client) -> None:
        token = create_access_token({"sub": "9999"})
        response = client.get("/api/accounts", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401
        assert response.json()["message"] == "Customer not found"


def _deactivate(client, db_manager, customer_id: int) -> None:
    """Flip is_active off directly in the database."""
    async def _run() -> None:
        async with db_manager.get_db() as session:
            await session.execute(
                update(Customer).where(Customer.id == customer_id).values(is_active=False)
            )
            await session.commit()

    client.portal.call(_run)

"""Tests for service endpoints and the error envelope."""

from unittest.mock import AsyncMock

from components.core.config import get_settings


class TestServiceEndpoints:
    """Tests for the root and health check endpoints."""

    def test_root(self, client) -> None:
        response = client.get("/")

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["message"] == get_settings().APP_NAME
        assert data["endpoints"]["loans"] == "/api/loans"

    def test_health(self, client) -> None:
        response = client.get("/api/health")

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["status"] == "healthy"
        assert data["message"] == "Server and database are healthy"
        assert data["serviceName"] == get_settings().APP_NAME

    def test_health_when_database_is_down(self, client, db_manager, monkeypatch) -> None:
        monkeypatch.setattr(db_manager, "ping", AsyncMock(side_effect=ConnectionError("down")))

        response = client.get("/api/health")

        assert response.status_code == 500
        assert response.json()["success"] is False
        assert response.json()["message"] == "Database connection failed"


class TestErrorEnvelope:
    """Tests for the uniform error body."""

    def test_unknown_route(self, client) -> None:
        response = client.get("/api/nowhere")

        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "Not Found"}

    def test_malformed_json(self, client) -> None:
        response = client.post(
            "/api/loans/simulate",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["success"] is False
        assert response.json()["errors"]

    def test_validation_message_names_the_field(self, client) -> None:
        response = client.post(
            "/api/loans/simulate",
            json={"loanAmount": 1000, "interestRate": 10},
        )

        assert response.status_code == 400
        assert "durationMonths" in response.json()["message"]

    def test_unauthorized_carries_bearer_challenge(self, client) -> None:
        response = client.get("/api/accounts")

        assert response.status_code == 401
        assert response.headers["www-authenticate"] == "Bearer"

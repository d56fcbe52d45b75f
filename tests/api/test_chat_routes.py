"""Testes das rotas HTTP de sessões de chat (backend memory)."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from chat_ttl.api.app import create_app
from chat_ttl.application.session.manager import ChatSessionManager
from chat_ttl.config.settings import Settings
from chat_ttl.infra.session_contract import SessionStoreClient, StoreUnavailableError


class TestHealth:
    def test_health(self, client: TestClient) -> None:
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"
        assert response.json()["service"] == "chat_ttl"

    def test_correlation_id_propagated(self, client: TestClient) -> None:
        response = client.get("/health", headers={"X-Correlation-ID": "abc-123"})
        assert response.headers["x-correlation-id"] == "abc-123"


class TestStartChat:
    def test_start_default_timeout(self, client: TestClient) -> None:
        response = client.post("/chat/start", json={"userId": "u1"})

        assert response.status_code == 200
        assert response.json() == {"userId": "u1", "key": "chat:u1", "expiresIn": 60}

    def test_start_custom_timeout(self, client: TestClient) -> None:
        response = client.post("/chat/start", json={"userId": "u1", "timeoutSeconds": 5})
        assert response.json()["expiresIn"] == 5

    @pytest.mark.parametrize("body", [{}, {"userId": ""}, {"userId": "u1", "timeoutSeconds": 0}])
    def test_start_invalid_body(self, client: TestClient, body: dict) -> None:
        assert client.post("/chat/start", json=body).status_code == 422


class TestActivity:
    def test_activity_resets_timer(self, client: TestClient) -> None:
        client.post("/chat/start", json={"userId": "u1", "timeoutSeconds": 5})
        response = client.post("/chat/activity/u1")

        assert response.status_code == 200
        assert response.json() == {
            "userId": "u1",
            "key": "chat:u1",
            "expiresIn": 60,
            "message": "Atividade registrada. Timer resetado.",
        }


class TestMessages:
    def test_append_to_missing_session_is_404(self, client: TestClient) -> None:
        response = client.post("/chat/messages/u2", json={"from": "user", "content": "hi"})

        assert response.status_code == 404
        assert response.json() == {"detail": "session_not_found"}
        assert client.get("/chat/status/u2").json()["isActive"] is False

    def test_append_returns_full_session(self, client: TestClient) -> None:
        client.post("/chat/start", json={"userId": "u1"})
        client.post("/chat/messages/u1", json={"from": "user", "content": "oi"})
        response = client.post(
            "/chat/messages/u1", json={"from": "bot", "content": "olá!", "timeoutSeconds": 30}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["userId"] == "u1"
        assert [m["from"] for m in data["messages"]] == ["user", "bot"]
        assert [m["content"] for m in data["messages"]] == ["oi", "olá!"]
        assert client.get("/chat/status/u1").json()["timeRemaining"] <= 30

    def test_unknown_sender_is_422(self, client: TestClient) -> None:
        client.post("/chat/start", json={"userId": "u1"})
        response = client.post("/chat/messages/u1", json={"from": "admin", "content": "x"})
        assert response.status_code == 422


class TestStatusAndEnd:
    def test_status_active(self, client: TestClient) -> None:
        client.post("/chat/start", json={"userId": "u1", "timeoutSeconds": 30})
        data = client.get("/chat/status/u1").json()

        assert data["userId"] == "u1"
        assert data["isActive"] is True
        assert 0 < data["timeRemaining"] <= 30
        assert data["status"] == "active"

    def test_end_then_status(self, client: TestClient) -> None:
        client.post("/chat/start", json={"userId": "u1"})
        response = client.post("/chat/end/u1")

        assert response.status_code == 200
        assert response.json() == {"userId": "u1", "message": "Chat encerrado manualmente"}
        assert client.get("/chat/status/u1").json() == {
            "userId": "u1",
            "isActive": False,
            "timeRemaining": 0,
            "status": "expired",
        }

    def test_end_missing_session_succeeds(self, client: TestClient) -> None:
        assert client.post("/chat/end/ghost").status_code == 200


class TestStoreUnavailable:
    def test_store_failure_is_503(self) -> None:
        app = create_app(Settings(session_store_backend="memory"))
        store = AsyncMock(spec=SessionStoreClient)
        store.exists.side_effect = StoreUnavailableError("down")

        with TestClient(app) as test_client:
            app.state.session_manager = ChatSessionManager(store)
            response = test_client.get("/chat/status/u1")

        assert response.status_code == 503
        assert response.json() == {"detail": "session_store_unavailable"}


class TestAppBootstrap:
    def test_invalid_config_rejected(self) -> None:
        with pytest.raises(ValueError, match="session store"):
            create_app(Settings(environment="production", session_store_backend="memory"))

    def test_manager_ready_only_inside_lifespan(self) -> None:
        app = create_app(Settings(session_store_backend="memory"))
        assert app.state.session_manager is None

        with TestClient(app):
            assert isinstance(app.state.session_manager, ChatSessionManager)

        assert app.state.session_manager is None

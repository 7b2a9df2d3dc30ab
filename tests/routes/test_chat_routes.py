"""
Tests for /chat endpoints.

- Auth required: missing token → 401
- Ownership mismatch → 403 forbidden, generic message
- Completion failure → 502 (no fallback for chat)
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from planter.auth.dependencies import AuthenticatedUser, get_authenticated_user
from planter.main import app
from planter.schemas.chat import ChatMessage, ChatSession
from planter.services.chat_service import ChatSessionManager, ChatWorkingSets
from planter.utils.exceptions import AuthorizationError, ExternalServiceError, NotFoundError

TIMESTAMP = "2026-01-01T00:00:00+00:00"


@pytest.fixture
def client():
    """Create test client for FastAPI app."""
    return TestClient(app)


async def mock_authenticated_user_dependency():
    return AuthenticatedUser(user_id="test-user-uuid-123", access_token="test-token")


@pytest.fixture
def authenticated():
    app.dependency_overrides[get_authenticated_user] = mock_authenticated_user_dependency
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def session():
    return ChatSession(
        id="s-1",
        user_id="test-user-uuid-123",
        title="Разговор о растениях",
        created_at=TIMESTAMP,
        updated_at=TIMESTAMP,
        last_used=TIMESTAMP,
    )


@pytest.fixture
def mock_manager(session):
    manager = MagicMock()
    manager.create_session = AsyncMock(return_value=session)
    manager.list_sessions = AsyncMock(return_value=[session])
    manager.get_session = AsyncMock(return_value=session)
    manager.send_message = AsyncMock(return_value=ChatMessage(
        id="m-2",
        session_id="s-1",
        user_id="test-user-uuid-123",
        role="assistant",
        content="Поливайте раз в неделю.",
        created_at=TIMESTAMP,
    ))
    manager.get_messages = AsyncMock(return_value=[])

    with patch("planter.routes.chat.get_supabase_client"), \
         patch("planter.routes.chat.build_chat_manager", return_value=manager):
        yield manager


class TestChatAuth:
    def test_missing_token_returns_401(self, client):
        response = client.get("/chat/sessions")

        assert response.status_code == 401
        assert response.json()["detail"]["error"] == "unauthorized"

    def test_malformed_header_returns_401(self, client):
        response = client.get("/chat/sessions", headers={"Authorization": "Token abc"})

        assert response.status_code == 401


class TestChatSessions:
    """Tests for session endpoints."""

    def test_create_session_without_body(self, client, authenticated, mock_manager):
        response = client.post("/chat/sessions")

        assert response.status_code == 201
        assert response.json()["title"] == "Разговор о растениях"
        mock_manager.create_session.assert_awaited_once_with("test-user-uuid-123", None)

    def test_create_session_with_title(self, client, authenticated, mock_manager):
        response = client.post("/chat/sessions", json={"title": "Фикус"})

        assert response.status_code == 201
        mock_manager.create_session.assert_awaited_once_with("test-user-uuid-123", "Фикус")

    def test_list_sessions(self, client, authenticated, mock_manager):
        response = client.get("/chat/sessions")

        assert response.status_code == 200
        assert response.json()["count"] == 1

    def test_foreign_session_returns_403(self, client, authenticated, mock_manager):
        mock_manager.get_session.side_effect = AuthorizationError()

        response = client.get("/chat/sessions/s-other")

        assert response.status_code == 403
        assert response.json() == {
            "error": "forbidden",
            "details": "Access to this resource is forbidden",
        }

    def test_unknown_session_gets_same_403_as_foreign(self, client, authenticated, session):
        store = MagicMock()
        store.get_session = AsyncMock(side_effect=NotFoundError("Chat session", "s-missing"))
        manager = ChatSessionManager(store, None, ChatWorkingSets())

        with patch("planter.routes.chat.get_supabase_client"), \
             patch("planter.routes.chat.build_chat_manager", return_value=manager):
            unknown = client.get("/chat/sessions/s-missing")
            store.get_session = AsyncMock(return_value=session.model_copy(update={"user_id": "someone-else"}))
            foreign = client.get("/chat/sessions/s-1")

        assert unknown.status_code == foreign.status_code == 403
        assert unknown.json() == foreign.json() == {
            "error": "forbidden",
            "details": "Access to this resource is forbidden",
        }


class TestChatMessages:
    """Tests for message endpoints."""

    def test_send_message_returns_reply(self, client, authenticated, mock_manager):
        response = client.post("/chat/sessions/s-1/messages", json={"message": "Как поливать?"})

        assert response.status_code == 200
        assert response.json()["message"]["content"] == "Поливайте раз в неделю."
        mock_manager.send_message.assert_awaited_once_with("s-1", "test-user-uuid-123", "Как поливать?")

    def test_empty_message_returns_422(self, client, authenticated, mock_manager):
        response = client.post("/chat/sessions/s-1/messages", json={"message": ""})

        assert response.status_code == 422
        mock_manager.send_message.assert_not_awaited()

    def test_completion_failure_returns_502(self, client, authenticated, mock_manager):
        mock_manager.send_message.side_effect = ExternalServiceError(
            "Completion API returned status code 503", upstream_status=503
        )

        response = client.post("/chat/sessions/s-1/messages", json={"message": "привет"})

        assert response.status_code == 502
        assert response.json()["error"] == "external_service_error"

    def test_get_messages(self, client, authenticated, mock_manager):
        response = client.get("/chat/sessions/s-1/messages")

        assert response.status_code == 200
        assert response.json() == {"session_id": "s-1", "messages": [], "count": 0}
        mock_manager.get_messages.assert_awaited_once_with("s-1", "test-user-uuid-123")

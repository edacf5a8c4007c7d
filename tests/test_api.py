"""HTTP surface: request/response shapes and error mapping."""

import httpx
import pytest

from supportchat.app import get_app
from supportchat.configs.config import AppConfig
from supportchat.configs.system import TracingConfig
from supportchat.core.llm.adapter import GENERIC_ERROR_REPLY
from supportchat.core.llm.errors import UnsupportedProvider
from supportchat.core.service import get_conversation_service

from .conftest import ScriptedProvider


class TestChatEndpoint:
    @pytest.mark.asyncio
    async def test_chat_creates_conversation(
        self, api_client: httpx.AsyncClient, provider: ScriptedProvider
    ):
        provider.reply = "Orders ship within 2 business days."

        response = await api_client.post("/api/chat", json={"message": "When do you ship?"})

        assert response.status_code == 200
        body = response.json()
        assert body["conversationId"].startswith("conv_")
        assert body["messageId"].startswith("msg_")
        assert body["message"] == "Orders ship within 2 business days."
        assert body["sender"] == "ai"
        assert "timestamp" in body

    @pytest.mark.asyncio
    async def test_chat_continues_conversation(self, api_client: httpx.AsyncClient):
        first = (await api_client.post("/api/chat", json={"message": "hi"})).json()

        second = await api_client.post(
            "/api/chat",
            json={"conversationId": first["conversationId"], "message": "again"},
        )

        assert second.json()["conversationId"] == first["conversationId"]
        messages = await api_client.get(
            f"/api/conversations/{first['conversationId']}/messages"
        )
        assert [m["sender"] for m in messages.json()] == ["user", "ai", "user", "ai"]

    @pytest.mark.asyncio
    async def test_blank_message_is_400(self, api_client: httpx.AsyncClient):
        response = await api_client.post("/api/chat", json={"message": "   "})

        assert response.status_code == 400
        assert response.json() == {"error": "Message cannot be blank"}

    @pytest.mark.asyncio
    async def test_missing_message_is_400(self, api_client: httpx.AsyncClient):
        response = await api_client.post("/api/chat", json={})

        assert response.status_code == 400
        assert "error" in response.json()

    @pytest.mark.asyncio
    async def test_unknown_conversation_is_404(self, api_client: httpx.AsyncClient):
        response = await api_client.post(
            "/api/chat", json={"conversationId": "conv_missing", "message": "hi"}
        )

        assert response.status_code == 404
        assert response.json() == {"error": "Conversation not found: conv_missing"}

    @pytest.mark.asyncio
    async def test_oversized_message_truncated(self, api_client: httpx.AsyncClient):
        body = (await api_client.post("/api/chat", json={"message": "q" * 3001})).json()

        messages = (
            await api_client.get(f"/api/conversations/{body['conversationId']}/messages")
        ).json()
        assert len(messages[0]["text"]) == 3000

    @pytest.mark.asyncio
    async def test_provider_outage_still_200(
        self, api_client: httpx.AsyncClient, provider: ScriptedProvider
    ):
        provider.status_code = 503
        provider.body = {"error": "unavailable"}

        response = await api_client.post("/api/chat", json={"message": "hello"})

        assert response.status_code == 200
        assert response.json()["message"] == GENERIC_ERROR_REPLY


class TestSessionChatEndpoint:
    @pytest.mark.asyncio
    async def test_reply_and_session_id(self, api_client: httpx.AsyncClient):
        response = await api_client.post("/api/chat/message", json={"message": "hello"})

        assert response.status_code == 200
        body = response.json()
        assert body["reply"] == "Happy to help!"
        assert body["sessionId"].startswith("conv_")

    @pytest.mark.asyncio
    async def test_session_is_reused(self, api_client: httpx.AsyncClient):
        first = (
            await api_client.post("/api/chat/message", json={"message": "one"})
        ).json()
        second = (
            await api_client.post(
                "/api/chat/message",
                json={"message": "two", "sessionId": first["sessionId"]},
            )
        ).json()
        assert second["sessionId"] == first["sessionId"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [{}, {"message": ""}, {"message": "  "}])
    async def test_empty_message_is_400(self, api_client: httpx.AsyncClient, payload):
        response = await api_client.post("/api/chat/message", json=payload)

        assert response.status_code == 400
        assert response.json() == {"error": "Message cannot be empty"}


class TestConversationEndpoints:
    @pytest.mark.asyncio
    async def test_create_get_delete(self, api_client: httpx.AsyncClient):
        created = await api_client.post("/api/conversations")
        assert created.status_code == 200
        conversation_id = created.json()["id"]
        assert set(created.json()) == {"id", "createdAt", "updatedAt"}

        fetched = await api_client.get(f"/api/conversations/{conversation_id}")
        assert fetched.json()["id"] == conversation_id

        deleted = await api_client.delete(f"/api/conversations/{conversation_id}")
        assert deleted.status_code == 204

        missing = await api_client.get(f"/api/conversations/{conversation_id}")
        assert missing.status_code == 404
        again = await api_client.delete(f"/api/conversations/{conversation_id}")
        assert again.status_code == 404

    @pytest.mark.asyncio
    async def test_list_conversations(self, api_client: httpx.AsyncClient):
        await api_client.post("/api/conversations")
        await api_client.post("/api/chat", json={"message": "hello"})

        response = await api_client.get("/api/conversations", params={"limit": 10})

        body = response.json()
        assert len(body) == 2
        assert body[0]["messageCount"] == 2
        assert body[1]["messageCount"] == 0

    @pytest.mark.asyncio
    async def test_messages_of_missing_conversation(self, api_client: httpx.AsyncClient):
        response = await api_client.get("/api/conversations/conv_missing/messages")
        assert response.status_code == 404


class TestHealth:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", ["/health", "/api/health"])
    async def test_health(self, api_client: httpx.AsyncClient, path):
        response = await api_client.get(path)

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "service": "chatbot-backend"}

    @pytest.mark.asyncio
    async def test_service_name_is_fixed(self, app_config: AppConfig):
        config = app_config.model_copy(
            update={"tracing": TracingConfig(service_name="renamed-in-otel")}
        )
        app = get_app(config)

        async with httpx.AsyncClient(
            transport=httpx.ASGITransport(app=app), base_url="http://testserver"
        ) as client:
            response = await client.get("/health")

        assert response.json()["service"] == "chatbot-backend"


class _MisconfiguredService:
    async def send_message(self, conversation_id, text):
        raise UnsupportedProvider("Gemini integration is not implemented")


class TestErrorMapping:
    @pytest.mark.asyncio
    async def test_unsupported_provider_is_generic_500(self, app_config: AppConfig):
        app = get_app(app_config)
        app.dependency_overrides[get_conversation_service] = _MisconfiguredService

        async with httpx.AsyncClient(
            transport=httpx.ASGITransport(app=app), base_url="http://testserver"
        ) as client:
            response = await client.post("/api/chat", json={"message": "hello"})

        assert response.status_code == 500
        assert response.json() == {
            "error": "An unexpected error occurred. Please try again."
        }

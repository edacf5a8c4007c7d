"""Interactive CLI against a scripted HTTP server."""

import io
import json

import httpx
import pytest

from cli.client import ChatAPIClient, ChatAPIError
from cli.config import CLIConfig
from cli.support_cli import SupportChatCLI


class _FakeServer:
    """Records requests and answers like the support chat API."""

    def __init__(self) -> None:
        self.chat_payloads: list[dict] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        if request.url.path == "/api/chat":
            payload = json.loads(request.content)
            self.chat_payloads.append(payload)
            return httpx.Response(
                200,
                json={
                    "conversationId": payload.get("conversationId", "conv_abc"),
                    "messageId": f"msg_{len(self.chat_payloads)}",
                    "message": f"echo: {payload['message']}",
                    "sender": "ai",
                    "timestamp": "2026-01-01T12:00:00+00:00",
                },
            )
        if request.url.path == "/api/conversations/conv_abc/messages":
            return httpx.Response(
                200,
                json=[
                    {
                        "id": "msg_u",
                        "sender": "user",
                        "text": "hello",
                        "timestamp": "2026-01-01T12:00:00+00:00",
                    },
                    {
                        "id": "msg_a",
                        "sender": "ai",
                        "text": "echo: hello",
                        "timestamp": "2026-01-01T12:00:01+00:00",
                    },
                ],
            )
        return httpx.Response(404, json={"error": "Conversation not found: x"})


def _cli(server: _FakeServer, lines: list[str]) -> tuple[SupportChatCLI, io.StringIO]:
    config = CLIConfig()
    client = ChatAPIClient(
        config, httpx.AsyncClient(transport=httpx.MockTransport(server))
    )
    output = io.StringIO()
    cli = SupportChatCLI(
        config,
        input_stream=io.StringIO("".join(f"{line}\n" for line in lines)),
        output_stream=output,
        client=client,
    )
    return cli, output


class TestSupportChatCLI:
    @pytest.mark.asyncio
    async def test_keeps_conversation_between_turns(self):
        server = _FakeServer()
        cli, output = _cli(server, ["hello", "and again", "exit"])

        await cli.run()

        assert server.chat_payloads == [
            {"message": "hello"},
            {"message": "and again", "conversationId": "conv_abc"},
        ]
        assert "Assistant: echo: hello" in output.getvalue()
        assert "Goodbye!" in output.getvalue()

    @pytest.mark.asyncio
    async def test_new_resets_conversation(self):
        server = _FakeServer()
        cli, _ = _cli(server, ["hello", "/new", "fresh start", "quit"])

        await cli.run()

        assert "conversationId" not in server.chat_payloads[1]
        assert cli.conversation_id == "conv_abc"

    @pytest.mark.asyncio
    async def test_history_prints_transcript(self):
        server = _FakeServer()
        cli, output = _cli(server, ["hello", "/history"])

        await cli.run()

        text = output.getvalue()
        assert "You: hello" in text
        assert "Assistant: echo: hello" in text

    @pytest.mark.asyncio
    async def test_history_before_first_message(self):
        cli, output = _cli(_FakeServer(), ["/history", "exit"])

        await cli.run()

        assert "No conversation yet" in output.getvalue()


class TestChatAPIClient:
    @pytest.mark.asyncio
    async def test_error_body_is_surfaced(self):
        client = ChatAPIClient(
            CLIConfig(), httpx.AsyncClient(transport=httpx.MockTransport(_FakeServer()))
        )
        with pytest.raises(ChatAPIError, match="Conversation not found"):
            await client.history("conv_other")
        await client.close()

    @pytest.mark.asyncio
    async def test_connection_error(self):
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        client = ChatAPIClient(
            CLIConfig(), httpx.AsyncClient(transport=httpx.MockTransport(refuse))
        )
        with pytest.raises(ChatAPIError, match="Connection error"):
            await client.send("hi")
        await client.close()

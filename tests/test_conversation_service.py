"""ConversationService: the inbound-message flow end to end over SQLite."""

import pytest

from supportchat.configs.system import ChatConfig
from supportchat.core.errors import ConversationNotFound, MessageValidationError
from supportchat.core.llm.adapter import RATE_LIMITED_REPLY
from supportchat.core.service import ConversationService
from supportchat.infra.db import MessageStore, Sender

from .conftest import ScriptedProvider, make_adapter


def _service(
    store: MessageStore,
    provider: ScriptedProvider,
    max_history: int = 10,
    max_message_length: int = 3000,
) -> ConversationService:
    return ConversationService(
        store,
        make_adapter(provider),
        ChatConfig(max_history=max_history, max_message_length=max_message_length),
    )


class TestSendMessage:
    @pytest.mark.asyncio
    async def test_new_conversation_persists_both_turns(self, store: MessageStore):
        provider = ScriptedProvider(reply="We ship worldwide.")
        service = _service(store, provider)

        reply = await service.send_message(None, "Do you ship abroad?")

        assert reply.text == "We ship worldwide."
        assert reply.sender == "ai"
        messages = await store.list_messages(reply.conversation_id)
        assert [(m.sender, m.text) for m in messages] == [
            (Sender.USER, "Do you ship abroad?"),
            (Sender.AI, "We ship worldwide."),
        ]
        assert messages[-1].id == reply.message_id

    @pytest.mark.asyncio
    async def test_first_message_sends_empty_history(self, store: MessageStore):
        provider = ScriptedProvider()
        service = _service(store, provider)

        await service.send_message(None, "hello")

        roles = [m["role"] for m in provider.payloads[0]["messages"]]
        assert roles == ["system", "user"]

    @pytest.mark.asyncio
    async def test_follow_up_includes_prior_turns_once(self, store: MessageStore):
        provider = ScriptedProvider(reply="ok")
        service = _service(store, provider)
        first = await service.send_message(None, "first question")

        await service.send_message(first.conversation_id, "second question")

        sent = provider.payloads[1]["messages"]
        assert [(m["role"], m["content"]) for m in sent[1:]] == [
            ("user", "first question"),
            ("assistant", "ok"),
            ("user", "second question"),
        ]

    @pytest.mark.asyncio
    async def test_history_is_bounded(self, store: MessageStore):
        provider = ScriptedProvider(reply="ok")
        service = _service(store, provider, max_history=4)
        conversation = await store.create_conversation()
        for i in range(6):
            await store.append_message(conversation.id, Sender.USER, f"old {i}")

        await service.send_message(conversation.id, "latest")

        sent = provider.payloads[0]["messages"]
        history = [m["content"] for m in sent[1:-1]]
        assert history == ["old 2", "old 3", "old 4", "old 5"]
        assert sent[-1]["content"] == "latest"

    @pytest.mark.asyncio
    async def test_zero_history(self, store: MessageStore):
        provider = ScriptedProvider()
        service = _service(store, provider, max_history=0)
        first = await service.send_message(None, "one")

        await service.send_message(first.conversation_id, "two")

        assert len(provider.payloads[1]["messages"]) == 2

    @pytest.mark.asyncio
    async def test_unknown_conversation(self, store: MessageStore):
        provider = ScriptedProvider()
        service = _service(store, provider)

        with pytest.raises(ConversationNotFound):
            await service.send_message("conv_missing", "hello")
        assert provider.requests == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", [None, "", "   "])
    async def test_blank_message_rejected(self, store: MessageStore, text):
        service = _service(store, ScriptedProvider())

        with pytest.raises(MessageValidationError):
            await service.send_message(None, text)
        assert await store.list_conversations() == []

    @pytest.mark.asyncio
    async def test_long_message_truncated_before_storage(self, store: MessageStore):
        service = _service(store, ScriptedProvider(), max_message_length=3000)

        reply = await service.send_message(None, "z" * 3500)

        [user, _] = await store.list_messages(reply.conversation_id)
        assert user.text == "z" * 3000

    @pytest.mark.asyncio
    async def test_provider_failure_is_stored_as_reply(self, store: MessageStore):
        provider = ScriptedProvider(status_code=429, body={"error": "rate limited"})
        service = _service(store, provider)

        reply = await service.send_message(None, "hello")

        assert reply.text == RATE_LIMITED_REPLY
        messages = await store.list_messages(reply.conversation_id)
        assert messages[-1].text == RATE_LIMITED_REPLY
        assert messages[-1].sender is Sender.AI

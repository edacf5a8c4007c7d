"""Shared fixtures: a throwaway SQLite store, scripted LLM providers and
an application wired to both."""

from __future__ import annotations

import json
from collections.abc import AsyncIterator, Callable
from pathlib import Path

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from supportchat.configs.config import AppConfig
from supportchat.configs.system import (
    ChatConfig,
    LLMConfig,
    LoggingConfig,
    MetricsConfig,
    ThirdPartyConfig,
)
from supportchat.core.llm.adapter import LLMAdapter
from supportchat.core.llm.client import GroqClient
from supportchat.infra.db import MessageStore, create_schema

TEST_SYSTEM_PROMPT = "You are a test support agent."


def completion_body(content: str) -> dict:
    return {
        "id": "chatcmpl-test",
        "object": "chat.completion",
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": content},
                "finish_reason": "stop",
            }
        ],
    }


class ScriptedProvider:
    """``httpx.MockTransport`` handler that records requests and replies
    with a fixed response (or raises a fixed transport error)."""

    def __init__(
        self,
        reply: str = "Happy to help!",
        status_code: int = 200,
        body: object | None = None,
        error: Callable[[httpx.Request], Exception] | None = None,
    ) -> None:
        self.reply = reply
        self.status_code = status_code
        self.body = body
        self.error = error
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error(request)
        if isinstance(self.body, str):
            return httpx.Response(self.status_code, text=self.body)
        return httpx.Response(
            self.status_code,
            json=self.body if self.body is not None else completion_body(self.reply),
        )

    @property
    def payloads(self) -> list[dict]:
        return [json.loads(r.content) for r in self.requests]


def make_adapter(
    provider: ScriptedProvider,
    config: LLMConfig | None = None,
    client_cls: type = GroqClient,
) -> LLMAdapter:
    config = config or LLMConfig(api_key="test-key")
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(provider))
    return LLMAdapter(client_cls(config, http_client), config, TEST_SYSTEM_PROMPT)


@pytest_asyncio.fixture
async def engine() -> AsyncIterator[AsyncEngine]:
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    await create_schema(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def store(engine: AsyncEngine) -> MessageStore:
    return MessageStore(async_sessionmaker(engine, expire_on_commit=False))


@pytest.fixture
def provider() -> ScriptedProvider:
    return ScriptedProvider()


@pytest.fixture
def adapter(provider: ScriptedProvider) -> LLMAdapter:
    return make_adapter(provider)


@pytest.fixture
def app_config(tmp_path: Path) -> AppConfig:
    return AppConfig(
        third_party=ThirdPartyConfig(
            database_uri=f"sqlite+aiosqlite:///{tmp_path / 'chat.db'}",
            create_schema=True,
        ),
        llm=LLMConfig(api_key="test-key"),
        chat=ChatConfig(max_history=10, max_message_length=3000),
        logging=LoggingConfig(level="WARNING", json_output=False),
        metrics=MetricsConfig(enabled=False),
    )


@pytest_asyncio.fixture
async def api_client(
    app_config: AppConfig, adapter: LLMAdapter
) -> AsyncIterator[httpx.AsyncClient]:
    """HTTP client against the real app; lifespan runs, the provider is scripted."""
    from supportchat.app import get_app
    from supportchat.core.llm import get_llm_adapter

    app = get_app(app_config)
    app.dependency_overrides[get_llm_adapter] = lambda: adapter
    async with app.router.lifespan_context(app):
        transport = httpx.ASGITransport(app=app, raise_app_exceptions=False)
        async with httpx.AsyncClient(
            transport=transport, base_url="http://testserver"
        ) as client:
            yield client

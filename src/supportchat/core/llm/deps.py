"""LLM adapter lifecycle and FastAPI dependency.

``build_llm`` owns the pooled ``httpx.AsyncClient`` for the whole process;
requests read the adapter back from ``app.state``.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request

from supportchat.configs.config import AppConfig

from .adapter import LLMAdapter
from .client import build_client

logger = logging.getLogger(__name__)


def create_llm_adapter(config: AppConfig, http_client: httpx.AsyncClient) -> LLMAdapter:
    client = build_client(config.llm, http_client)
    return LLMAdapter(client, config.llm, config.prompt.system_prompt)


@asynccontextmanager
async def build_llm(app: FastAPI, config: AppConfig) -> AsyncIterator[None]:
    """Create the shared HTTP client and adapter, attach to ``app.state``."""
    http_client = httpx.AsyncClient(timeout=config.llm.timeout.total_seconds())
    app.state.llm_adapter = create_llm_adapter(config, http_client)
    logger.info(
        "LLM adapter ready (provider=%s, model=%s)",
        config.llm.provider.value,
        app.state.llm_adapter.model_name,
    )
    try:
        yield
    finally:
        await http_client.aclose()


def get_llm_adapter(request: Request) -> LLMAdapter:
    """FastAPI dependency, reads from ``app.state``."""
    return request.app.state.llm_adapter

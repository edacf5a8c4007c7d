"""FastAPI application entry point."""

from collections.abc import AsyncGenerator
from contextlib import AsyncExitStack, asynccontextmanager

from fastapi import FastAPI

from supportchat.api.chat import router as chat_router
from supportchat.api.conversations import router as conversations_router
from supportchat.api.exceptions import register_exception_handlers
from supportchat.api.health import router as health_router
from supportchat.configs.config import AppConfig, get_app_config
from supportchat.core.llm import build_llm
from supportchat.core.metrics import instrument_app
from supportchat.infra.db import build_db
from supportchat.infra.logging import setup_logging
from supportchat.infra.telemetry import init_telemetry


def _make_lifespan(config: AppConfig):
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Build shared resources on startup; tear down in reverse order."""
        async with AsyncExitStack() as stack:
            await stack.enter_async_context(build_db(app, config))
            await stack.enter_async_context(build_llm(app, config))
            yield

    return lifespan


def get_app(config: AppConfig | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    An explicit *config* replaces ``get_app_config`` for every request
    dependency too, so the whole app sees one configuration object.
    """
    if config is None:
        config = get_app_config()

    setup_logging(config.logging)

    app = FastAPI(
        title="Support Chat",
        description="Customer-support chat backend with persisted history",
        version="0.1.0",
        lifespan=_make_lifespan(config),
    )
    app.dependency_overrides[get_app_config] = lambda: config

    # Middleware-adding setup must happen before the app starts serving.
    init_telemetry(app, config.tracing)
    instrument_app(app, config)
    register_exception_handlers(app)

    app.include_router(health_router)
    app.include_router(chat_router)
    app.include_router(conversations_router)

    return app


app = get_app()

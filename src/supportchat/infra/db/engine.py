"""Async SQLAlchemy engine and session factory.

``build_db`` is a lifespan builder: it creates the engine + session
factory, attaches them to ``app.state`` and disposes the engine on
shutdown.  Per-request dependencies read from ``app.state``.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Annotated, Any

from fastapi import Depends, FastAPI, Request
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from supportchat.configs.config import AppConfig
from supportchat.configs.system import ThirdPartyConfig
from supportchat.infra.telemetry import instrument_sqlalchemy

from .models import Base
from .repository import MessageStore

logger = logging.getLogger(__name__)


def create_engine(config: ThirdPartyConfig) -> AsyncEngine:
    """Create the async engine; pool sizing only applies to server databases."""
    kwargs: dict[str, Any] = {"pool_pre_ping": True}
    if make_url(config.database_uri).get_backend_name() != "sqlite":
        kwargs["pool_size"] = config.database_pool_size
        kwargs["max_overflow"] = config.database_max_overflow
    return create_async_engine(config.database_uri, **kwargs)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False)


async def create_schema(engine: AsyncEngine) -> None:
    """Create missing tables (dev/test databases without Alembic)."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


# ---------------------------------------------------------------------------
# Lifespan builder
# ---------------------------------------------------------------------------


@asynccontextmanager
async def build_db(app: FastAPI, config: AppConfig) -> AsyncIterator[None]:
    """Create engine + session factory, attach to ``app.state``."""
    tp = config.third_party
    engine = create_engine(tp)
    instrument_sqlalchemy(engine)
    if tp.create_schema:
        await create_schema(engine)
        logger.info("Database schema ensured via metadata.create_all")

    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)
    logger.info("Database engine ready (%s)", engine.url.render_as_string())
    try:
        yield
    finally:
        await engine.dispose()
        logger.info("Database engine disposed")


# ---------------------------------------------------------------------------
# Per-request dependencies, read from app.state
# ---------------------------------------------------------------------------


def get_session_factory(request: Request) -> async_sessionmaker[AsyncSession]:
    """Return the ``async_sessionmaker`` from ``app.state``."""
    return request.app.state.session_factory


def get_message_store(
    sf: Annotated[async_sessionmaker[AsyncSession], Depends(get_session_factory)],
) -> MessageStore:
    return MessageStore(sf)

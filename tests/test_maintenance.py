"""Retention purge command."""

import pytest

from supportchat.configs.config import AppConfig
from supportchat.infra.db import (
    MessageStore,
    Sender,
    create_engine,
    create_schema,
    create_session_factory,
)
from supportchat.maintenance import parse_args, purge


class TestParseArgs:
    def test_purge_days(self):
        args = parse_args(["purge", "--days", "30"])
        assert args.command == "purge"
        assert args.days == 30

    def test_negative_days_rejected(self):
        with pytest.raises(SystemExit):
            parse_args(["purge", "--days", "-1"])


class TestPurge:
    @pytest.mark.asyncio
    async def test_purge_zero_days_removes_everything(self, app_config: AppConfig):
        engine = create_engine(app_config.third_party)
        await create_schema(engine)
        store = MessageStore(create_session_factory(engine))
        conversation = await store.create_conversation()
        await store.append_message(conversation.id, Sender.USER, "hello")
        await engine.dispose()

        removed = await purge(app_config, days=0)

        assert removed == 1

    @pytest.mark.asyncio
    async def test_purge_keeps_recent(self, app_config: AppConfig):
        engine = create_engine(app_config.third_party)
        await create_schema(engine)
        store = MessageStore(create_session_factory(engine))
        await store.create_conversation()
        await engine.dispose()

        assert await purge(app_config, days=1) == 0

"""Operational commands run outside the web process.

Usage::

    python -m supportchat.maintenance purge --days 90
"""

import argparse
import asyncio
import logging
import sys
from datetime import timedelta

from supportchat.configs.config import AppConfig, get_app_config
from supportchat.infra.db import MessageStore, create_engine, create_session_factory
from supportchat.infra.db.models import utcnow
from supportchat.infra.logging import setup_logging

logger = logging.getLogger(__name__)


async def purge(config: AppConfig, days: int) -> int:
    """Delete conversations created more than *days* days ago."""
    engine = create_engine(config.third_party)
    try:
        store = MessageStore(create_session_factory(engine))
        return await store.purge_conversations(utcnow() - timedelta(days=days))
    finally:
        await engine.dispose()


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="python -m supportchat.maintenance",
        description="Support chat maintenance commands",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    purge_parser = commands.add_parser(
        "purge", help="Delete conversations older than a retention period"
    )
    purge_parser.add_argument(
        "--days",
        type=int,
        required=True,
        help="Retention period in days; older conversations are deleted",
    )
    args = parser.parse_args(argv)
    if args.command == "purge" and args.days < 0:
        parser.error("--days must not be negative")
    return args


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    config = get_app_config()
    setup_logging(config.logging)

    removed = asyncio.run(purge(config, args.days))
    logger.info("Retention purge finished: %d conversations removed", removed)
    return 0


if __name__ == "__main__":
    sys.exit(main())

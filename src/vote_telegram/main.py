from __future__ import annotations

import asyncio
import logging
import sys

from aiogram import Bot

from .bot import build_dispatcher
from .config import ConfigError, load_settings
from .lifecycle import SessionSweeper
from .logging_setup import setup_logging
from .votes import VoteStore

logger = logging.getLogger(__name__)


async def _run_async() -> None:
    settings = load_settings()
    setup_logging(settings.log_level)

    bot = Bot(token=settings.telegram_bot_token)
    store = VoteStore()
    sweeper = SessionSweeper(store=store, interval_seconds=settings.sweep_interval_seconds)
    dispatcher = build_dispatcher(bot=bot, store=store)

    await sweeper.start()
    logger.info("Vote bot started")
    try:
        await dispatcher.start_polling(bot, allowed_updates=["inline_query", "callback_query"])
    finally:
        await sweeper.stop()
        await bot.session.close()


def run() -> int:
    try:
        asyncio.run(_run_async())
    except ConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        print("Hint: copy .env.example to .env and set required values.", file=sys.stderr)
        return 2
    except KeyboardInterrupt:
        return 130
    return 0


if __name__ == "__main__":
    raise SystemExit(run())

from __future__ import annotations

import asyncio
import logging

from aiogram import Bot, Dispatcher
from aiogram.client.default import DefaultBotProperties
from aiogram.types import ErrorEvent

from reps_bot.config import settings
from reps_bot.context import AppContext
from reps_bot.handlers import setup_routers
from reps_bot.logging_config import setup_logging
from reps_bot.db.session import SessionLocal, create_all
from reps_bot.middlewares import VisitMiddleware

logger = logging.getLogger("reps_bot")


async def on_error(event: ErrorEvent) -> bool:
    logger.error(
        f"Unhandled error on update {event.update.update_id}: {event.exception}",
        exc_info=event.exception,
    )
    return True


async def main() -> None:
    setup_logging()
    if not settings.BOT_TOKEN:
        raise RuntimeError("BOT_TOKEN is not set. Put it in .env or the environment.")
    logger.info("Starting reps bot")

    # Ensure tables for local run (prefer Alembic for production)
    await create_all()

    bot = Bot(token=settings.BOT_TOKEN, default=DefaultBotProperties(parse_mode="HTML"))
    dp = Dispatcher()
    dp["ctx"] = AppContext(settings=settings, session_factory=SessionLocal)
    dp.message.middleware(VisitMiddleware())
    dp.callback_query.middleware(VisitMiddleware())
    dp.errors.register(on_error)
    dp.include_router(setup_routers())

    await dp.start_polling(bot)


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        logging.getLogger(__name__).info("Bot stopped")

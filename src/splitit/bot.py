from __future__ import annotations

import asyncio

from aiogram import Bot, Dispatcher
from aiogram.client.default import DefaultBotProperties
from aiogram.enums import ParseMode

from splitit.config import get_settings
from splitit.db.repo import BillRepository, Database, set_global_repository
from splitit.handlers import basic_router, bills_router, split_router
from splitit.logging import configure_logging, get_logger


async def main() -> None:
    configure_logging()
    settings = get_settings()
    bot = Bot(token=settings.bot_token, default=DefaultBotProperties(parse_mode=ParseMode.HTML))
    dp = Dispatcher()
    db = Database(settings.database_url)
    await db.connect()

    dp.include_router(basic_router)
    dp.include_router(bills_router)
    dp.include_router(split_router)

    set_global_repository(BillRepository(db))

    log = get_logger(__name__)
    log.info("bot.start")
    try:
        await dp.start_polling(bot)
    finally:
        await db.close()
        await bot.session.close()
        log.info("bot.stop")


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()

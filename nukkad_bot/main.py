from fastapi import FastAPI

from nukkad_bot import __version__
from nukkad_bot.bot import build_bot, get_bot, set_bot
from nukkad_bot.config import settings
from nukkad_bot.logging_config import get_logger, setup_logging
from nukkad_bot.routers import status, webhook

setup_logging(settings.log_level)

logger = get_logger("main")

app = FastAPI(
    title="Nukkad Bot",
    description="WhatsApp wholesale catalog bot for Nukkad Fabrics",
    version=__version__,
    debug=settings.debug,
)

app.include_router(status.router)
app.include_router(webhook.router)


@app.on_event("startup")
async def start_bot() -> None:
    bot = build_bot(settings)
    set_bot(bot)
    logger.info("Bot starting", extra={"context": {"gateway_url": settings.gateway_url}})
    await bot.manager.start()


@app.on_event("shutdown")
async def stop_bot() -> None:
    try:
        bot = get_bot()
    except RuntimeError:
        return
    await bot.manager.stop()
    set_bot(None)
    logger.info("Bot stopped")

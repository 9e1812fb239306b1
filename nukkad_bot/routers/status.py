"""Read-only status surface for the dashboard."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from nukkad_bot.bot import Bot, get_bot
from nukkad_bot.schemas.status import ConnectionStatus, HealthResponse, ServiceSummary

router = APIRouter()


@router.get("/", response_model=ServiceSummary)
async def root(bot: Bot = Depends(get_bot)):
    business = bot.catalog.business
    return ServiceSummary(
        business=business.name,
        category=business.category,
        phone=business.phone,
        connection_state=bot.manager.state.value,
        active_sessions=len(bot.sessions),
        server_time=bot.catalog.local_now(),
    )


@router.get("/health", response_model=HealthResponse)
async def health(bot: Bot = Depends(get_bot)):
    return HealthResponse(
        status="ok",
        business=bot.catalog.business.name,
        timestamp=datetime.now(timezone.utc),
        uptime_seconds=round(bot.uptime_seconds, 2),
    )


@router.get("/status", response_model=ConnectionStatus)
async def connection_status(bot: Bot = Depends(get_bot)):
    return bot.manager.status()

"""Wiring: builds the service graph once and hands it to the routers."""

import time
from dataclasses import dataclass, field
from typing import Optional

from nukkad_bot.catalog import Catalog, load_catalog
from nukkad_bot.config import Settings
from nukkad_bot.services.auth_state import AuthStateStore, FileAuthState
from nukkad_bot.services.connection_manager import Alerter, ConnectionManager
from nukkad_bot.services.intent_resolver import build_intent_resolver
from nukkad_bot.services.orchestrator import ConversationOrchestrator
from nukkad_bot.services.renderer import ResponseRenderer
from nukkad_bot.services.replies import ReplyBuilder
from nukkad_bot.services.scheduler import AsyncioScheduler, Scheduler
from nukkad_bot.services.selection_dispatcher import build_selection_dispatcher
from nukkad_bot.services.session_store import SessionStore
from nukkad_bot.services.transport import GatewayTransport, Transport


@dataclass
class Bot:
    catalog: Catalog
    sessions: SessionStore
    orchestrator: ConversationOrchestrator
    manager: ConnectionManager
    started_at: float = field(default_factory=time.monotonic)

    @property
    def uptime_seconds(self) -> float:
        return time.monotonic() - self.started_at


def build_bot(
    settings: Settings,
    catalog: Optional[Catalog] = None,
    transport: Optional[Transport] = None,
    scheduler: Optional[Scheduler] = None,
    auth_state: Optional[AuthStateStore] = None,
    alerter: Optional[Alerter] = None,
) -> Bot:
    catalog = catalog or load_catalog(settings.catalog_path)
    transport = transport or GatewayTransport(
        settings.gateway_url,
        token=settings.gateway_token,
        timeout=settings.gateway_timeout_seconds,
    )

    sessions = SessionStore()
    replies = ReplyBuilder(catalog)
    orchestrator = ConversationOrchestrator(
        sessions=sessions,
        intents=build_intent_resolver(replies),
        selections=build_selection_dispatcher(replies),
        replies=replies,
        renderer=ResponseRenderer(
            transport,
            max_native_buttons=settings.max_native_buttons,
            list_title=catalog.business.name,
        ),
    )
    manager = ConnectionManager(
        transport=transport,
        auth_state=auth_state or FileAuthState(settings.auth_state_path),
        scheduler=scheduler or AsyncioScheduler(),
        orchestrator=orchestrator,
        keepalive_interval=settings.keepalive_interval_seconds,
        reconnect_delay=settings.reconnect_delay_seconds,
        connect_retry_delay=settings.connect_retry_delay_seconds,
        alerter=alerter,
    )
    return Bot(catalog=catalog, sessions=sessions, orchestrator=orchestrator, manager=manager)


_bot: Optional[Bot] = None


def set_bot(bot: Optional[Bot]) -> None:
    global _bot
    _bot = bot


def get_bot() -> Bot:
    """FastAPI dependency."""
    if _bot is None:
        raise RuntimeError("Bot is not initialised")
    return _bot

from nukkad_bot.logging_config import LoggerAdapter, get_logger, log_business
from nukkad_bot.schemas.session import SessionUpdate
from nukkad_bot.schemas.whatsapp import InboundEvent
from nukkad_bot.services.intent_resolver import IntentResolver
from nukkad_bot.services.renderer import ResponseRenderer
from nukkad_bot.services.replies import ReplyBuilder
from nukkad_bot.services.selection_dispatcher import SelectionDispatcher
from nukkad_bot.services.session_store import SessionStore

logger = get_logger("orchestrator")


class ConversationOrchestrator:
    """One inbound event in, one response out. Errors stop at the turn boundary."""

    def __init__(
        self,
        sessions: SessionStore,
        intents: IntentResolver,
        selections: SelectionDispatcher,
        replies: ReplyBuilder,
        renderer: ResponseRenderer,
    ):
        self.sessions = sessions
        self.intents = intents
        self.selections = selections
        self.replies = replies
        self.renderer = renderer

    async def handle_turn(self, event: InboundEvent) -> None:
        log = LoggerAdapter(logger, {"jid": event.sender_id, "message_id": event.message_id})
        try:
            await self._run_turn(event, log)
        except Exception as e:
            log.error(f"Turn failed: {e}", exc_info=True)
            try:
                await self.renderer.render(event.sender_id, self.replies.apology())
            except Exception as send_error:
                log.error(f"Failed to send apology: {send_error}")

    async def _run_turn(self, event: InboundEvent, log: LoggerAdapter) -> None:
        jid = event.sender_id
        session = self.sessions.get_or_create(jid)

        if session.is_first_time:
            # Flag flips before the first await: exactly once per JID.
            self.sessions.patch(jid, SessionUpdate(is_first_time=False))
            log_business(logger, "NEW_USER", jid, "First contact, sending welcome", name=event.push_name)
            await self.renderer.render(jid, self.replies.welcome())
            return

        if event.selection_id:
            reply = self.selections.dispatch(event.selection_id, session)
        else:
            log_business(logger, "MESSAGE_RECEIVED", jid, event.text_content)
            reply = self.intents.resolve(event.text_content or "", session)

        await self.renderer.render(jid, reply.response)
        updated = self.sessions.patch(jid, reply.session_update)
        log.debug(
            "Turn completed",
            context={"kind": reply.response.kind, "menu_state": updated.current_menu_state.value},
        )

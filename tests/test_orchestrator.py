import asyncio
from unittest.mock import AsyncMock, Mock

import pytest

from nukkad_bot.schemas.responses import ButtonMenu, ListMenu, TextResponse
from nukkad_bot.schemas.session import MenuState
from nukkad_bot.schemas.whatsapp import InboundEvent
from nukkad_bot.services.intent_resolver import build_intent_resolver
from nukkad_bot.services.orchestrator import ConversationOrchestrator
from nukkad_bot.services.renderer import ResponseRenderer
from nukkad_bot.services.selection_dispatcher import build_selection_dispatcher
from nukkad_bot.services.session_store import SessionStore

JID = "919876543210@s.whatsapp.net"


@pytest.fixture
def sessions():
    return SessionStore()


@pytest.fixture
def renderer():
    return AsyncMock(spec=ResponseRenderer)


@pytest.fixture
def orchestrator(sessions, replies, renderer):
    return ConversationOrchestrator(
        sessions=sessions,
        intents=build_intent_resolver(replies),
        selections=build_selection_dispatcher(replies),
        replies=replies,
        renderer=renderer,
    )


def _text(text: str) -> InboundEvent:
    return InboundEvent(sender_id=JID, text_content=text, message_id="M")


def _selection(selection_id: str, text: str | None = None) -> InboundEvent:
    return InboundEvent(sender_id=JID, selection_id=selection_id, text_content=text, message_id="M")


def _sent(renderer, index: int = -1):
    return renderer.render.await_args_list[index][0][1]


class TestFirstContact:
    def test_first_event_gets_welcome(self, orchestrator, renderer, sessions, replies):
        asyncio.run(orchestrator.handle_turn(_text("cotton")))

        assert _sent(renderer) == replies.welcome()
        assert sessions.get_or_create(JID).is_first_time is False
        assert sessions.get_or_create(JID).current_menu_state == MenuState.MAIN

    def test_flag_flips_exactly_once(self, orchestrator, renderer, replies):
        asyncio.run(orchestrator.handle_turn(_text("menu")))
        asyncio.run(orchestrator.handle_turn(_text("menu")))

        assert renderer.render.await_count == 2
        assert _sent(renderer, 0) == replies.welcome()
        assert isinstance(_sent(renderer, 1), ListMenu)

    def test_first_selection_also_gets_welcome(self, orchestrator, renderer, replies):
        asyncio.run(orchestrator.handle_turn(_selection("cat_silk")))

        assert _sent(renderer) == replies.welcome()


class TestRouting:
    @pytest.fixture(autouse=True)
    def returning_user(self, sessions):
        sessions.patch(JID, {"is_first_time": False})

    def test_text_routed_to_intents(self, orchestrator, renderer):
        asyncio.run(orchestrator.handle_turn(_text("hi")))

        response = _sent(renderer)
        assert isinstance(response, ButtonMenu)
        assert len(response.actions) == 3

    def test_selection_takes_precedence_over_text(self, orchestrator, renderer):
        asyncio.run(orchestrator.handle_turn(_selection("cat_cotton", text="hello")))

        response = _sent(renderer)
        assert "Cotton Kurtis" in response.body
        assert len(response.actions) == 4

    def test_session_patched_after_turn(self, orchestrator, sessions):
        asyncio.run(orchestrator.handle_turn(_selection("menu_pricing")))

        assert sessions.get_or_create(JID).current_menu_state == MenuState.PRICING

    def test_category_follow_up_uses_patched_category(self, orchestrator, renderer):
        asyncio.run(orchestrator.handle_turn(_selection("cat_rayon")))
        asyncio.run(orchestrator.handle_turn(_selection("cat_pricing")))

        assert "Rayon Kurtis" in _sent(renderer).body

    def test_unknown_text(self, orchestrator, renderer):
        asyncio.run(orchestrator.handle_turn(_text("xyz123")))

        ids = [action.id for action in _sent(renderer).actions]
        assert "menu" in ids


class TestTurnBoundary:
    @pytest.fixture(autouse=True)
    def returning_user(self, sessions):
        sessions.patch(JID, {"is_first_time": False})

    def test_failure_sends_apology(self, orchestrator, renderer, replies):
        renderer.render.side_effect = [RuntimeError("boom"), None]

        asyncio.run(orchestrator.handle_turn(_text("hi")))

        apology = _sent(renderer)
        assert isinstance(apology, TextResponse)
        assert apology == replies.apology()

    def test_failed_turn_does_not_patch_session(self, orchestrator, renderer, sessions):
        renderer.render.side_effect = [RuntimeError("boom"), None]

        asyncio.run(orchestrator.handle_turn(_selection("menu_order")))

        assert sessions.get_or_create(JID).current_menu_state == MenuState.MAIN

    def test_apology_failure_is_swallowed(self, orchestrator, renderer):
        renderer.render.side_effect = RuntimeError("transport down")

        asyncio.run(orchestrator.handle_turn(_text("hi")))

        assert renderer.render.await_count == 2

    def test_handler_error_is_caught(self, orchestrator, renderer, replies):
        orchestrator.intents = Mock()
        orchestrator.intents.resolve.side_effect = KeyError("missing text")

        asyncio.run(orchestrator.handle_turn(_text("hi")))

        assert _sent(renderer) == replies.apology()

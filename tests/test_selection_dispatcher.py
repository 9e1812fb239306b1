from unittest.mock import Mock

import pytest

from nukkad_bot.schemas.responses import ButtonMenu, ListMenu, Reply, TextResponse
from nukkad_bot.schemas.selections import Selection
from nukkad_bot.schemas.session import MenuState, UserSession
from nukkad_bot.services.selection_dispatcher import (
    Route,
    SelectionDispatcher,
    build_routes,
    build_selection_dispatcher,
)

JID = "919876543210@s.whatsapp.net"


@pytest.fixture
def session():
    return UserSession(id=JID, is_first_time=False)


@pytest.fixture
def dispatcher(replies):
    return build_selection_dispatcher(replies)


class TestRegistry:
    def test_every_selection_is_registered(self, replies):
        routes = build_routes(replies)

        assert set(routes) == set(Selection)

    def test_category_routes_bind_category_name(self, replies):
        routes = build_routes(replies)

        assert routes[Selection.CAT_COTTON].argument == "Cotton Kurtis"
        assert routes[Selection.CAT_CASUAL].argument == "Casual Kurtis"
        assert routes[Selection.MENU_PRICING].argument is None

    @pytest.mark.parametrize("selection", list(Selection))
    def test_every_registered_id_produces_a_reply(self, dispatcher, session, selection):
        reply = dispatcher.dispatch(selection.value, session)

        assert isinstance(reply, Reply)
        assert reply.response.body


class TestDispatch:
    def test_invokes_registered_handler_with_bound_argument(self, session):
        handler = Mock(return_value=Reply(response=TextResponse(body="ok")))
        fallback = Mock()
        dispatcher = SelectionDispatcher({Selection.CAT_SILK: Route(handler, "Silk Kurtis")}, fallback)

        dispatcher.dispatch("cat_silk", session)

        request = handler.call_args[0][0]
        assert request.argument == "Silk Kurtis"
        assert request.session.id == JID
        fallback.assert_not_called()

    def test_cat_cotton(self, dispatcher, session):
        reply = dispatcher.dispatch("cat_cotton", session)

        assert isinstance(reply.response, ButtonMenu)
        assert "Cotton Kurtis" in reply.response.body
        assert [action.id for action in reply.response.actions] == [
            "cat_pricing",
            "cat_order",
            "cat_sizes",
            "cat_colors",
        ]
        assert reply.session_update.selected_category == "Cotton Kurtis"

    def test_menu_opens_main_list(self, dispatcher, session):
        reply = dispatcher.dispatch("menu", session)

        assert isinstance(reply.response, ListMenu)

    def test_unknown_id_yields_unknown_button(self, dispatcher, replies, session):
        reply = dispatcher.dispatch("does_not_exist", session)

        assert reply.response.body == replies.catalog.text("unknown_button")

    def test_lookup_is_exact(self, dispatcher, session):
        assert dispatcher.lookup("menu_collection") is not None
        assert dispatcher.lookup("menu_collection_extra") is None
        assert dispatcher.lookup("MENU_COLLECTION") is None
        assert dispatcher.lookup("cat_") is None

    def test_unknown_id_logged_as_warning(self, dispatcher, session, caplog):
        with caplog.at_level("WARNING", logger="nukkad.selection_dispatcher"):
            dispatcher.dispatch("btn_9", session)

        assert any("Unknown selection id" in record.getMessage() for record in caplog.records)


class TestCategoryFollowUps:
    def test_category_pricing_uses_selected_category(self, dispatcher):
        session = UserSession(id=JID, is_first_time=False, selected_category="Georgette Kurtis")

        reply = dispatcher.dispatch("cat_pricing", session)

        assert "Georgette Kurtis" in reply.response.body
        assert reply.session_update.current_menu_state == MenuState.CATEGORY_PRICING

    def test_category_pricing_defaults_to_cotton(self, dispatcher, session):
        reply = dispatcher.dispatch("cat_pricing", session)

        assert "Cotton Kurtis" in reply.response.body

    def test_color_options_show_category_colors(self, dispatcher, catalog):
        session = UserSession(id=JID, is_first_time=False, selected_category="Silk Kurtis")

        reply = dispatcher.dispatch("cat_colors", session)

        assert catalog.category("Silk Kurtis").colors in reply.response.body


class TestSessionUpdates:
    def test_whatsapp_order_records_method(self, dispatcher, session):
        reply = dispatcher.dispatch("order_whatsapp", session)

        assert reply.session_update.current_menu_state == MenuState.ORDER_WHATSAPP
        assert reply.session_update.order_data == {"order_method": "whatsapp"}

    def test_quick_quote_records_action(self, dispatcher, session):
        reply = dispatcher.dispatch("quick_quote", session)

        assert reply.session_update.order_data == {"action": "quote_request"}

    def test_back_to_pricing_reopens_pricing(self, dispatcher, session):
        reply = dispatcher.dispatch("back_to_pricing", session)

        assert reply.session_update.current_menu_state == MenuState.PRICING

from dataclasses import dataclass
from typing import Mapping, Optional

from nukkad_bot.logging_config import get_logger, log_business
from nukkad_bot.schemas.responses import Reply
from nukkad_bot.schemas.selections import Selection
from nukkad_bot.schemas.session import UserSession
from nukkad_bot.services.replies import ReplyBuilder, ScreenHandler, ScreenRequest

logger = get_logger("selection_dispatcher")


@dataclass(frozen=True)
class Route:
    """Handler plus the value bound to it at registration (e.g. a category name)."""

    handler: ScreenHandler
    argument: Optional[str] = None


class SelectionDispatcher:
    """Exact-match routing of button / list-row ids."""

    def __init__(self, routes: Mapping[Selection, Route], fallback: ScreenHandler):
        self._routes = dict(routes)
        self._fallback = fallback

    def lookup(self, selection_id: str) -> Optional[Route]:
        try:
            selection = Selection(selection_id)
        except ValueError:
            return None
        return self._routes.get(selection)

    def dispatch(self, selection_id: str, session: UserSession) -> Reply:
        route = self.lookup(selection_id)
        if route is None:
            logger.warning(
                "Unknown selection id",
                extra={"context": {"selection_id": selection_id, "jid": session.id}},
            )
            log_business(logger, "BUTTON_CLICK", session.id, f"Unknown button: {selection_id}", known=False)
            return self._fallback(ScreenRequest(session=session, argument=selection_id))

        log_business(logger, "BUTTON_CLICK", session.id, f"Button clicked: {selection_id}", known=True)
        return route.handler(ScreenRequest(session=session, argument=route.argument))


def build_routes(replies: ReplyBuilder) -> dict[Selection, Route]:
    routes: dict[Selection, Route] = {
        Selection.MENU: Route(replies.main_menu),
        Selection.MENU_COLLECTION: Route(replies.collection),
        Selection.MENU_PRICING: Route(replies.pricing),
        Selection.MENU_ORDER: Route(replies.order),
        Selection.MENU_CONTACT: Route(replies.contact),
        Selection.MENU_CHANNEL: Route(replies.channel),
        Selection.MENU_HOURS: Route(replies.hours),
        Selection.PRICING_BULK: Route(replies.bulk_pricing),
        Selection.PRICING_PAYMENT: Route(replies.payment_terms),
        Selection.ORDER_WHATSAPP: Route(replies.whatsapp_order),
        Selection.ORDER_CALL: Route(replies.call_order),
        Selection.ORDER_CATALOG: Route(replies.catalog_request),
        Selection.CONTACT_CALL: Route(replies.call_contact),
        Selection.CONTACT_LOCATION: Route(replies.location_share),
        Selection.CONTACT_BUSINESS_CARD: Route(replies.business_card),
        Selection.JOIN_CHANNEL: Route(replies.join_channel),
        Selection.JOIN_GROUP: Route(replies.join_group),
        Selection.GET_UPDATES: Route(replies.get_updates),
        Selection.CAT_PRICING: Route(replies.category_pricing),
        Selection.CAT_ORDER: Route(replies.category_order),
        Selection.CAT_SIZES: Route(replies.size_chart),
        Selection.CAT_COLORS: Route(replies.color_options),
        Selection.QUICK_QUOTE: Route(replies.quick_quote),
        Selection.QUICK_CATALOG: Route(replies.quick_catalog),
        Selection.QUICK_SUPPORT: Route(replies.quick_support),
        Selection.BACK_TO_MENU: Route(replies.back_to_menu),
        Selection.BACK_TO_COLLECTION: Route(replies.collection),
        Selection.BACK_TO_PRICING: Route(replies.pricing),
    }
    for info in replies.catalog.categories:
        routes[Selection(f"cat_{info.key}")] = Route(replies.category_details, info.name)
    return routes


def build_selection_dispatcher(replies: ReplyBuilder) -> SelectionDispatcher:
    return SelectionDispatcher(build_routes(replies), fallback=replies.unknown_button)

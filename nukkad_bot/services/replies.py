"""Screens: every structured reply the bot can send, built from catalog content."""

import random
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Optional

from nukkad_bot.catalog import Catalog, CategoryInfo
from nukkad_bot.schemas.responses import Action, ButtonMenu, ListMenu, Reply, Row, Section, TextResponse
from nukkad_bot.schemas.selections import Selection
from nukkad_bot.schemas.session import MenuState, SessionUpdate, UserSession

MIN_ORDER_FOOTER = "📦 Min Order: 12 pieces | 🚚 Free shipping above ₹5000"
HELP_FOOTER = "We're here to help!"
PREMIUM_CATEGORY_COUNT = 4


@dataclass(frozen=True)
class ScreenRequest:
    """Input to a screen handler. `argument` is bound by the registry entry (e.g. a category)."""

    session: UserSession
    argument: Optional[str] = None
    text: str = ""


ScreenHandler = Callable[[ScreenRequest], Reply]


def action(selection: Selection, label: str) -> Action:
    return Action(id=selection.value, label=label)


def row(selection: Selection | str, title: str, description: str = "") -> Row:
    row_id = selection.value if isinstance(selection, Selection) else selection
    return Row(id=row_id, title=title, description=description)


def bullets(items: list[str]) -> str:
    return "\n".join(f"• {item}" for item in items)


def _update(state: MenuState, **fields: Any) -> SessionUpdate:
    return SessionUpdate(current_menu_state=state, **fields)


class ReplyBuilder:
    def __init__(
        self,
        catalog: Catalog,
        rng: Optional[random.Random] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.catalog = catalog
        self._rng = rng or random.Random()
        self._clock = clock

    def _now(self) -> Optional[datetime]:
        return self._clock() if self._clock else None

    def _status(self) -> str:
        return self.catalog.business_status(self._now())

    def _availability(self) -> str:
        return "🟢 Available" if self.catalog.is_business_open(self._now()) else "🔴 Closed"

    @property
    def _brand_footer(self) -> str:
        return f"{self.catalog.business.name} - Your Wholesale Partner"

    def _main_menu_sections(self) -> list[Section]:
        return [
            Section(
                title="🛍️ Products & Services",
                rows=[
                    row(Selection.MENU_COLLECTION, "👗 View Collection", "Browse our kurti categories"),
                    row(Selection.MENU_PRICING, "💰 Wholesale Pricing", "Get pricing information"),
                    row(Selection.MENU_ORDER, "🛒 Place Order", "Start your order process"),
                ],
            ),
            Section(
                title="📞 Contact & Info",
                rows=[
                    row(Selection.MENU_CONTACT, "📱 Contact Information", "Phone, address & details"),
                    row(Selection.MENU_CHANNEL, "📢 Join Our Channel", "Latest updates & offers"),
                    row(Selection.MENU_HOURS, "🕒 Business Hours", "Our working hours"),
                ],
            ),
        ]

    def _category_row(self, info: CategoryInfo) -> Row:
        return row(f"cat_{info.key}", info.name, f"{info.price}+ | {info.tagline}")

    def _collection_sections(self) -> list[Section]:
        categories = self.catalog.categories
        return [
            Section(
                title="🌟 Premium Fabric Collection",
                rows=[self._category_row(info) for info in categories[:PREMIUM_CATEGORY_COUNT]],
            ),
            Section(
                title="🎨 Design Collection",
                rows=[self._category_row(info) for info in categories[PREMIUM_CATEGORY_COUNT:]],
            ),
        ]

    # --- Fixed responses -------------------------------------------------

    def welcome(self) -> ButtonMenu:
        """First-contact greeting. Sent once per JID, before any routing."""
        return ButtonMenu(
            body=self.catalog.text("welcome"),
            actions=[
                action(Selection.MENU_COLLECTION, "👗 View Collection"),
                action(Selection.MENU_PRICING, "💰 Wholesale Pricing"),
                action(Selection.MENU_CONTACT, "📞 Contact Info"),
            ],
            footer=self.catalog.text("welcome_footer"),
        )

    def apology(self) -> TextResponse:
        return TextResponse(body=self.catalog.text("apology"))

    # --- Free-text and shared screens --------------------------------------

    def greeting(self, request: ScreenRequest) -> Reply:
        return Reply(
            response=ButtonMenu(
                body=self._rng.choice(self.catalog.variants("greetings")),
                actions=[
                    action(Selection.MENU_COLLECTION, "👗 View Collection"),
                    action(Selection.MENU_PRICING, "💰 Pricing Info"),
                    action(Selection.MENU_CONTACT, "📞 Contact Us"),
                ],
                footer="Choose an option to continue",
            ),
            session_update=_update(MenuState.MAIN),
        )

    def main_menu(self, request: ScreenRequest) -> Reply:
        return Reply(
            response=ListMenu(
                body=self.catalog.text("main_menu"),
                button_text="📋 Select Option",
                sections=self._main_menu_sections(),
                footer=self._brand_footer,
            ),
            session_update=_update(MenuState.MAIN),
        )

    def back_to_menu(self, request: ScreenRequest) -> Reply:
        return Reply(
            response=ListMenu(
                body=self.catalog.text("back_to_menu"),
                button_text="📋 Select Option",
                sections=self._main_menu_sections(),
                footer=self._brand_footer,
            ),
            session_update=_update(MenuState.MAIN),
        )

    def collection(self, request: ScreenRequest) -> Reply:
        return Reply(
            response=ListMenu(
                body=self.catalog.text("collection"),
                button_text="👗 Select Category",
                sections=self._collection_sections(),
                footer=MIN_ORDER_FOOTER,
            ),
            session_update=_update(MenuState.COLLECTION),
        )

    def pricing(self, request: ScreenRequest) -> Reply:
        return Reply(
            response=ButtonMenu(
                body=self.catalog.text("pricing"),
                actions=[
                    action(Selection.PRICING_BULK, "📊 Bulk Discounts"),
                    action(Selection.PRICING_PAYMENT, "💳 Payment Options"),
                    action(Selection.QUICK_QUOTE, "💬 Get Quote"),
                ],
                footer="Best wholesale prices guaranteed!",
            ),
            session_update=_update(MenuState.PRICING),
        )

    def order(self, request: ScreenRequest) -> Reply:
        return Reply(
            response=ButtonMenu(
                body=self.catalog.text("order"),
                actions=[
                    action(Selection.ORDER_WHATSAPP, "💬 Order via WhatsApp"),
                    action(Selection.ORDER_CALL, "📞 Call to Order"),
                    action(Selection.ORDER_CATALOG, "📋 Request Catalog"),
                ],
                footer="🚚 Fast delivery across India",
            ),
            session_update=_update(MenuState.ORDER),
        )

    def contact(self, request: ScreenRequest) -> Reply:
        return Reply(
            response=ButtonMenu(
                body=self.catalog.text("contact", status=self._status()),
                actions=[
                    action(Selection.CONTACT_CALL, "📞 Call Now"),
                    action(Selection.CONTACT_LOCATION, "📍 Get Location"),
                    action(Selection.CONTACT_BUSINESS_CARD, "💼 Business Card"),
                ],
                footer="We're here to help you!",
            ),
            session_update=_update(MenuState.CONTACT),
        )

    def channel(self, request: ScreenRequest) -> Reply:
        return Reply(
            response=ButtonMenu(
                body=self.catalog.text("channel"),
                actions=[
                    action(Selection.JOIN_CHANNEL, "📢 Join Channel"),
                    action(Selection.JOIN_GROUP, "👥 Join Group"),
                    action(Selection.GET_UPDATES, "🔔 Get Updates"),
                ],
                footer=f"Stay connected with {self.catalog.business.name}!",
            ),
            session_update=_update(MenuState.CHANNEL),
        )

    def hours(self, request: ScreenRequest) -> Reply:
        current_time = self.catalog.local_now(self._now()).strftime("%I:%M %p")
        return Reply(
            response=ButtonMenu(
                body=self.catalog.text("hours", current_time=current_time, status=self._status()),
                actions=[
                    action(Selection.CONTACT_CALL, "📞 Call Now"),
                    action(Selection.QUICK_SUPPORT, "💬 Quick Support"),
                    action(Selection.BACK_TO_MENU, "🏠 Main Menu"),
                ],
                footer="We're committed to serving you!",
            ),
            session_update=_update(MenuState.HOURS),
        )

    def category_details(self, request: ScreenRequest) -> Reply:
        info = self.catalog.category(request.argument)
        body = self.catalog.text(
            "category_details",
            category=info.name,
            price=info.price,
            features=bullets(info.features),
            sizes=info.sizes,
            colors=info.colors,
            ideal_for=bullets(info.ideal_for),
        )
        return Reply(
            response=ButtonMenu(
                body=body,
                actions=[
                    action(Selection.CAT_PRICING, "💰 Get Pricing"),
                    action(Selection.CAT_ORDER, "🛒 Order Now"),
                    action(Selection.CAT_SIZES, "📏 Size Chart"),
                    action(Selection.CAT_COLORS, "🎨 Color Options"),
                ],
                footer=f"{info.name} - Premium Quality Guaranteed",
            ),
            session_update=_update(MenuState.CATEGORY_DETAILS, selected_category=info.name),
        )

    def thanks(self, request: ScreenRequest) -> Reply:
        body = self._rng.choice(self.catalog.variants("thanks")) + "\n\n" + self.catalog.text("goodbye")
        return Reply(
            response=ButtonMenu(
                body=body,
                actions=[
                    action(Selection.MENU_COLLECTION, "👗 Browse Again"),
                    action(Selection.MENU_CONTACT, "📞 Contact Us"),
                    action(Selection.JOIN_CHANNEL, "📢 Join Channel"),
                ],
                footer="Visit us again soon!",
            )
        )

    def unknown_command(self, request: ScreenRequest) -> Reply:
        """`request.argument` is the suggestion text key picked from keyword hints, if any."""
        body = self.catalog.text("unknown_command")
        if request.argument:
            body += "\n\n" + self.catalog.text(request.argument)
        return Reply(
            response=ButtonMenu(
                body=body,
                actions=[
                    action(Selection.MENU, "📋 Main Menu"),
                    action(Selection.MENU_COLLECTION, "👗 View Collection"),
                    action(Selection.MENU_CONTACT, "📞 Contact Us"),
                ],
                footer=HELP_FOOTER,
            )
        )

    def unknown_button(self, request: ScreenRequest) -> Reply:
        return Reply(
            response=ButtonMenu(
                body=self.catalog.text("unknown_button"),
                actions=[
                    action(Selection.BACK_TO_MENU, "🏠 Main Menu"),
                    action(Selection.MENU_COLLECTION, "👗 View Collection"),
                    action(Selection.QUICK_SUPPORT, "💬 Get Help"),
                ],
                footer=HELP_FOOTER,
            )
        )

    # --- Selection-only screens --------------------------------------------

    def bulk_pricing(self, request: ScreenRequest) -> Reply:
        return Reply(
            response=ButtonMenu(
                body=self.catalog.text("bulk_pricing"),
                actions=[
                    action(Selection.QUICK_QUOTE, "💬 Get Custom Quote"),
                    action(Selection.PRICING_PAYMENT, "💳 Payment Terms"),
                    action(Selection.BACK_TO_PRICING, "⬅️ Back to Pricing"),
                ],
                footer="Bigger orders = Better savings!",
            )
        )

    def payment_terms(self, request: ScreenRequest) -> Reply:
        return Reply(
            response=ButtonMenu(
                body=self.catalog.text("payment_terms"),
                actions=[
                    action(Selection.QUICK_QUOTE, "💬 Get Payment Details"),
                    action(Selection.PRICING_BULK, "📊 Bulk Discounts"),
                    action(Selection.BACK_TO_PRICING, "⬅️ Back to Pricing"),
                ],
                footer="Secure & convenient payment options",
            )
        )

    def whatsapp_order(self, request: ScreenRequest) -> Reply:
        return Reply(
            response=TextResponse(body=self.catalog.text("whatsapp_order")),
            session_update=_update(MenuState.ORDER_WHATSAPP, order_data={"order_method": "whatsapp"}),
        )

    def call_order(self, request: ScreenRequest) -> Reply:
        return Reply(
            response=ButtonMenu(
                body=self.catalog.text("call_order", availability=self._availability()),
                actions=[
                    action(Selection.CONTACT_CALL, "📞 Call Now"),
                    action(Selection.ORDER_WHATSAPP, "💬 WhatsApp Order"),
                    action(Selection.BACK_TO_MENU, "🏠 Main Menu"),
                ],
                footer="Speak directly with our sales team!",
            ),
            session_update=_update(MenuState.ORDER, order_data={"order_method": "call"}),
        )

    def catalog_request(self, request: ScreenRequest) -> Reply:
        return Reply(
            response=TextResponse(body=self.catalog.text("catalog_request")),
            session_update=_update(MenuState.CATALOG_REQUEST),
        )

    def call_contact(self, request: ScreenRequest) -> Reply:
        return Reply(
            response=TextResponse(body=self.catalog.text("call_contact", availability=self._availability())),
            session_update=_update(MenuState.CALL_CONTACT),
        )

    def location_share(self, request: ScreenRequest) -> Reply:
        return Reply(
            response=TextResponse(body=self.catalog.text("location_share")),
            session_update=_update(MenuState.LOCATION_SHARE),
        )

    def business_card(self, request: ScreenRequest) -> Reply:
        return Reply(
            response=TextResponse(body=self.catalog.text("business_card")),
            session_update=_update(MenuState.BUSINESS_CARD),
        )

    def join_channel(self, request: ScreenRequest) -> Reply:
        return Reply(
            response=TextResponse(body=self.catalog.text("join_channel")),
            session_update=_update(MenuState.JOIN_CHANNEL, preferences={"updates_via": "channel"}),
        )

    def join_group(self, request: ScreenRequest) -> Reply:
        return Reply(
            response=TextResponse(body=self.catalog.text("join_group")),
            session_update=_update(MenuState.JOIN_GROUP, preferences={"updates_via": "group"}),
        )

    def get_updates(self, request: ScreenRequest) -> Reply:
        return Reply(
            response=ButtonMenu(
                body=self.catalog.text("get_updates"),
                actions=[
                    action(Selection.JOIN_CHANNEL, "📢 Join Channel"),
                    action(Selection.JOIN_GROUP, "👥 Join Group"),
                    action(Selection.QUICK_SUPPORT, "💬 Personal Updates"),
                ],
                footer="Choose your preferred update method",
            ),
            session_update=_update(MenuState.GET_UPDATES),
        )

    def category_pricing(self, request: ScreenRequest) -> Reply:
        info = self.catalog.category(request.session.selected_category)
        return Reply(
            response=TextResponse(
                body=self.catalog.text("category_pricing", category=info.name, price=info.price)
            ),
            session_update=_update(MenuState.CATEGORY_PRICING),
        )

    def category_order(self, request: ScreenRequest) -> Reply:
        info = self.catalog.category(request.session.selected_category)
        return Reply(
            response=ButtonMenu(
                body=self.catalog.text("category_order", category=info.name),
                actions=[
                    action(Selection.ORDER_WHATSAPP, "💬 WhatsApp Order"),
                    action(Selection.ORDER_CALL, "📞 Call to Order"),
                    action(Selection.QUICK_QUOTE, "💰 Get Quote"),
                ],
                footer=f"{info.name} - Ready to ship!",
            ),
            session_update=_update(MenuState.CATEGORY_ORDER, order_data={"category": info.name}),
        )

    def size_chart(self, request: ScreenRequest) -> Reply:
        return Reply(
            response=TextResponse(body=self.catalog.text("size_chart")),
            session_update=_update(MenuState.SIZE_CHART),
        )

    def color_options(self, request: ScreenRequest) -> Reply:
        info = self.catalog.category(request.session.selected_category)
        return Reply(
            response=TextResponse(body=self.catalog.text("color_options", category=info.name, colors=info.colors)),
            session_update=_update(MenuState.COLOR_OPTIONS),
        )

    def quick_quote(self, request: ScreenRequest) -> Reply:
        return Reply(
            response=TextResponse(body=self.catalog.text("quick_quote")),
            session_update=_update(MenuState.QUICK_QUOTE, order_data={"action": "quote_request"}),
        )

    def quick_catalog(self, request: ScreenRequest) -> Reply:
        return Reply(
            response=TextResponse(body=self.catalog.text("quick_catalog")),
            session_update=_update(MenuState.QUICK_CATALOG),
        )

    def quick_support(self, request: ScreenRequest) -> Reply:
        return Reply(
            response=ButtonMenu(
                body=self.catalog.text("quick_support"),
                actions=[
                    action(Selection.CONTACT_CALL, "📞 Call Support"),
                    action(Selection.ORDER_WHATSAPP, "💬 WhatsApp Help"),
                    action(Selection.JOIN_GROUP, "👥 Community Help"),
                ],
                footer="We're here to help you succeed!",
            ),
            session_update=_update(MenuState.QUICK_SUPPORT),
        )

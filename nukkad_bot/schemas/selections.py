from enum import Enum


class Selection(str, Enum):
    """Every button / list-row id the bot ever sends."""

    MENU = "menu"
    MENU_COLLECTION = "menu_collection"
    MENU_PRICING = "menu_pricing"
    MENU_ORDER = "menu_order"
    MENU_CONTACT = "menu_contact"
    MENU_CHANNEL = "menu_channel"
    MENU_HOURS = "menu_hours"

    CAT_COTTON = "cat_cotton"
    CAT_RAYON = "cat_rayon"
    CAT_GEORGETTE = "cat_georgette"
    CAT_SILK = "cat_silk"
    CAT_PRINTED = "cat_printed"
    CAT_EMBROIDERED = "cat_embroidered"
    CAT_DESIGNER = "cat_designer"
    CAT_CASUAL = "cat_casual"

    PRICING_BULK = "pricing_bulk"
    PRICING_PAYMENT = "pricing_payment"

    ORDER_WHATSAPP = "order_whatsapp"
    ORDER_CALL = "order_call"
    ORDER_CATALOG = "order_catalog"

    CONTACT_CALL = "contact_call"
    CONTACT_LOCATION = "contact_location"
    CONTACT_BUSINESS_CARD = "contact_business_card"

    JOIN_CHANNEL = "join_channel"
    JOIN_GROUP = "join_group"
    GET_UPDATES = "get_updates"

    CAT_PRICING = "cat_pricing"
    CAT_ORDER = "cat_order"
    CAT_SIZES = "cat_sizes"
    CAT_COLORS = "cat_colors"

    QUICK_QUOTE = "quick_quote"
    QUICK_CATALOG = "quick_catalog"
    QUICK_SUPPORT = "quick_support"

    BACK_TO_MENU = "back_to_menu"
    BACK_TO_COLLECTION = "back_to_collection"
    BACK_TO_PRICING = "back_to_pricing"


CATEGORY_SELECTIONS = frozenset(
    {
        Selection.CAT_COTTON,
        Selection.CAT_RAYON,
        Selection.CAT_GEORGETTE,
        Selection.CAT_SILK,
        Selection.CAT_PRINTED,
        Selection.CAT_EMBROIDERED,
        Selection.CAT_DESIGNER,
        Selection.CAT_CASUAL,
    }
)

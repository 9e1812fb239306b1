from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field


class MenuState(str, Enum):
    MAIN = "main"
    COLLECTION = "collection"
    PRICING = "pricing"
    ORDER = "order"
    CONTACT = "contact"
    CHANNEL = "channel"
    HOURS = "hours"
    CATEGORY_DETAILS = "category_details"
    CATEGORY_PRICING = "category_pricing"
    CATEGORY_ORDER = "category_order"
    SIZE_CHART = "size_chart"
    COLOR_OPTIONS = "color_options"
    ORDER_WHATSAPP = "order_whatsapp"
    CATALOG_REQUEST = "catalog_request"
    CALL_CONTACT = "call_contact"
    LOCATION_SHARE = "location_share"
    BUSINESS_CARD = "business_card"
    JOIN_CHANNEL = "join_channel"
    JOIN_GROUP = "join_group"
    GET_UPDATES = "get_updates"
    QUICK_QUOTE = "quick_quote"
    QUICK_CATALOG = "quick_catalog"
    QUICK_SUPPORT = "quick_support"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class UserSession(BaseModel):
    id: str
    is_first_time: bool = True
    last_interaction: datetime = Field(default_factory=utc_now)
    current_menu_state: MenuState = MenuState.MAIN
    selected_category: Optional[str] = None
    order_data: dict[str, Any] = Field(default_factory=dict)
    preferences: dict[str, Any] = Field(default_factory=dict)


class SessionUpdate(BaseModel):
    """Partial session patch. Only fields that were set are applied; mappings are merged."""

    is_first_time: Optional[bool] = None
    current_menu_state: Optional[MenuState] = None
    selected_category: Optional[str] = None
    order_data: Optional[dict[str, Any]] = None
    preferences: Optional[dict[str, Any]] = None

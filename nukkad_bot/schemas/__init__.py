from nukkad_bot.schemas.responses import (
    Action,
    ButtonMenu,
    ListMenu,
    Reply,
    ResponseDescriptor,
    Row,
    Section,
    TextResponse,
)
from nukkad_bot.schemas.session import MenuState, SessionUpdate, UserSession

__all__ = [
    "Action",
    "ButtonMenu",
    "ListMenu",
    "MenuState",
    "Reply",
    "ResponseDescriptor",
    "Row",
    "Section",
    "SessionUpdate",
    "TextResponse",
    "UserSession",
]

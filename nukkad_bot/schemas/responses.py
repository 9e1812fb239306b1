from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from nukkad_bot.schemas.session import SessionUpdate


class Action(BaseModel):
    id: str
    label: str


class Row(BaseModel):
    id: str
    title: str
    description: str = ""


class Section(BaseModel):
    title: str
    rows: list[Row]


class TextResponse(BaseModel):
    model_config = ConfigDict(extra="forbid")

    kind: Literal["text"] = "text"
    body: str


class ButtonMenu(BaseModel):
    model_config = ConfigDict(extra="forbid")

    kind: Literal["buttons"] = "buttons"
    body: str
    actions: list[Action]
    footer: str = ""


class ListMenu(BaseModel):
    model_config = ConfigDict(extra="forbid")

    kind: Literal["list"] = "list"
    body: str
    button_text: str
    sections: list[Section]
    footer: str = ""


ResponseDescriptor = Annotated[Union[TextResponse, ButtonMenu, ListMenu], Field(discriminator="kind")]


class Reply(BaseModel):
    """Handler output: what to send plus the session patch to apply after delivery."""

    response: ResponseDescriptor
    session_update: Optional[SessionUpdate] = None

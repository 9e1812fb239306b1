from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

GROUP_JID_SUFFIX = "@g.us"


def is_group_jid(jid: str | None) -> bool:
    return bool(jid) and jid.endswith(GROUP_JID_SUFFIX)


class MessageKey(BaseModel):
    remoteJid: str
    fromMe: bool = False
    id: Optional[str] = None
    participant: Optional[str] = None


class ExtendedTextMessage(BaseModel):
    text: Optional[str] = None


class ButtonsResponseMessage(BaseModel):
    selectedButtonId: Optional[str] = None
    selectedDisplayText: Optional[str] = None


class SingleSelectReply(BaseModel):
    selectedRowId: Optional[str] = None


class ListResponseMessage(BaseModel):
    title: Optional[str] = None
    singleSelectReply: Optional[SingleSelectReply] = None


class TemplateButtonReplyMessage(BaseModel):
    selectedId: Optional[str] = None
    selectedDisplayText: Optional[str] = None


class MessageContent(BaseModel):
    conversation: Optional[str] = None
    extendedTextMessage: Optional[ExtendedTextMessage] = None
    buttonsResponseMessage: Optional[ButtonsResponseMessage] = None
    listResponseMessage: Optional[ListResponseMessage] = None
    templateButtonReplyMessage: Optional[TemplateButtonReplyMessage] = None

    model_config = ConfigDict(extra="allow")  # media, reactions, protocol messages

    def text(self) -> str:
        if self.conversation:
            return self.conversation.strip()
        if self.extendedTextMessage and self.extendedTextMessage.text:
            return self.extendedTextMessage.text.strip()
        return ""

    def selection_id(self) -> str:
        selected = None
        if self.buttonsResponseMessage:
            selected = self.buttonsResponseMessage.selectedButtonId
        if not selected and self.listResponseMessage and self.listResponseMessage.singleSelectReply:
            selected = self.listResponseMessage.singleSelectReply.selectedRowId
        if not selected and self.templateButtonReplyMessage:
            selected = self.templateButtonReplyMessage.selectedId
        return (selected or "").strip()


class WAMessage(BaseModel):
    key: MessageKey
    message: Optional[MessageContent] = None
    pushName: Optional[str] = None
    messageTimestamp: Optional[int] = None


class MessagesUpsert(BaseModel):
    messages: list[WAMessage] = Field(default_factory=list)
    type: Optional[str] = None  # notify, append


class LastDisconnect(BaseModel):
    statusCode: Optional[int] = None
    reason: Optional[str] = None
    error: Optional[Any] = None


class ConnectionUpdate(BaseModel):
    connection: Optional[Literal["open", "close", "connecting"]] = None
    qr: Optional[str] = None
    lastDisconnect: Optional[LastDisconnect] = None


class CredsUpdate(BaseModel):
    creds: dict[str, Any]


class InboundEvent(BaseModel):
    """Normalized inbound event handed from the connection manager to the orchestrator."""

    sender_id: str
    is_self: bool = False
    is_group: bool = False
    text_content: Optional[str] = None
    selection_id: Optional[str] = None
    message_id: Optional[str] = None
    participant: Optional[str] = None
    push_name: Optional[str] = None

    @classmethod
    def from_message(cls, msg: WAMessage) -> "InboundEvent":
        content = msg.message
        return cls(
            sender_id=msg.key.remoteJid,
            is_self=msg.key.fromMe,
            is_group=is_group_jid(msg.key.remoteJid),
            text_content=(content.text() if content else "") or None,
            selection_id=(content.selection_id() if content else "") or None,
            message_id=msg.key.id,
            participant=msg.key.participant,
            push_name=msg.pushName,
        )


class WebhookResponse(BaseModel):
    success: bool
    message: Optional[str] = None
    processed: int = 0

import pytest
from pydantic import TypeAdapter, ValidationError

from nukkad_bot.schemas.responses import ButtonMenu, ListMenu, ResponseDescriptor, TextResponse
from nukkad_bot.schemas.whatsapp import ConnectionUpdate, InboundEvent, WAMessage, is_group_jid

JID = "919876543210@s.whatsapp.net"


def _message(content: dict, **key) -> WAMessage:
    return WAMessage.model_validate({"key": {"remoteJid": JID, "id": "X", **key}, "message": content})


class TestInboundEvent:
    def test_plain_conversation_text(self):
        event = InboundEvent.from_message(_message({"conversation": "  Hi there  "}))

        assert event.text_content == "Hi there"
        assert event.selection_id is None
        assert event.is_self is False
        assert event.is_group is False

    def test_extended_text(self):
        event = InboundEvent.from_message(_message({"extendedTextMessage": {"text": "pricing"}}))

        assert event.text_content == "pricing"

    def test_button_reply(self):
        event = InboundEvent.from_message(
            _message({"buttonsResponseMessage": {"selectedButtonId": "menu_pricing"}})
        )

        assert event.selection_id == "menu_pricing"
        assert event.text_content is None

    def test_list_reply(self):
        event = InboundEvent.from_message(
            _message({"listResponseMessage": {"singleSelectReply": {"selectedRowId": "cat_silk"}}})
        )

        assert event.selection_id == "cat_silk"

    def test_template_button_reply(self):
        event = InboundEvent.from_message(_message({"templateButtonReplyMessage": {"selectedId": "menu"}}))

        assert event.selection_id == "menu"

    def test_media_only_has_no_content(self):
        event = InboundEvent.from_message(_message({"imageMessage": {"caption": None}}))

        assert event.text_content is None
        assert event.selection_id is None

    def test_missing_message(self):
        event = InboundEvent.from_message(WAMessage.model_validate({"key": {"remoteJid": JID}}))

        assert event.text_content is None

    def test_flags(self):
        event = InboundEvent.from_message(
            WAMessage.model_validate(
                {"key": {"remoteJid": "120363000@g.us", "fromMe": True}, "message": {"conversation": "x"}}
            )
        )

        assert event.is_self is True
        assert event.is_group is True


class TestIsGroupJid:
    def test_group(self):
        assert is_group_jid("120363000@g.us") is True

    def test_user(self):
        assert is_group_jid(JID) is False

    def test_empty(self):
        assert not is_group_jid(None)


class TestConnectionUpdate:
    def test_close_with_status(self):
        update = ConnectionUpdate.model_validate(
            {"connection": "close", "lastDisconnect": {"statusCode": 401, "error": {"message": "logged out"}}}
        )

        assert update.lastDisconnect.statusCode == 401

    def test_unknown_connection_value_rejected(self):
        with pytest.raises(ValidationError):
            ConnectionUpdate.model_validate({"connection": "sleeping"})


class TestResponseDescriptor:
    def test_discriminated_by_kind(self):
        adapter = TypeAdapter(ResponseDescriptor)

        assert isinstance(adapter.validate_python({"kind": "text", "body": "x"}), TextResponse)
        assert isinstance(
            adapter.validate_python({"kind": "buttons", "body": "x", "actions": [{"id": "a", "label": "A"}]}),
            ButtonMenu,
        )
        assert isinstance(
            adapter.validate_python({"kind": "list", "body": "x", "button_text": "Go", "sections": []}),
            ListMenu,
        )

    def test_extra_fields_rejected(self):
        with pytest.raises(ValidationError):
            TextResponse(body="x", actions=[])

from nukkad_bot.logging_config import get_logger
from nukkad_bot.schemas.responses import ButtonMenu, ListMenu, ResponseDescriptor, Row, Section, TextResponse
from nukkad_bot.services.transport import Transport, TransportDeliveryFailure

logger = get_logger("renderer")


def degrade_to_text(descriptor: ResponseDescriptor) -> str:
    """Plain-text rendering of a rich response. Every action / row keeps its position as a numbered line."""
    if isinstance(descriptor, TextResponse):
        return descriptor.body

    if isinstance(descriptor, ButtonMenu):
        lines = [f"{index}. {item.label}" for index, item in enumerate(descriptor.actions, start=1)]
        return descriptor.body + "\n\n" + "\n".join(lines)

    blocks = []
    for section_index, section in enumerate(descriptor.sections, start=1):
        lines = [f"*{section.title}:*"]
        lines.extend(
            f"{section_index}.{row_index} {row.title}" for row_index, row in enumerate(section.rows, start=1)
        )
        blocks.append("\n".join(lines))
    return descriptor.body + "\n\n" + "\n\n".join(blocks)


def buttons_as_section(menu: ButtonMenu) -> Section:
    return Section(title="Options", rows=[Row(id=item.id, title=item.label) for item in menu.actions])


class ResponseRenderer:
    """Delivers a response natively and falls back to plain text when the transport rejects it."""

    def __init__(self, transport: Transport, max_native_buttons: int = 3, list_title: str = ""):
        self.transport = transport
        self.max_native_buttons = max_native_buttons
        self.list_title = list_title

    async def render(self, jid: str, descriptor: ResponseDescriptor) -> None:
        if isinstance(descriptor, TextResponse):
            await self.transport.send_text(jid, descriptor.body)
            return

        try:
            await self._send_native(jid, descriptor)
        except TransportDeliveryFailure as e:
            logger.warning(
                f"Rich delivery failed, sending text: {e}",
                extra={"context": {"jid": jid, "kind": descriptor.kind, "status_code": e.status_code}},
            )
            await self.transport.send_text(jid, degrade_to_text(descriptor))

    async def _send_native(self, jid: str, descriptor: ButtonMenu | ListMenu) -> None:
        if isinstance(descriptor, ListMenu):
            await self.transport.send_list(
                jid,
                descriptor.body,
                descriptor.button_text,
                descriptor.sections,
                footer=descriptor.footer,
                title=self.list_title,
            )
            return

        if len(descriptor.actions) > self.max_native_buttons:
            logger.debug(
                "Too many buttons, sending as list",
                extra={"context": {"jid": jid, "actions": len(descriptor.actions)}},
            )
            await self.transport.send_list(
                jid,
                descriptor.body,
                "📋 Options",
                [buttons_as_section(descriptor)],
                footer=descriptor.footer,
                title=self.list_title,
            )
            return

        await self.transport.send_buttons(jid, descriptor.body, descriptor.actions, footer=descriptor.footer)

"""Event callbacks posted by the Baileys gateway sidecar."""

from typing import Type, TypeVar

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, ValidationError

from nukkad_bot.bot import Bot, get_bot
from nukkad_bot.logging_config import get_logger
from nukkad_bot.schemas.whatsapp import ConnectionUpdate, CredsUpdate, MessagesUpsert, WebhookResponse
from nukkad_bot.services.connection_state import InvalidTransitionError

logger = get_logger("webhook")

router = APIRouter()

PayloadT = TypeVar("PayloadT", bound=BaseModel)


async def _parse_payload(request: Request, model: Type[PayloadT]) -> PayloadT | WebhookResponse:
    try:
        body = await request.json()
    except ValueError:
        logger.warning("Webhook body is not JSON", extra={"context": {"path": request.url.path}})
        return WebhookResponse(success=False, message="Invalid JSON body")
    try:
        return model.model_validate(body)
    except ValidationError as e:
        logger.warning(
            "Webhook payload rejected",
            extra={"context": {"path": request.url.path, "errors": e.error_count()}},
        )
        return WebhookResponse(success=False, message=f"Invalid {model.__name__} payload")


@router.post("/webhook/messages", response_model=WebhookResponse)
async def handle_messages(request: Request, bot: Bot = Depends(get_bot)):
    """Baileys messages.upsert."""
    parsed = await _parse_payload(request, MessagesUpsert)
    if isinstance(parsed, WebhookResponse):
        return parsed

    processed = await bot.manager.handle_upsert(parsed)
    return WebhookResponse(success=True, message="ok", processed=processed)


@router.post("/webhook/connection", response_model=WebhookResponse)
async def handle_connection_update(request: Request, bot: Bot = Depends(get_bot)):
    """Baileys connection.update."""
    parsed = await _parse_payload(request, ConnectionUpdate)
    if isinstance(parsed, WebhookResponse):
        return parsed

    try:
        await bot.manager.on_connection_update(parsed)
    except InvalidTransitionError as e:
        logger.warning(f"Connection update rejected: {e}", extra={"context": {"state": bot.manager.state.value}})
        return WebhookResponse(success=False, message=str(e))
    return WebhookResponse(success=True, message=bot.manager.state.value)


@router.post("/webhook/creds", response_model=WebhookResponse)
async def handle_creds_update(request: Request, bot: Bot = Depends(get_bot)):
    """Baileys creds.update."""
    parsed = await _parse_payload(request, CredsUpdate)
    if isinstance(parsed, WebhookResponse):
        return parsed

    try:
        bot.manager.on_credentials_update(parsed)
    except OSError as e:
        logger.error(f"Failed to persist credentials: {e}")
        return WebhookResponse(success=False, message="Failed to save credentials")
    return WebhookResponse(success=True, message="saved")

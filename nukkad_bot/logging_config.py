"""JSON logging configuration for the Nukkad bot."""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

WHATSAPP_USER_SUFFIX = "@s.whatsapp.net"


class JSONFormatter(logging.Formatter):
    """Format log records as JSON."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if hasattr(record, "context") and record.context:
            log_data["context"] = record.context

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO") -> None:
    """Configure JSON logging for the application."""
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter())
    root_logger.addHandler(handler)

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Get a logger with the given name."""
    return logging.getLogger(f"nukkad.{name}")


def short_jid(jid: str | None) -> str:
    if not jid:
        return "unknown"
    return jid.replace(WHATSAPP_USER_SUFFIX, "")


def log_business(logger: logging.Logger, action: str, user_jid: str | None, message: str | None, **data: Any) -> None:
    """Emit a business event (message received, button click, ...)."""
    context = {"event": "business", "action": action, "user": short_jid(user_jid), "message": message}
    if data:
        context["data"] = data
    logger.info(f"{action}: {message}", extra={"context": context})


_connection_logger = get_logger("connection")


def log_connection(status: str, level: int = logging.INFO, **details: Any) -> None:
    """Emit a connection lifecycle event (QR_GENERATED, CONNECTED, RECONNECTING, ...)."""
    context = {"event": "connection", "status": status}
    context.update(details)
    _connection_logger.log(level, f"WhatsApp {status}", extra={"context": context})


class LoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that adds context to log records."""

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        context = kwargs.pop("context", None)
        if context or self.extra:
            combined_context = {**self.extra, **(context or {})}
            kwargs["extra"] = {"context": combined_context}
        return msg, kwargs

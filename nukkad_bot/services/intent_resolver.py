import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping, Optional, Sequence

from nukkad_bot.logging_config import get_logger
from nukkad_bot.schemas.responses import Reply
from nukkad_bot.schemas.session import UserSession
from nukkad_bot.services.replies import ReplyBuilder, ScreenHandler, ScreenRequest

logger = get_logger("intent_resolver")


class Command(str, Enum):
    GREETING = "greeting"
    MAIN_MENU = "main_menu"
    COLLECTION = "collection"
    PRICING = "pricing"
    ORDER = "order"
    CONTACT = "contact"
    CHANNEL = "channel"
    HOURS = "hours"
    CATEGORY = "category"
    THANKS = "thanks"


@dataclass(frozen=True)
class CommandDefinition:
    command: Command
    triggers: tuple[str, ...]
    argument: Optional[str] = None


# Declaration order is the tie-break for overlapping triggers.
COMMAND_DEFINITIONS: tuple[CommandDefinition, ...] = (
    CommandDefinition(
        Command.GREETING,
        ("hi", "hello", "hey", "namaste", "good morning", "good afternoon", "good evening"),
    ),
    CommandDefinition(Command.MAIN_MENU, ("menu", "options", "help", "start", "0")),
    CommandDefinition(Command.COLLECTION, ("collection", "products", "kurtis", "catalog", "1")),
    CommandDefinition(Command.PRICING, ("price", "pricing", "wholesale", "rates", "cost", "2")),
    CommandDefinition(Command.ORDER, ("order", "buy", "purchase", "place order", "3")),
    CommandDefinition(Command.CONTACT, ("contact", "phone", "number", "address", "4")),
    CommandDefinition(Command.CHANNEL, ("channel", "group", "join", "community", "5")),
    CommandDefinition(Command.HOURS, ("hours", "time", "timing", "open", "close", "6")),
    CommandDefinition(Command.CATEGORY, ("cotton", "cotton kurti", "cotton kurtis"), "Cotton Kurtis"),
    CommandDefinition(Command.CATEGORY, ("rayon", "rayon kurti", "rayon kurtis"), "Rayon Kurtis"),
    CommandDefinition(Command.CATEGORY, ("georgette", "georgette kurti", "georgette kurtis"), "Georgette Kurtis"),
    CommandDefinition(Command.CATEGORY, ("silk", "silk kurti", "silk kurtis"), "Silk Kurtis"),
    CommandDefinition(Command.THANKS, ("thank", "thanks", "thank you", "bye", "goodbye", "see you")),
)

# Keyword hint -> suggestion text key, checked in order on unmatched input.
SUGGESTION_HINTS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("price", "cost", "rate"), "suggestion_pricing"),
    (("product", "kurti", "dress"), "suggestion_collection"),
    (("order", "buy"), "suggestion_order"),
    (("contact", "phone"), "suggestion_contact"),
)


def normalize_input(text: str) -> str:
    return (text or "").strip().lower()


def suggestion_for(normalized: str) -> Optional[str]:
    for keywords, text_key in SUGGESTION_HINTS:
        if any(keyword in normalized for keyword in keywords):
            return text_key
    return None


@dataclass
class _CompiledCommand:
    definition: CommandDefinition
    patterns: tuple[re.Pattern, ...] = field(default_factory=tuple)

    def matches(self, normalized: str) -> bool:
        for trigger, pattern in zip(self.definition.triggers, self.patterns):
            if normalized == trigger or normalized.startswith(trigger) or pattern.search(normalized):
                return True
        return False


class IntentResolver:
    """Ordered trigger matching over free text. First declared command wins."""

    def __init__(
        self,
        definitions: Sequence[CommandDefinition],
        handlers: Mapping[Command, ScreenHandler],
        fallback: ScreenHandler,
    ):
        missing = {definition.command for definition in definitions} - set(handlers)
        if missing:
            raise ValueError(f"No handler for commands: {sorted(command.value for command in missing)}")
        self._commands = [
            _CompiledCommand(
                definition=definition,
                patterns=tuple(
                    re.compile(rf"(?<!\w){re.escape(trigger)}(?!\w)") for trigger in definition.triggers
                ),
            )
            for definition in definitions
        ]
        self._handlers = dict(handlers)
        self._fallback = fallback

    def match(self, text: str) -> Optional[CommandDefinition]:
        normalized = normalize_input(text)
        if not normalized:
            return None
        for compiled in self._commands:
            if compiled.matches(normalized):
                return compiled.definition
        return None

    def resolve(self, text: str, session: UserSession) -> Reply:
        definition = self.match(text)
        if definition is None:
            normalized = normalize_input(text)
            hint = suggestion_for(normalized)
            logger.info(
                "No command matched",
                extra={"context": {"input": normalized[:100], "suggestion": hint}},
            )
            return self._fallback(ScreenRequest(session=session, argument=hint, text=text))

        logger.debug(
            "Command matched",
            extra={"context": {"command": definition.command.value, "argument": definition.argument}},
        )
        handler = self._handlers[definition.command]
        return handler(ScreenRequest(session=session, argument=definition.argument, text=text))


def build_intent_resolver(replies: ReplyBuilder) -> IntentResolver:
    handlers: dict[Command, ScreenHandler] = {
        Command.GREETING: replies.greeting,
        Command.MAIN_MENU: replies.main_menu,
        Command.COLLECTION: replies.collection,
        Command.PRICING: replies.pricing,
        Command.ORDER: replies.order,
        Command.CONTACT: replies.contact,
        Command.CHANNEL: replies.channel,
        Command.HOURS: replies.hours,
        Command.CATEGORY: replies.category_details,
        Command.THANKS: replies.thanks,
    }
    return IntentResolver(COMMAND_DEFINITIONS, handlers, fallback=replies.unknown_command)

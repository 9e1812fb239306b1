from enum import Enum
from typing import Optional


class ConnectionState(str, Enum):
    DISCONNECTED = "disconnected"
    PAIRING = "pairing"
    CONNECTED = "connected"
    RECONNECTING = "reconnecting"
    LOGGED_OUT = "logged_out"


VALID_TRANSITIONS = {
    ConnectionState.DISCONNECTED: [ConnectionState.PAIRING],
    ConnectionState.PAIRING: [
        ConnectionState.CONNECTED,
        ConnectionState.RECONNECTING,
        ConnectionState.DISCONNECTED,
        ConnectionState.LOGGED_OUT,
    ],
    ConnectionState.CONNECTED: [
        ConnectionState.RECONNECTING,
        ConnectionState.DISCONNECTED,
        ConnectionState.LOGGED_OUT,
    ],
    ConnectionState.RECONNECTING: [
        ConnectionState.PAIRING,
        ConnectionState.CONNECTED,
        ConnectionState.DISCONNECTED,
        ConnectionState.LOGGED_OUT,
    ],
    ConnectionState.LOGGED_OUT: [ConnectionState.PAIRING, ConnectionState.DISCONNECTED],
}


class InvalidTransitionError(Exception):
    def __init__(self, from_state: ConnectionState, to_state: ConnectionState):
        self.from_state = from_state
        self.to_state = to_state
        super().__init__(f"Invalid transition: {from_state.value} -> {to_state.value}")


def can_transition(from_state: ConnectionState, to_state: ConnectionState) -> bool:
    """Check if transition is valid."""
    allowed = VALID_TRANSITIONS.get(from_state, [])
    return to_state in allowed


def transition(from_state: ConnectionState, to_state: ConnectionState) -> ConnectionState:
    """Perform state transition. Raises InvalidTransitionError if not allowed."""
    if not can_transition(from_state, to_state):
        raise InvalidTransitionError(from_state, to_state)
    return to_state


class DisconnectCause(str, Enum):
    NETWORK_DROP = "network_drop"
    TIMEOUT = "timeout"
    CONNECTION_CLOSED = "connection_closed"
    CONNECTION_REPLACED = "connection_replaced"
    RESTART_REQUIRED = "restart_required"
    SERVICE_UNAVAILABLE = "service_unavailable"
    LOGGED_OUT = "logged_out"
    FORBIDDEN = "forbidden"
    BAD_SESSION = "bad_session"


TERMINAL_CAUSES = {DisconnectCause.LOGGED_OUT, DisconnectCause.FORBIDDEN, DisconnectCause.BAD_SESSION}

# States left only by a new pairing cycle
TERMINAL_STATES = {ConnectionState.DISCONNECTED, ConnectionState.LOGGED_OUT}

# Baileys DisconnectReason status codes
STATUS_CODE_CAUSES = {
    401: DisconnectCause.LOGGED_OUT,
    403: DisconnectCause.FORBIDDEN,
    500: DisconnectCause.BAD_SESSION,
    408: DisconnectCause.TIMEOUT,
    428: DisconnectCause.CONNECTION_CLOSED,
    440: DisconnectCause.CONNECTION_REPLACED,
    515: DisconnectCause.RESTART_REQUIRED,
    503: DisconnectCause.SERVICE_UNAVAILABLE,
}


def _normalize_reason(reason: str) -> str:
    """'loggedOut' / 'logged-out' / 'LOGGED_OUT' -> 'logged_out'."""
    out = []
    previous = ""
    for char in reason.strip():
        if char.isupper() and previous.islower():
            out.append("_")
        out.append("_" if char in "- " else char.lower())
        previous = char
    return "".join(out)


def classify_disconnect(status_code: Optional[int] = None, reason: Optional[str] = None) -> DisconnectCause:
    """Map a close event to a cause. A known `reason` wins over the status code."""
    if reason:
        try:
            return DisconnectCause(_normalize_reason(reason))
        except ValueError:
            pass
    if status_code is not None:
        return STATUS_CODE_CAUSES.get(status_code, DisconnectCause.NETWORK_DROP)
    return DisconnectCause.NETWORK_DROP


def is_terminal(cause: DisconnectCause) -> bool:
    return cause in TERMINAL_CAUSES


def terminal_state_for(cause: DisconnectCause) -> ConnectionState:
    if cause == DisconnectCause.LOGGED_OUT:
        return ConnectionState.LOGGED_OUT
    return ConnectionState.DISCONNECTED

import threading
from datetime import datetime
from typing import Callable, Optional, Union

from nukkad_bot.logging_config import get_logger
from nukkad_bot.schemas.session import SessionUpdate, UserSession, utc_now

logger = get_logger("session_store")


class SessionStore:
    """In-memory per-user sessions keyed by WhatsApp JID.

    Sessions live for the process lifetime and are never evicted. Readers get a
    snapshot; the only way to change a session is `patch`. No lock is held across
    a turn, so two concurrent turns for one JID resolve last-writer-wins.
    """

    def __init__(self, clock: Callable[[], datetime] = utc_now):
        self._clock = clock
        self._sessions: dict[str, UserSession] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def _get_or_create_locked(self, jid: str) -> UserSession:
        session = self._sessions.get(jid)
        if session is None:
            session = UserSession(id=jid, last_interaction=self._clock())
            self._sessions[jid] = session
            logger.debug(f"Created session for {jid}")
        return session

    def get_or_create(self, jid: str) -> UserSession:
        """Find session by JID or create a fresh one (first-time, main menu)."""
        with self._lock:
            return self._get_or_create_locked(jid).model_copy(deep=True)

    def patch(self, jid: str, updates: Union[SessionUpdate, dict, None]) -> UserSession:
        """Merge `updates` into the session and refresh last_interaction."""
        if updates is None:
            updates = SessionUpdate()
        elif isinstance(updates, dict):
            updates = SessionUpdate.model_validate(updates)

        changes = updates.model_dump(exclude_unset=True)

        with self._lock:
            session = self._get_or_create_locked(jid)
            for field in ("order_data", "preferences"):
                merged = changes.pop(field, None)
                if merged is not None:
                    changes[field] = {**getattr(session, field), **merged}

            # last_interaction never moves backwards even if the clock does
            now = self._clock()
            changes["last_interaction"] = max(session.last_interaction, now)

            updated = session.model_copy(update=changes, deep=True)
            self._sessions[jid] = updated
            return updated.model_copy(deep=True)

    def peek(self, jid: str) -> Optional[UserSession]:
        with self._lock:
            session = self._sessions.get(jid)
            return session.model_copy(deep=True) if session else None

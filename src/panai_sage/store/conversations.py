"""In-memory conversation history keyed by session id."""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

from panai_sage.errors import NotFoundError

logger = logging.getLogger(__name__)

MAX_HISTORY = 20  # 10 user/model exchanges
ACTIVE_WINDOW = timedelta(seconds=300)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Turn:
    """One message in a conversation."""
    role: str  # "user" or "model"
    text: str


@dataclass
class ConversationSession:
    """A caller-identified conversation and its bounded history."""
    id: str
    history: list[Turn] = field(default_factory=list)
    created_at: datetime = field(default_factory=utcnow)
    last_active: datetime = field(default_factory=utcnow)

    @property
    def message_count(self) -> int:
        return len(self.history) // 2

    def is_active(self, now: datetime | None = None) -> bool:
        return (now or utcnow()) - self.last_active < ACTIVE_WINDOW


class ConversationStore:
    """
    Session id -> history mapping.

    - Lazy creation: sessions created on first reference
    - History capped at MAX_HISTORY entries, oldest dropped first
    - Sessions removed by explicit clear or by cleanup_expired()

    Every method is synchronous, so a mutation can never interleave with
    another coroutine on the event loop.
    """

    def __init__(self):
        self._sessions: dict[str, ConversationSession] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions

    def get(self, session_id: str) -> ConversationSession | None:
        return self._sessions.get(session_id)

    def get_or_create(self, session_id: str) -> ConversationSession:
        session = self._sessions.get(session_id)
        if session is None:
            session = ConversationSession(id=session_id)
            self._sessions[session_id] = session
            logger.info("Created session %s", session_id)
        return session

    def touch(self, session_id: str) -> ConversationSession:
        """Mark a session as recently used, creating it if needed."""
        session = self.get_or_create(session_id)
        session.last_active = utcnow()
        return session

    def append_exchange(
        self, session_id: str, user_text: str, model_text: str, create: bool = True
    ) -> ConversationSession | None:
        """
        Append a user/model pair and trim to the most recent entries.

        With create=False a session that no longer exists (cleared or evicted)
        is left alone and None is returned.
        """
        if create:
            session = self.get_or_create(session_id)
        else:
            session = self._sessions.get(session_id)
            if session is None:
                logger.info("Session %s was removed, dropping exchange", session_id)
                return None
        history = session.history + [Turn("user", user_text), Turn("model", model_text)]
        session.history = history[-MAX_HISTORY:]
        session.last_active = utcnow()
        return session

    def list(self) -> list[ConversationSession]:
        return list(self._sessions.values())

    def clear(self, session_id: str) -> int:
        """
        Remove one session, or every session when session_id is "all".

        Returns the number of sessions removed.
        """
        if session_id == "all":
            count = len(self._sessions)
            self._sessions.clear()
            logger.info("Cleared all %d sessions", count)
            return count

        if session_id not in self._sessions:
            raise NotFoundError(
                "The session ID does not exist",
                error="Session not found",
                sessionId=session_id,
            )
        del self._sessions[session_id]
        logger.info("Cleared session %s", session_id)
        return 1

    def cleanup_expired(self, ttl_seconds: int) -> int:
        """Remove sessions idle for longer than ttl_seconds. Returns count removed."""
        cutoff = utcnow() - timedelta(seconds=ttl_seconds)
        expired = [
            sid for sid, session in self._sessions.items()
            if session.last_active < cutoff
        ]
        for sid in expired:
            del self._sessions[sid]
        return len(expired)

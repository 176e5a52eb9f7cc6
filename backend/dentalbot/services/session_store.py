"""
In-memory session store for chatbot conversations.
"""
import logging
import threading
from datetime import datetime, timedelta
from typing import Callable, Dict, List, Optional

from dentalbot.models.chat import ChatSession, ConversationStep, PatientInfo
from dentalbot.utils.helpers import utc_now

logger = logging.getLogger("dentalbot.services.session_store")


class SessionStore:
    """
    Keyed container of chat sessions.

    Sessions live for the process lifetime unless deleted, or unless an
    eviction policy is configured:
    - ttl_seconds: sessions idle longer than this are dropped
    - max_sessions: creating a session at capacity evicts the least
      recently updated one

    Sessions marked busy (a turn is running on them) are never expired or
    evicted.
    """

    def __init__(
        self,
        ttl_seconds: Optional[float] = None,
        max_sessions: Optional[int] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._sessions: Dict[str, ChatSession] = {}
        self._lock = threading.RLock()
        self._ttl = timedelta(seconds=ttl_seconds) if ttl_seconds else None
        self._max_sessions = max_sessions
        self._clock = clock
        # session_id -> number of turns currently running on it
        self._busy: Dict[str, int] = {}

    def get_or_create(self, session_id: str, user_id: str) -> ChatSession:
        """Return the session for session_id, creating it on first reference."""
        with self._lock:
            session = self._sessions.get(session_id)
            if session is not None and not self._is_expired(session):
                return session
            if session is not None:
                del self._sessions[session_id]
                logger.info(f"Session expired: {session_id}")

            self._make_room()
            now = self._clock()
            session = ChatSession(
                id=session_id,
                user_id=user_id,
                messages=[],
                current_step=ConversationStep.WELCOME,
                patient_info=PatientInfo(),
                created_at=now,
                updated_at=now,
            )
            self._sessions[session_id] = session
            logger.info(f"Created chat session: {session_id} (user {user_id})")
            return session

    def get(self, session_id: str) -> Optional[ChatSession]:
        """Get a session by ID."""
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                return None
            if self._is_expired(session):
                del self._sessions[session_id]
                logger.info(f"Session expired: {session_id}")
                return None
            return session

    def delete(self, session_id: str) -> bool:
        """Delete a session. Returns True if it existed."""
        with self._lock:
            session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        logger.info(f"Deleted chat session: {session_id}")
        return True

    def list_all(self) -> List[ChatSession]:
        """Snapshot of all live sessions in insertion order."""
        with self._lock:
            self.purge_expired()
            return list(self._sessions.values())

    def purge_expired(self) -> int:
        """Drop every expired session and return how many were removed."""
        if self._ttl is None:
            return 0
        with self._lock:
            expired = [sid for sid, s in self._sessions.items() if self._is_expired(s)]
            for sid in expired:
                del self._sessions[sid]
        if expired:
            logger.info(f"Purged {len(expired)} expired sessions")
        return len(expired)

    def mark_busy(self, session_id: str):
        """Protect a session from expiry and eviction while a turn runs on it."""
        with self._lock:
            self._busy[session_id] = self._busy.get(session_id, 0) + 1

    def mark_idle(self, session_id: str):
        """Release one mark_busy() call."""
        with self._lock:
            remaining = self._busy.get(session_id, 0) - 1
            if remaining > 0:
                self._busy[session_id] = remaining
            else:
                self._busy.pop(session_id, None)

    def is_busy(self, session_id: str) -> bool:
        with self._lock:
            return session_id in self._busy

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def _is_expired(self, session: ChatSession) -> bool:
        if self._ttl is None or session.id in self._busy:
            return False
        return self._clock() - session.updated_at > self._ttl

    def _make_room(self):
        # Caller holds the lock
        if self._max_sessions is None:
            return
        self.purge_expired()
        while len(self._sessions) >= self._max_sessions:
            idle = [s for s in self._sessions.values() if s.id not in self._busy]
            if not idle:
                logger.warning(
                    f"All {len(self._sessions)} sessions are busy; "
                    f"exceeding MAX_SESSIONS={self._max_sessions} until a turn finishes"
                )
                return
            oldest = min(idle, key=lambda s: s.updated_at)
            del self._sessions[oldest.id]
            logger.info(f"Evicted least recently updated session: {oldest.id}")

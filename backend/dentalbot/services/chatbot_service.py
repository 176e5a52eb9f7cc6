"""
Chatbot service: runs one conversation turn end to end.
"""
import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Callable, Dict, List, Optional

from dentalbot.models.chat import BotResponse, ChatMessage, ChatSession, MessageRole
from dentalbot.services.dialogue_engine import DialogueEngine
from dentalbot.services.image_analysis import ImageAnalysisClient, ImageAnalysisError
from dentalbot.services.session_store import SessionStore
from dentalbot.utils.helpers import generate_id, utc_now

logger = logging.getLogger("dentalbot.services.chatbot")


class _SessionLock:
    """A turn lock plus the number of turns holding or waiting on it."""

    def __init__(self):
        self.lock = asyncio.Lock()
        self.users = 0


class ChatbotService:
    """Composes the session store, dialogue engine and image analysis client."""

    def __init__(
        self,
        store: SessionStore,
        engine: DialogueEngine,
        analysis_client: ImageAnalysisClient,
        id_factory: Callable[[], str] = generate_id,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.store = store
        self.engine = engine
        self.analysis_client = analysis_client
        self._id_factory = id_factory
        self._clock = clock
        self._session_locks: Dict[str, _SessionLock] = {}

    async def process_message(
        self,
        session_id: str,
        user_id: str,
        message: str,
        attachments: Optional[List[str]] = None,
    ) -> BotResponse:
        """
        Process one user turn.

        Turns for the same session are handled one at a time; turns for
        different sessions run concurrently.

        Args:
            session_id: Caller-supplied session identifier
            user_id: Owner of the session (used when it is created)
            message: Raw user text
            attachments: Optional local image paths; only the first is analysed

        Returns:
            The bot response for this turn
        """
        async with self._session_turn(session_id):
            session = self.store.get_or_create(session_id, user_id)
            # Busy sessions are skipped by expiry and capacity eviction
            self.store.mark_busy(session_id)
            try:
                session.messages.append(ChatMessage(
                    id=self._id_factory(),
                    role=MessageRole.USER,
                    content=message,
                    timestamp=self._clock(),
                    attachments=list(attachments) if attachments else None,
                ))

                response = await self._generate_response(session, message, attachments)

                session.messages.append(ChatMessage(
                    id=self._id_factory(),
                    role=MessageRole.BOT,
                    content=response.message,
                    timestamp=self._clock(),
                ))

                session.current_step = response.next_step or session.current_step
                session.updated_at = self._clock()
                return response
            finally:
                self.store.mark_idle(session_id)

    async def _generate_response(
        self,
        session: ChatSession,
        message: str,
        attachments: Optional[List[str]],
    ) -> BotResponse:
        # Attachments always take priority over the current step
        if attachments:
            return await self._handle_image_upload(session, attachments[0])
        return self.engine.respond(session, message)

    async def _handle_image_upload(self, session: ChatSession, image_path: str) -> BotResponse:
        logger.info(f"Processing image upload for session {session.id}")
        try:
            result = await self.analysis_client.analyze(image_path)
        except ImageAnalysisError as e:
            logger.error(f"Image analysis failed for session {session.id}: {type(e).__name__}: {e}")
            return self.engine.analysis_failed_response()
        return self.engine.analysis_response(result)

    @asynccontextmanager
    async def _session_turn(self, session_id: str):
        """Hold the session's turn lock; the entry is dropped once no turn uses it."""
        entry = self._session_locks.get(session_id)
        if entry is None:
            entry = _SessionLock()
            self._session_locks[session_id] = entry
        entry.users += 1
        try:
            async with entry.lock:
                yield
        finally:
            entry.users -= 1
            if entry.users == 0:
                del self._session_locks[session_id]

    def get_session(self, session_id: str) -> Optional[ChatSession]:
        """Get a session by ID."""
        return self.store.get(session_id)

    def get_all_sessions(self) -> List[ChatSession]:
        """List all live sessions."""
        return self.store.list_all()

    def delete_session(self, session_id: str) -> bool:
        """Delete a session. Returns True if it existed."""
        return self.store.delete(session_id)

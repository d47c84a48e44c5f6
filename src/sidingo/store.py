import logging
import random
from datetime import datetime, timedelta
from typing import Dict, Optional, Sequence

from .config import settings
from .content import ContentGenerator
from .models import VocabularyEntry
from .session import LessonRules, LessonSession

logger = logging.getLogger(__name__)


class SessionStore:
    """In-memory lessons keyed by cookie id. Nothing survives a restart."""

    def __init__(self, timeout_minutes: int = settings.SESSION_TIMEOUT_MINUTES):
        self.timeout = timedelta(minutes=timeout_minutes)
        self.sessions: Dict[str, LessonSession] = {}

    def create(
        self,
        catalog: Sequence[VocabularyEntry],
        generator: ContentGenerator,
        rng: Optional[random.Random] = None,
        rules: Optional[LessonRules] = None,
    ) -> LessonSession:
        self.purge_expired()
        session = LessonSession(catalog, generator, rng=rng, rules=rules)
        self.sessions[session.session_id] = session
        logger.info(
            f"New session: {session.session_id} [{len(session.state.queue)} items]"
        )
        return session

    def get(self, session_id: Optional[str]) -> Optional[LessonSession]:
        if not session_id or session_id not in self.sessions:
            return None
        session = self.sessions[session_id]
        if datetime.now() - session.last_seen > self.timeout:
            logger.info(f"Session {session_id} expired")
            self.discard(session_id)
            return None
        return session

    def discard(self, session_id: Optional[str]):
        session = self.sessions.pop(session_id, None) if session_id else None
        if session is not None:
            session.close()

    def purge_expired(self):
        now = datetime.now()
        expired = [
            sid for sid, s in self.sessions.items() if now - s.last_seen > self.timeout
        ]
        for sid in expired:
            self.discard(sid)

    def close_all(self):
        for sid in list(self.sessions):
            self.discard(sid)

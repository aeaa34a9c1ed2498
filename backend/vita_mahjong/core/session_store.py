"""In-memory store of running game sessions."""
import logging
import time
import uuid
from typing import Callable, Dict, List, Optional

from ..config import get_settings
from ..models.game_config import Difficulty, GameRules
from .errors import SessionNotFoundError
from .game_engine import GameSession

logger = logging.getLogger(__name__)


class SessionStore:
    """Keeps every live GameSession by id and drops the ones left idle."""

    def __init__(
        self,
        rules: Optional[GameRules] = None,
        ttl_seconds: Optional[float] = None,
        clock: Optional[Callable[[], float]] = None,
    ):
        """
        Initialize session store.

        Args:
            rules: Rules for new sessions (defaults to settings).
            ttl_seconds: Idle time after which a session is evicted;
                0 or less keeps sessions forever.
            clock: Time source for last-access bookkeeping.
        """
        self._rules = rules
        self.ttl_seconds = (
            ttl_seconds if ttl_seconds is not None else get_settings().session_ttl_seconds
        )
        self._clock = clock or time.monotonic
        self._sessions: Dict[str, GameSession] = {}
        self._last_access: Dict[str, float] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def create(self, difficulty: Difficulty = Difficulty.MEDIUM, level: int = 1) -> GameSession:
        """Start a new game and register it."""
        session_id = uuid.uuid4().hex
        rules = self._rules or get_settings().build_game_rules()
        session = GameSession(
            difficulty=difficulty,
            level=level,
            rules=rules,
            session_id=session_id,
        )
        self._sessions[session_id] = session
        self._last_access[session_id] = self._clock()
        return session

    def get(self, session_id: str) -> GameSession:
        try:
            session = self._sessions[session_id]
        except KeyError:
            raise SessionNotFoundError(session_id) from None
        self._last_access[session_id] = self._clock()
        return session

    def delete(self, session_id: str) -> None:
        if self._sessions.pop(session_id, None) is None:
            raise SessionNotFoundError(session_id)
        self._last_access.pop(session_id, None)
        logger.info("Session %s closed", session_id)

    def list_ids(self) -> List[str]:
        return list(self._sessions.keys())

    def evict_idle(self) -> List[GameSession]:
        """Remove sessions idle longer than the TTL and return them."""
        if self.ttl_seconds <= 0:
            return []

        now = self._clock()
        stale = [
            sid for sid, seen in self._last_access.items()
            if now - seen > self.ttl_seconds
        ]
        evicted = []
        for sid in stale:
            evicted.append(self._sessions.pop(sid))
            del self._last_access[sid]

        if evicted:
            logger.info("Evicted %d idle sessions", len(evicted))
        return evicted

    async def close_idle(self) -> int:
        """Evict idle sessions and disconnect their commentary."""
        evicted = self.evict_idle()
        for session in evicted:
            await session.close_commentary()
        return len(evicted)


# Singleton instance
_store: Optional[SessionStore] = None


def get_session_store() -> SessionStore:
    """Get or create session store singleton instance."""
    global _store
    if _store is None:
        _store = SessionStore()
    return _store

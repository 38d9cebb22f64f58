"""
In-memory calculator session store.

Sessions live for the lifetime of the process. When the store is full the
oldest session is evicted.
"""

import logging
import uuid
from typing import Dict, Optional

from app.calculator.session import CalculatorSession
from app.config import get_settings

logger = logging.getLogger(__name__)


class SessionNotFoundError(KeyError):
    """Raised when a session id is unknown."""


class SessionStore:
    """Registry of calculator sessions keyed by id."""

    def __init__(self, max_sessions: Optional[int] = None):
        if max_sessions is None:
            max_sessions = get_settings().max_sessions
        self.max_sessions = max_sessions
        self._sessions: Dict[str, CalculatorSession] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def create(self) -> str:
        """Create a session and return its id."""
        while self._sessions and len(self._sessions) >= self.max_sessions:
            oldest = next(iter(self._sessions))
            del self._sessions[oldest]
            logger.info(f"Session store full, evicted session {oldest}")

        session_id = str(uuid.uuid4())
        self._sessions[session_id] = CalculatorSession()
        logger.info(f"Created calculator session {session_id}")
        return session_id

    def get(self, session_id: str) -> CalculatorSession:
        """
        Look up a session.

        Raises:
            SessionNotFoundError: If no session has this id
        """
        try:
            return self._sessions[session_id]
        except KeyError:
            raise SessionNotFoundError(session_id) from None

    def delete(self, session_id: str) -> bool:
        """Delete a session. Returns False if it did not exist."""
        return self._sessions.pop(session_id, None) is not None


# Singleton instance
_session_store: Optional[SessionStore] = None


def get_session_store() -> SessionStore:
    """Get the session store singleton."""
    global _session_store
    if _session_store is None:
        _session_store = SessionStore()
    return _session_store

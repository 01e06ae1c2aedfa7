"""In-memory registry of feed sessions, one per user.

Sessions are kept in-process only and are lost on restart; the learning
items themselves live in the item repository.
"""

from __future__ import annotations

from typing import Optional

from learnfeed.core.logging import get_logger
from learnfeed.modules.learning.session import SessionEngine, SessionState

logger = get_logger(__name__)


class SessionManager:
    def __init__(self, engine: SessionEngine) -> None:
        self.engine = engine
        self.sessions: dict[str, SessionState] = {}

    def get(self, user_id: str) -> Optional[SessionState]:
        return self.sessions.get(user_id)

    async def open(self, user_id: str, *, xp: int = 0) -> SessionState:
        """Start a fresh session, replacing any existing one for the user.

        The session is registered even when the feed turns out empty, so the
        caller can show the empty state and shuffle later.
        """
        session = SessionState(user_id=user_id, xp=max(0, int(xp)))
        self.sessions[user_id] = session
        logger.info("Opening feed session", extra={"user_id": user_id})
        return await self.engine.load(session)

    async def get_or_open(self, user_id: str) -> SessionState:
        session = self.sessions.get(user_id)
        if session is None:
            return await self.open(user_id)
        return session

    async def shuffle(self, user_id: str) -> SessionState:
        """Re-fetch and re-shuffle the user's items, keeping streak and XP."""
        session = self.sessions.get(user_id)
        if session is None:
            return await self.open(user_id)
        return await self.engine.load(session)

    def end(self, user_id: str) -> bool:
        return self.sessions.pop(user_id, None) is not None

"""Feed session engine: queue composition, scoring, streak and XP.

A session holds a shuffled queue of every question and flashcard the user
owns and walks it circularly. Questions score by exact string match against
``correct_answer``; flashcards score by the user's own rating, where "easy"
counts as correct. There is no interval scheduling: a "hard" card comes back
when the circular walk reaches it again, same as any other item.

Sessions are single-actor and live in process memory only.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Protocol, Union

from learnfeed.core.errors import EmptyFeed, OutOfRange, ValidationError
from learnfeed.core.logging import get_logger
from learnfeed.modules.learning.models import (
    AnswerOutcome,
    Flashcard,
    LearningItem,
    Question,
    Rating,
)

logger = get_logger(__name__)

DEFAULT_XP_PER_CORRECT = 10


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


class SessionStatus(str, Enum):
    EMPTY = "empty"
    READY = "ready"


class ItemSource(Protocol):
    async def get_questions_by_user(self, user_id: str) -> list[Question]: ...

    async def get_flashcards_by_user(self, user_id: str) -> list[Flashcard]: ...


@dataclass
class SessionState:
    user_id: str
    queue: list[LearningItem] = field(default_factory=list)
    position: int = 0
    streak: int = 0
    xp: int = 0
    started_at: datetime = field(default_factory=_now_utc)

    @property
    def status(self) -> SessionStatus:
        return SessionStatus.READY if self.queue else SessionStatus.EMPTY


class SessionEngine:
    def __init__(
        self,
        items: ItemSource,
        *,
        xp_per_correct: int = DEFAULT_XP_PER_CORRECT,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.items = items
        self.xp_per_correct = max(0, int(xp_per_correct))
        self._rng = rng or random.Random()

    # Composition --------------------------------------------------------
    async def compose_feed(self, user_id: str) -> list[LearningItem]:
        """Return a uniformly shuffled queue of all items owned by ``user_id``.

        Raises ``EmptyFeed`` when the user owns nothing. Repository errors
        propagate unchanged.
        """
        questions = await self.items.get_questions_by_user(user_id)
        flashcards = await self.items.get_flashcards_by_user(user_id)
        queue: list[LearningItem] = [*questions, *flashcards]
        if not queue:
            raise EmptyFeed("No learning items yet", details={"user_id": user_id})
        # Random.shuffle is Fisher-Yates
        self._rng.shuffle(queue)
        logger.debug(
            "Composed feed: %d questions, %d flashcards",
            len(questions),
            len(flashcards),
            extra={"user_id": user_id},
        )
        return queue

    async def load(self, session: SessionState) -> SessionState:
        """(Re)build the session queue and rewind to the first item.

        Streak and XP carry over, so this also serves as "shuffle". On
        ``EmptyFeed`` the session is left EMPTY and the error re-raised.
        """
        try:
            queue = await self.compose_feed(session.user_id)
        except EmptyFeed:
            session.queue = []
            session.position = 0
            raise
        session.queue = queue
        session.position = 0
        return session

    # Navigation ---------------------------------------------------------
    def current_item(self, session: SessionState) -> LearningItem:
        self._require_ready(session)
        if session.position < 0 or session.position >= len(session.queue):
            raise OutOfRange(
                f"position {session.position} outside queue of {len(session.queue)}",
                details={"position": session.position, "size": len(session.queue)},
            )
        return session.queue[session.position]

    def advance(self, session: SessionState) -> int:
        """Step to the next item without scoring; wraps after the last one."""
        self._require_ready(session)
        session.position = (session.position + 1) % len(session.queue)
        return session.position

    def progress(self, session: SessionState) -> tuple[int, int]:
        """One-based position and queue length, for progress display."""
        if session.status is SessionStatus.EMPTY:
            return 0, 0
        return session.position + 1, len(session.queue)

    def upcoming(self, session: SessionState, n: int = 3) -> list[LearningItem]:
        """Preview of the next ``n`` items; stops at the end of the queue."""
        if session.status is SessionStatus.EMPTY:
            return []
        start = session.position + 1
        return list(session.queue[start : start + max(0, n)])

    # Scoring ------------------------------------------------------------
    def submit_answer(
        self, session: SessionState, response: Union[str, Rating]
    ) -> AnswerOutcome:
        """Score ``response`` against the current item and move on.

        For a question the response is the chosen option text; for a
        flashcard it is a ``Rating`` (or its string value).
        """
        item = self.current_item(session)
        if isinstance(item, Question):
            if not isinstance(response, str) or isinstance(response, Rating):
                raise ValidationError("Question answers must be option text")
            is_correct = response == item.correct_answer
        else:
            try:
                rating = Rating(response)
            except ValueError:
                raise ValidationError(
                    "Flashcard rating must be 'easy' or 'hard'",
                    details={"rating": str(response)},
                ) from None
            is_correct = rating is Rating.EASY

        if is_correct:
            session.streak += 1
            session.xp += self.xp_per_correct
        else:
            session.streak = 0
        position = self.advance(session)

        return AnswerOutcome(
            item_id=item.id,
            is_correct=is_correct,
            streak_after=session.streak,
            xp_after=session.xp,
            position=position,
            correct_answer=item.correct_answer if isinstance(item, Question) else None,
            explanation=item.explanation if isinstance(item, Question) else None,
        )

    @staticmethod
    def _require_ready(session: SessionState) -> None:
        if session.status is SessionStatus.EMPTY:
            raise EmptyFeed("Feed is empty", details={"user_id": session.user_id})


__all__ = [
    "ItemSource",
    "SessionEngine",
    "SessionState",
    "SessionStatus",
]
